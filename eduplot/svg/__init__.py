from .canvas import ClippedCanvas, GradientStop, LegendRow, Rotation, SvgCanvas
from .document import to_svg_document
from .path import PathBuilder

__all__ = [
    "ClippedCanvas",
    "GradientStop",
    "LegendRow",
    "PathBuilder",
    "Rotation",
    "SvgCanvas",
    "to_svg_document",
]
