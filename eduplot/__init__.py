from .axes import (
    AxisDomain,
    AxisResult,
    CategoryXAxis,
    NumericXAxis,
    YAxis,
    compute_and_render_x_axis,
    compute_and_render_y_axis,
    draw_chart_title,
)
from .errors import (
    CanvasError,
    InvalidAxisDomainError,
    InvalidCategoriesError,
    InvalidDimensionsError,
    InvalidLineEquationError,
    InvalidTickIntervalError,
    LabelPlacementError,
    PlotError,
    TickGridAlignmentError,
    UnsupportedTickIntervalError,
)
from .chart import ChartMapping, ChartOptions, setup_chart_axes
from .geometry import (
    PlotDistance,
    PlotLine,
    PlotPoint,
    PlotPolygon,
    render_distances,
    render_lines,
    render_points,
    render_polygons,
    render_polylines,
)
from .layout import ChartArea, Extents, FinalizedSvg, select_axis_labels
from .plane import PlaneAxis, PlaneMapping, PlaneOptions, setup_coordinate_plane
from .svg import PathBuilder, SvgCanvas, to_svg_document
from .theme import DEFAULT_THEME, ThemeTokens, validate_theme_tokens
from .ticks import TickSet, build_ticks

__all__ = [
    "AxisDomain",
    "AxisResult",
    "CanvasError",
    "CategoryXAxis",
    "ChartMapping",
    "ChartOptions",
    "ChartArea",
    "DEFAULT_THEME",
    "Extents",
    "FinalizedSvg",
    "InvalidAxisDomainError",
    "InvalidCategoriesError",
    "InvalidDimensionsError",
    "InvalidLineEquationError",
    "InvalidTickIntervalError",
    "LabelPlacementError",
    "NumericXAxis",
    "PathBuilder",
    "PlaneAxis",
    "PlaneMapping",
    "PlaneOptions",
    "PlotDistance",
    "PlotError",
    "PlotLine",
    "PlotPoint",
    "PlotPolygon",
    "SvgCanvas",
    "ThemeTokens",
    "TickGridAlignmentError",
    "TickSet",
    "UnsupportedTickIntervalError",
    "YAxis",
    "build_ticks",
    "compute_and_render_x_axis",
    "compute_and_render_y_axis",
    "draw_chart_title",
    "render_distances",
    "render_lines",
    "render_points",
    "render_polygons",
    "render_polylines",
    "select_axis_labels",
    "setup_chart_axes",
    "setup_coordinate_plane",
    "to_svg_document",
    "validate_theme_tokens",
]
