from __future__ import annotations

from ..constants import DEFAULT_FONT_FAMILY, DEFAULT_FONT_PX
from ..layout import FinalizedSvg
from ..text import format_number

SVG_NS = "http://www.w3.org/2000/svg"


def to_svg_document(
    finalized: FinalizedSvg,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_px: float = DEFAULT_FONT_PX,
) -> str:
    """Wrap finalized canvas output in a standalone `<svg>` element sized to its viewBox."""

    return (
        f'<svg width="{finalized.width}" height="{finalized.height}" viewBox="{finalized.view_box}" '
        f'xmlns="{SVG_NS}" font-family="{font_family}" font-size="{format_number(font_px)}">'
        f"{finalized.svg_body}</svg>"
    )
