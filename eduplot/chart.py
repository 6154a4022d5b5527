from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from .axes import (
    CategoryXAxis,
    XAxis,
    YAxis,
    compute_and_render_x_axis,
    compute_and_render_y_axis,
    draw_chart_title,
    validate_numeric_axis,
    validate_x_axis,
)
from .constants import PADDING_PX
from .errors import InvalidDimensionsError
from .layout import ChartArea, calculate_right_y_axis_layout, calculate_x_axis_layout, calculate_y_axis_layout
from .svg.canvas import SvgCanvas
from .theme import DEFAULT_THEME, ThemeTokens
from .ticks import build_ticks

LOGGER = logging.getLogger(__name__)

CHART_MARGIN_TOP_PX = 30.0
CHART_MARGIN_RIGHT_PX = 20.0


@dataclass(frozen=True)
class ChartOptions:
    width: float
    height: float
    x_axis: XAxis
    y_axis: YAxis
    title: str | None = None


@dataclass(frozen=True)
class ChartMapping:
    to_svg_x: Callable[[float], float]
    to_svg_y: Callable[[float], float]
    chart_area: ChartArea
    band_width: float | None


def setup_chart_axes(
    options: ChartOptions,
    canvas: SvgCanvas,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> ChartMapping:
    """Lay out title and margins for a chart with edge axes, then draw both axes.

    Categorical x-axes map category indices to band centers, so callers
    position bars with `to_svg_x(index)`.
    """

    if options.width <= 0 or options.height <= 0:
        raise InvalidDimensionsError(options.width, options.height)
    validate_x_axis(options.x_axis)

    y_axis = options.y_axis
    if y_axis.categories is None:
        if y_axis.domain is None or y_axis.tick_interval is None:
            raise ValueError("numeric y-axis requires domain and tick_interval")
        validate_numeric_axis("y", y_axis.domain, y_axis.tick_interval)
        y_labels = list(build_ticks(y_axis.domain.min, y_axis.domain.max, y_axis.tick_interval).labels)
    else:
        y_labels = list(y_axis.categories)

    top = CHART_MARGIN_TOP_PX
    if options.title:
        top = max(top, draw_chart_title(canvas, options.title, options.width, theme=theme) + 10.0)

    estimated_height = options.height - top - PADDING_PX
    if y_axis.placement == "right":
        right, title_inset = calculate_right_y_axis_layout(y_labels, y_axis.label or None, estimated_height)
        left = CHART_MARGIN_RIGHT_PX
        title_x = options.width - title_inset
    else:
        left, title_x = calculate_y_axis_layout(y_labels, y_axis.label or None, estimated_height)
        right = CHART_MARGIN_RIGHT_PX
    chart_width = options.width - left - right
    bottom = calculate_x_axis_layout(options.x_axis.label or None, max(chart_width, 1.0))
    chart_height = options.height - top - bottom
    if chart_width <= 0 or chart_height <= 0:
        LOGGER.error("chart %sx%s leaves no room for the plot area", options.width, options.height)
        raise InvalidDimensionsError(chart_width, chart_height)
    area = ChartArea(left=left, top=top, width=chart_width, height=chart_height)
    canvas.register_clip_rect(area)

    y_result = compute_and_render_y_axis(y_axis, area, canvas, title_x, theme=theme)
    x_result = compute_and_render_x_axis(options.x_axis, area, canvas, theme=theme)
    band_width = x_result.band_width if isinstance(options.x_axis, CategoryXAxis) else y_result.band_width
    return ChartMapping(
        to_svg_x=x_result.to_svg,
        to_svg_y=y_result.to_svg,
        chart_area=area,
        band_width=band_width,
    )
