from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from .axes import AxisDomain, draw_chart_title, validate_numeric_axis
from .constants import (
    AXIS_STROKE_WIDTH_PX,
    GRID_STROKE_WIDTH_PX,
    LABEL_AVG_CHAR_WIDTH_PX,
    PADDING_PX,
    X_AXIS_MIN_LABEL_PADDING_PX,
    Y_AXIS_MIN_LABEL_GAP_PX,
)
from .errors import InvalidDimensionsError
from .layout import ChartArea, select_axis_labels
from .svg.canvas import Rotation, SvgCanvas
from .text import estimate_wrapped_text_dimensions
from .theme import DEFAULT_THEME, ThemeTokens
from .ticks import build_ticks

LOGGER = logging.getLogger(__name__)

PLANE_MARGIN_TOP_PX = 40.0
PLANE_MARGIN_RIGHT_PX = 20.0
PLANE_MARGIN_BOTTOM_PX = 40.0
PLANE_TICK_HALF_PX = 4.0
PLANE_TICK_LABEL_FONT_PX = 12.0
PLANE_AXIS_TITLE_FONT_PX = 14.0
QUADRANT_LABEL_FONT_PX = 18.0
_ORIGIN_EPS = 1e-9


@dataclass(frozen=True)
class PlaneAxis:
    label: str
    min: float
    max: float
    tick_interval: float
    show_grid_lines: bool = True
    show_tick_labels: bool = True

    @property
    def domain(self) -> AxisDomain:
        return AxisDomain(min=self.min, max=self.max)


@dataclass(frozen=True)
class PlaneOptions:
    width: float
    height: float
    x_axis: PlaneAxis
    y_axis: PlaneAxis
    title: str | None = None
    show_quadrant_labels: bool = False


@dataclass(frozen=True)
class PlaneMapping:
    to_svg_x: Callable[[float], float]
    to_svg_y: Callable[[float], float]
    chart_area: ChartArea


def setup_coordinate_plane(
    options: PlaneOptions,
    canvas: SvgCanvas,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> PlaneMapping:
    """Draw a Cartesian plane with axes through the origin and return its data-to-pixel mappers.

    The left margin grows with the widest y tick label and the wrapped y
    title so neither collides with the plot. Grid lines are skipped at the
    origin where the axes are drawn, and origin tick labels are omitted.
    """

    if options.width <= 0 or options.height <= 0:
        raise InvalidDimensionsError(options.width, options.height)
    x_axis = options.x_axis
    y_axis = options.y_axis
    validate_numeric_axis("x", x_axis.domain, x_axis.tick_interval)
    validate_numeric_axis("y", y_axis.domain, y_axis.tick_interval)

    x_ticks = build_ticks(x_axis.min, x_axis.max, x_axis.tick_interval)
    y_ticks = build_ticks(y_axis.min, y_axis.max, y_axis.tick_interval)

    max_y_label_width = max((len(label) * LABEL_AVG_CHAR_WIDTH_PX for label in y_ticks.labels), default=0.0)
    y_title_height = 0.0
    if y_axis.label:
        y_title_height = estimate_wrapped_text_dimensions(
            y_axis.label, options.height, PLANE_AXIS_TITLE_FONT_PX
        ).height
    left = PLANE_TICK_HALF_PX + 8.0 + max_y_label_width + 12.0 + y_title_height / 2.0 + PADDING_PX

    top = PLANE_MARGIN_TOP_PX
    if options.title:
        top = max(top, draw_chart_title(canvas, options.title, options.width, theme=theme) + 10.0)

    chart_width = options.width - left - PLANE_MARGIN_RIGHT_PX
    chart_height = options.height - top - PLANE_MARGIN_BOTTOM_PX
    if chart_width <= 0 or chart_height <= 0:
        LOGGER.error("plane %sx%s leaves no room for the plot area", options.width, options.height)
        raise InvalidDimensionsError(chart_width, chart_height)
    area = ChartArea(left=left, top=top, width=chart_width, height=chart_height)

    x_span = x_axis.max - x_axis.min
    y_span = y_axis.max - y_axis.min

    def to_svg_x(value: float) -> float:
        return area.left + (value - x_axis.min) / x_span * area.width

    def to_svg_y(value: float) -> float:
        return area.bottom - (value - y_axis.min) / y_span * area.height

    canvas.register_clip_rect(area)

    if x_axis.show_grid_lines:
        for value in x_ticks.values:
            if abs(value) < _ORIGIN_EPS:
                continue
            x = to_svg_x(value)
            canvas.draw_line(x, area.top, x, area.bottom, stroke=theme.grid_major, stroke_width=GRID_STROKE_WIDTH_PX)
    if y_axis.show_grid_lines:
        for value in y_ticks.values:
            if abs(value) < _ORIGIN_EPS:
                continue
            y = to_svg_y(value)
            canvas.draw_line(area.left, y, area.right, y, stroke=theme.grid_major, stroke_width=GRID_STROKE_WIDTH_PX)

    zero_x = to_svg_x(min(max(0.0, x_axis.min), x_axis.max))
    zero_y = to_svg_y(min(max(0.0, y_axis.min), y_axis.max))
    canvas.draw_line(area.left, zero_y, area.right, zero_y, stroke=theme.axis, stroke_width=AXIS_STROKE_WIDTH_PX)
    canvas.draw_line(zero_x, area.top, zero_x, area.bottom, stroke=theme.axis, stroke_width=AXIS_STROKE_WIDTH_PX)

    x_positions = [to_svg_x(v) for v in x_ticks.values]
    keep_x = select_axis_labels(
        x_ticks.labels, x_positions, area.width, "horizontal", PLANE_TICK_LABEL_FONT_PX, X_AXIS_MIN_LABEL_PADDING_PX
    )
    for idx, (value, x) in enumerate(zip(x_ticks.values, x_positions)):
        if abs(value) < _ORIGIN_EPS:
            continue
        canvas.draw_line(
            x, zero_y - PLANE_TICK_HALF_PX, x, zero_y + PLANE_TICK_HALF_PX, stroke=theme.axis, stroke_width=1.0
        )
        if x_axis.show_tick_labels and idx in keep_x:
            canvas.draw_text(
                x, zero_y + 15.0, x_ticks.labels[idx], anchor="middle", font_px=PLANE_TICK_LABEL_FONT_PX, fill=theme.text
            )

    y_positions = [to_svg_y(v) for v in y_ticks.values]
    keep_y = select_axis_labels(
        y_ticks.labels, y_positions, area.height, "vertical", PLANE_TICK_LABEL_FONT_PX, Y_AXIS_MIN_LABEL_GAP_PX
    )
    for idx, (value, y) in enumerate(zip(y_ticks.values, y_positions)):
        if abs(value) < _ORIGIN_EPS:
            continue
        canvas.draw_line(
            zero_x - PLANE_TICK_HALF_PX, y, zero_x + PLANE_TICK_HALF_PX, y, stroke=theme.axis, stroke_width=1.0
        )
        if y_axis.show_tick_labels and idx in keep_y:
            canvas.draw_text(
                zero_x - 8.0, y + 4.0, y_ticks.labels[idx], anchor="end", font_px=PLANE_TICK_LABEL_FONT_PX, fill=theme.text
            )

    if x_axis.label:
        canvas.draw_text(
            area.left + area.width / 2.0,
            options.height - 5.0,
            x_axis.label,
            anchor="middle",
            font_px=PLANE_AXIS_TITLE_FONT_PX,
            fill=theme.axis_label,
        )
    if y_axis.label:
        title_x = PADDING_PX + y_title_height / 2.0
        center_y = area.top + area.height / 2.0
        canvas.draw_wrapped_text(
            title_x,
            center_y,
            y_axis.label,
            max_width_px=area.height,
            anchor="middle",
            baseline="middle",
            font_px=PLANE_AXIS_TITLE_FONT_PX,
            fill=theme.axis_label,
            rotate=Rotation(-90.0, title_x, center_y),
        )

    if options.show_quadrant_labels:
        _draw_quadrant_labels(canvas, area, x_axis, y_axis, zero_x, zero_y, theme)

    return PlaneMapping(to_svg_x=to_svg_x, to_svg_y=to_svg_y, chart_area=area)


def _draw_quadrant_labels(
    canvas: SvgCanvas,
    area: ChartArea,
    x_axis: PlaneAxis,
    y_axis: PlaneAxis,
    zero_x: float,
    zero_y: float,
    theme: ThemeTokens,
) -> None:
    """Label each quadrant the domain actually contains with its Roman numeral."""

    anchor_x = min(max(zero_x, area.left), area.right)
    anchor_y = min(max(zero_y, area.top), area.bottom)
    dx = area.width / 4.0
    dy = area.height / 4.0
    positive_x = x_axis.max > 0
    negative_x = x_axis.min < 0
    positive_y = y_axis.max > 0
    negative_y = y_axis.min < 0
    placements = (
        ("I", positive_x and positive_y, anchor_x + dx, anchor_y - dy),
        ("II", negative_x and positive_y, anchor_x - dx, anchor_y - dy),
        ("III", negative_x and negative_y, anchor_x - dx, anchor_y + dy),
        ("IV", positive_x and negative_y, anchor_x + dx, anchor_y + dy),
    )
    for label, present, x, y in placements:
        if not present:
            continue
        canvas.draw_text(
            x,
            y,
            label,
            anchor="middle",
            baseline="middle",
            font_px=QUADRANT_LABEL_FONT_PX,
            fill=theme.quadrant_label,
        )
