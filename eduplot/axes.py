from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, ClassVar, Literal, Sequence

from .constants import (
    AXIS_STROKE_WIDTH_PX,
    AXIS_TITLE_FONT_PX,
    CHART_TITLE_FONT_PX,
    CHART_TITLE_TOP_PADDING_PX,
    GRID_STROKE_WIDTH_PX,
    PADDING_PX,
    TICK_LABEL_FONT_PX,
    TICK_LABEL_PADDING_PX,
    TICK_LENGTH_PX,
    X_AXIS_MIN_LABEL_PADDING_PX,
    X_AXIS_TITLE_PADDING_PX,
    Y_AXIS_MIN_LABEL_GAP_PX,
)
from .errors import InvalidAxisDomainError, InvalidCategoriesError, InvalidTickIntervalError
from .layout import ChartArea, select_axis_labels
from .svg.canvas import Rotation, SvgCanvas
from .text import estimate_wrapped_text_dimensions
from .theme import DEFAULT_THEME, ThemeTokens
from .ticks import build_ticks

LOGGER = logging.getLogger(__name__)

LabelFormatter = Callable[[float], str]


@dataclass(frozen=True)
class AxisDomain:
    min: float
    max: float


@dataclass(frozen=True)
class NumericXAxis:
    label: str
    domain: AxisDomain
    tick_interval: float
    show_grid_lines: bool = True
    show_tick_labels: bool = True
    show_ticks: bool = True
    label_formatter: LabelFormatter | None = None

    scale_type: ClassVar[str] = "numeric"


@dataclass(frozen=True)
class CategoryXAxis:
    label: str
    categories: tuple[str, ...]
    scale_type: Literal["categoryBand", "categoryPoint"] = "categoryBand"
    show_grid_lines: bool = False
    show_tick_labels: bool = True
    show_ticks: bool = True


XAxis = NumericXAxis | CategoryXAxis


@dataclass(frozen=True)
class YAxis:
    label: str
    domain: AxisDomain | None = None
    tick_interval: float | None = None
    show_grid_lines: bool = True
    show_tick_labels: bool = True
    show_ticks: bool = True
    categories: tuple[str, ...] | None = None
    placement: Literal["left", "right"] = "left"
    label_formatter: LabelFormatter | None = None


@dataclass(frozen=True)
class AxisResult:
    to_svg: Callable[[float], float]
    band_width: float | None = None


def validate_numeric_axis(axis: str, domain: AxisDomain, tick_interval: float) -> None:
    if not domain.min < domain.max:
        LOGGER.error("%s-axis domain is empty: min=%s max=%s", axis, domain.min, domain.max)
        raise InvalidAxisDomainError(axis, domain.min, domain.max)
    if not tick_interval > 0:
        LOGGER.error("%s-axis tick interval is not positive: %s", axis, tick_interval)
        raise InvalidTickIntervalError(axis, tick_interval)


def validate_x_axis(spec: XAxis) -> None:
    if isinstance(spec, NumericXAxis):
        validate_numeric_axis("x", spec.domain, spec.tick_interval)
    elif not spec.categories:
        LOGGER.error("x-axis %s has no categories", spec.scale_type)
        raise InvalidCategoriesError("x", spec.scale_type)


def compute_and_render_x_axis(
    spec: XAxis,
    chart_area: ChartArea,
    canvas: SvgCanvas,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> AxisResult:
    """Validate an x-axis, draw grid, baseline, ticks, labels and title, and return its mapper."""

    validate_x_axis(spec)
    if isinstance(spec, NumericXAxis):
        domain = spec.domain
        span = domain.max - domain.min

        def to_svg(value: float) -> float:
            return chart_area.left + (value - domain.min) / span * chart_area.width

        ticks = build_ticks(domain.min, domain.max, spec.tick_interval)
        positions = [to_svg(v) for v in ticks.values]
        labels = _tick_labels(ticks.values, ticks.labels, spec.label_formatter)
        band_width = None
    else:
        to_svg, band_width = _category_mapper(
            len(spec.categories), chart_area.left, chart_area.width, spec.scale_type
        )
        positions = [to_svg(i) for i in range(len(spec.categories))]
        labels = list(spec.categories)

    axis_y = chart_area.bottom
    if spec.show_grid_lines and isinstance(spec, NumericXAxis):
        for x in positions:
            canvas.draw_line(
                x, chart_area.top, x, axis_y, stroke=theme.grid_major, stroke_width=GRID_STROKE_WIDTH_PX
            )
    canvas.draw_line(
        chart_area.left, axis_y, chart_area.right, axis_y, stroke=theme.axis, stroke_width=AXIS_STROKE_WIDTH_PX
    )

    tick_length = TICK_LENGTH_PX if spec.show_ticks else 0.0
    if spec.show_ticks:
        for x in positions:
            canvas.draw_line(x, axis_y, x, axis_y + tick_length, stroke=theme.axis, stroke_width=AXIS_STROKE_WIDTH_PX)

    if spec.show_tick_labels and positions:
        keep = select_axis_labels(
            labels,
            positions,
            chart_area.width,
            "horizontal",
            TICK_LABEL_FONT_PX,
            X_AXIS_MIN_LABEL_PADDING_PX,
        )
        label_y = axis_y + tick_length + TICK_LABEL_PADDING_PX
        for idx in sorted(keep):
            canvas.draw_text(
                positions[idx],
                label_y,
                labels[idx],
                anchor="middle",
                baseline="hanging",
                font_px=TICK_LABEL_FONT_PX,
                fill=theme.text,
            )

    if spec.label:
        title_y = axis_y + tick_length + TICK_LABEL_PADDING_PX + TICK_LABEL_FONT_PX + X_AXIS_TITLE_PADDING_PX
        canvas.draw_wrapped_text(
            chart_area.left + chart_area.width / 2.0,
            title_y,
            spec.label,
            max_width_px=chart_area.width,
            anchor="middle",
            font_px=AXIS_TITLE_FONT_PX,
            fill=theme.axis_label,
        )
    return AxisResult(to_svg=to_svg, band_width=band_width)


def compute_and_render_y_axis(
    spec: YAxis,
    chart_area: ChartArea,
    canvas: SvgCanvas,
    y_axis_label_x: float,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> AxisResult:
    """Validate a y-axis and draw it on the left or right edge of the chart area.

    `y_axis_label_x` is the x position of the rotated axis title, normally
    taken from `layout.calculate_y_axis_layout`.
    """

    if spec.categories is not None:
        if not spec.categories:
            LOGGER.error("y-axis categoryBand has no categories")
            raise InvalidCategoriesError("y", "categoryBand")
        count = len(spec.categories)
        band = chart_area.height / count

        def to_svg(value: float) -> float:
            return chart_area.top + (value + 0.5) * band

        positions = [to_svg(i) for i in range(count)]
        labels = list(spec.categories)
        band_width: float | None = band
        numeric = False
    else:
        if spec.domain is None or spec.tick_interval is None:
            raise ValueError("numeric y-axis requires domain and tick_interval")
        validate_numeric_axis("y", spec.domain, spec.tick_interval)
        domain = spec.domain
        span = domain.max - domain.min

        def to_svg(value: float) -> float:
            return chart_area.bottom - (value - domain.min) / span * chart_area.height

        ticks = build_ticks(domain.min, domain.max, spec.tick_interval)
        positions = [to_svg(v) for v in ticks.values]
        labels = _tick_labels(ticks.values, ticks.labels, spec.label_formatter)
        band_width = None
        numeric = True

    right = spec.placement == "right"
    axis_x = chart_area.right if right else chart_area.left
    direction = 1.0 if right else -1.0

    if spec.show_grid_lines and numeric:
        for y in positions:
            canvas.draw_line(
                chart_area.left, y, chart_area.right, y, stroke=theme.grid_major, stroke_width=GRID_STROKE_WIDTH_PX
            )
    canvas.draw_line(
        axis_x, chart_area.top, axis_x, chart_area.bottom, stroke=theme.axis, stroke_width=AXIS_STROKE_WIDTH_PX
    )

    tick_length = TICK_LENGTH_PX if spec.show_ticks else 0.0
    if spec.show_ticks:
        for y in positions:
            canvas.draw_line(
                axis_x, y, axis_x + direction * tick_length, y, stroke=theme.axis, stroke_width=AXIS_STROKE_WIDTH_PX
            )

    if spec.show_tick_labels and positions:
        keep = select_axis_labels(
            labels,
            positions,
            chart_area.height,
            "vertical",
            TICK_LABEL_FONT_PX,
            Y_AXIS_MIN_LABEL_GAP_PX,
        )
        label_x = axis_x + direction * (tick_length + TICK_LABEL_PADDING_PX)
        for idx in sorted(keep):
            canvas.draw_text(
                label_x,
                positions[idx] + 4.0,
                labels[idx],
                anchor="start" if right else "end",
                font_px=TICK_LABEL_FONT_PX,
                fill=theme.text,
            )

    if spec.label:
        center_y = chart_area.top + chart_area.height / 2.0
        canvas.draw_wrapped_text(
            y_axis_label_x,
            center_y,
            spec.label,
            max_width_px=chart_area.height,
            anchor="middle",
            baseline="middle",
            font_px=AXIS_TITLE_FONT_PX,
            fill=theme.axis_label,
            rotate=Rotation(90.0 if right else -90.0, y_axis_label_x, center_y),
        )
    return AxisResult(to_svg=to_svg, band_width=band_width)


def _tick_labels(values: Sequence[float], labels: Sequence[str], formatter: LabelFormatter | None) -> list[str]:
    if formatter is None:
        return list(labels)
    return [formatter(value) for value in values]


def _category_mapper(
    count: int, start: float, length: float, scale_type: str
) -> tuple[Callable[[float], float], float | None]:
    if scale_type == "categoryPoint":
        if count == 1:
            return (lambda _index: start + length / 2.0), None
        step = length / (count - 1)
        return (lambda index: start + index * step), None
    band = length / count
    return (lambda index: start + (index + 0.5) * band), band


def draw_chart_title(
    canvas: SvgCanvas,
    title: str,
    width_px: float,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> float:
    """Draw a centered, wrapped chart title at the top edge and return the height it uses."""

    max_width = max(1.0, width_px - 2 * PADDING_PX)
    canvas.draw_wrapped_text(
        width_px / 2.0,
        CHART_TITLE_TOP_PADDING_PX,
        title,
        max_width_px=max_width,
        anchor="middle",
        baseline="hanging",
        font_px=CHART_TITLE_FONT_PX,
        font_weight=600,
        fill=theme.title,
    )
    dims = estimate_wrapped_text_dimensions(title, max_width, CHART_TITLE_FONT_PX)
    return CHART_TITLE_TOP_PADDING_PX + dims.height
