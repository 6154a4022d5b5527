from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Literal, Mapping

from ..axes import AxisDomain, CategoryXAxis, YAxis
from ..chart import ChartOptions, setup_chart_axes
from ..constants import AXIS_VIEWBOX_PADDING_PX, DEFAULT_FONT_PX, DEFAULT_LINE_HEIGHT
from ..errors import InvalidDimensionsError
from ..layout import ChartArea
from ..svg.canvas import ClippedCanvas, SvgCanvas
from ..svg.document import to_svg_document
from ..text import abbreviate_month
from ..theme import DEFAULT_THEME, ThemeTokens
from ._coerce import coerce_list, coerce_mapping, coerce_number, coerce_optional_str, coerce_str, require

LOGGER = logging.getLogger(__name__)

BAR_PADDING_RATIO = 0.2


@dataclass(frozen=True)
class Bar:
    label: str
    value: float
    state: Literal["normal", "unknown"] = "normal"


@dataclass(frozen=True)
class BarChartProps:
    width: float
    height: float
    y_min: float
    y_max: float
    y_tick_interval: float
    bars: tuple[Bar, ...]
    bar_color: str | None = None
    title: str | None = None
    x_axis_label: str | None = None
    y_axis_label: str | None = None


def generate_bar_chart(props: BarChartProps, *, theme: ThemeTokens = DEFAULT_THEME) -> str:
    """Render a vertical bar chart; bars in the "unknown" state are drawn as dashed outlines."""

    if props.width <= 0 or props.height <= 0:
        raise InvalidDimensionsError(props.width, props.height)
    canvas = SvgCanvas(
        chart_area=ChartArea(left=0.0, top=0.0, width=props.width, height=props.height),
        font_px_default=DEFAULT_FONT_PX,
        line_height_default=DEFAULT_LINE_HEIGHT,
    )
    chart = setup_chart_axes(
        ChartOptions(
            width=props.width,
            height=props.height,
            title=props.title,
            x_axis=CategoryXAxis(
                label=props.x_axis_label or "",
                categories=tuple(abbreviate_month(bar.label) for bar in props.bars),
                scale_type="categoryBand",
            ),
            y_axis=YAxis(
                label=props.y_axis_label or "",
                domain=AxisDomain(min=props.y_min, max=props.y_max),
                tick_interval=props.y_tick_interval,
            ),
        ),
        canvas,
        theme=theme,
    )
    if chart.band_width is None:
        LOGGER.error("band width missing for categorical x-axis (%d bars)", len(props.bars))
        raise InvalidDimensionsError(props.width, props.height)
    inner_width = chart.band_width * (1.0 - BAR_PADDING_RATIO)
    color = props.bar_color or theme.action_primary
    baseline = chart.to_svg_y(props.y_min)

    def draw(clipped: ClippedCanvas) -> None:
        for index, bar in enumerate(props.bars):
            x = chart.to_svg_x(index) - inner_width / 2.0
            top = chart.to_svg_y(bar.value)
            height = baseline - top
            if bar.state == "normal":
                clipped.draw_rect(x, top, inner_width, height, fill=color)
            else:
                clipped.draw_rect(
                    x,
                    top,
                    inner_width,
                    height,
                    fill="none",
                    stroke=color,
                    stroke_width=theme.stroke_thick,
                    dash=theme.dash_dashed,
                )

    canvas.draw_in_clipped_region(draw)
    finalized = canvas.finalize(AXIS_VIEWBOX_PADDING_PX)
    return to_svg_document(finalized, font_family=theme.font_family, font_px=theme.font_base)


def parse_bar_chart_props(raw: Mapping[str, Any]) -> BarChartProps:
    where = "barChart"
    y_axis = coerce_mapping(require(raw, "yAxis", where), "yAxis")
    bars = []
    for item in coerce_list(require(raw, "data", where), "data"):
        entry = coerce_mapping(item, "data[]")
        state = entry.get("state", "normal")
        if state not in ("normal", "unknown"):
            raise ValueError(f"Unsupported bar state: {state}")
        bars.append(
            Bar(
                label=coerce_str(require(entry, "label", "bar"), "bar.label"),
                value=coerce_number(require(entry, "value", "bar"), "bar.value"),
                state=state,
            )
        )
    return BarChartProps(
        width=coerce_number(require(raw, "width", where), "width"),
        height=coerce_number(require(raw, "height", where), "height"),
        y_min=coerce_number(require(y_axis, "min", "yAxis"), "yAxis.min"),
        y_max=coerce_number(require(y_axis, "max", "yAxis"), "yAxis.max"),
        y_tick_interval=coerce_number(require(y_axis, "tickInterval", "yAxis"), "yAxis.tickInterval"),
        bars=tuple(bars),
        bar_color=coerce_optional_str(raw.get("barColor"), "barColor"),
        title=coerce_optional_str(raw.get("title"), "title"),
        x_axis_label=coerce_optional_str(raw.get("xAxisLabel"), "xAxisLabel"),
        y_axis_label=coerce_optional_str(y_axis.get("label"), "yAxis.label"),
    )
