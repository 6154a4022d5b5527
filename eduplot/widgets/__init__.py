from __future__ import annotations

from typing import Any, Callable, Mapping

from ..theme import DEFAULT_THEME, ThemeTokens
from .bar_chart import BarChartProps, generate_bar_chart, parse_bar_chart_props
from .coordinate_plane import CoordinatePlaneProps, generate_coordinate_plane, parse_coordinate_plane_props


def _coordinate_plane(raw: Mapping[str, Any], theme: ThemeTokens) -> str:
    return generate_coordinate_plane(parse_coordinate_plane_props(raw), theme=theme)


def _bar_chart(raw: Mapping[str, Any], theme: ThemeTokens) -> str:
    return generate_bar_chart(parse_bar_chart_props(raw), theme=theme)


WIDGET_GENERATORS: dict[str, Callable[[Mapping[str, Any], ThemeTokens], str]] = {
    "coordinatePlane": _coordinate_plane,
    "barChart": _bar_chart,
}


def render_widget(raw: Mapping[str, Any], *, theme: ThemeTokens = DEFAULT_THEME) -> str:
    """Dispatch a widget description on its `type` field and return SVG markup."""

    kind = raw.get("type")
    try:
        generator = WIDGET_GENERATORS[kind]  # type: ignore[index]
    except KeyError as exc:
        raise ValueError(f"Unknown widget type: {kind}") from exc
    return generator(raw, theme)


__all__ = [
    "BarChartProps",
    "CoordinatePlaneProps",
    "WIDGET_GENERATORS",
    "generate_bar_chart",
    "generate_coordinate_plane",
    "render_widget",
]
