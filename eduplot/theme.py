from __future__ import annotations

from dataclasses import asdict, dataclass
import re
from typing import Any, Mapping

_HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

_COLOR_TOKENS: tuple[str, ...] = (
    "text",
    "axis",
    "axis_label",
    "title",
    "grid_major",
    "grid_minor",
    "quadrant_label",
    "white",
    "black",
    "action_primary",
)
_POSITIVE_TOKENS: tuple[str, ...] = (
    "stroke_thin",
    "stroke_base",
    "stroke_thick",
    "point_radius",
    "font_small",
    "font_base",
    "font_medium",
    "font_large",
    "font_xlarge",
)


@dataclass(frozen=True)
class ThemeTokens:
    """Colors, stroke widths, dash patterns and font sizes shared by all renderers."""

    text: str = "#333333"
    axis: str = "#333333"
    axis_label: str = "#333333"
    title: str = "#333333"
    grid_major: str = "#e0e0e0"
    grid_minor: str = "#cccccc"
    quadrant_label: str = "#cccccc"
    white: str = "#ffffff"
    black: str = "#000000"
    action_primary: str = "#007acc"
    stroke_thin: float = 1.0
    stroke_base: float = 1.5
    stroke_thick: float = 2.0
    dash_dashed: str = "5 3"
    dash_dashed_short: str = "4 2"
    dash_distance: str = "4 3"
    point_radius: float = 4.0
    font_small: float = 11.0
    font_base: float = 12.0
    font_medium: float = 14.0
    font_large: float = 16.0
    font_xlarge: float = 18.0
    font_family: str = "sans-serif"


DEFAULT_THEME = ThemeTokens()


def validate_theme_tokens(overrides: Mapping[str, Any] | None = None) -> ThemeTokens:
    """Validate and merge token overrides against the default theme."""

    raw: dict[str, Any] = asdict(DEFAULT_THEME)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise ValueError(f"Token `{key}` must be a hex color (#RGB, #RRGGBB or #RRGGBBAA)")

    for key in _POSITIVE_TOKENS:
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or float(value) <= 0:
            raise ValueError(f"Token `{key}` must be a positive number")
        raw[key] = float(value)

    for key in ("dash_dashed", "dash_dashed_short", "dash_distance", "font_family"):
        if not isinstance(raw[key], str) or not raw[key].strip():
            raise ValueError(f"Token `{key}` must be a non-empty string")

    return ThemeTokens(**raw)
