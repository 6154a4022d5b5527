from __future__ import annotations

from dataclasses import dataclass
import html

AVG_CHAR_WIDTH_RATIO = 0.6

_MONTHS: dict[str, str] = {
    "january": "Jan",
    "february": "Feb",
    "march": "Mar",
    "april": "Apr",
    "may": "May",
    "june": "Jun",
    "july": "Jul",
    "august": "Aug",
    "september": "Sep",
    "october": "Oct",
    "november": "Nov",
    "december": "Dec",
}


@dataclass(frozen=True)
class TextDimensions:
    height: float
    max_width: float


def estimate_text_width(text: str, font_px: float) -> float:
    return len(text) * font_px * AVG_CHAR_WIDTH_RATIO


def wrap_text(text: str, max_width_px: float, font_px: float) -> list[str]:
    """Split text into lines that fit `max_width_px`.

    Explicit newlines win over width-based wrapping. A single word wider than
    the limit is kept on its own line.
    """

    if "\n" in text:
        return text.split("\n")
    words = text.split()
    if not words:
        return [""]
    lines: list[str] = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if estimate_text_width(candidate, font_px) <= max_width_px:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def estimate_wrapped_text_dimensions(
    text: str,
    max_width_px: float,
    font_px: float = 16.0,
    line_height: float = 1.2,
) -> TextDimensions:
    lines = wrap_text(text, max_width_px, font_px)
    return TextDimensions(height=font_px * len(lines) * line_height, max_width=max_width_px)


def abbreviate_month(label: str) -> str:
    """Shorten full English month names ("January" -> "Jan"); other text is returned unchanged."""

    return _MONTHS.get(label.strip().lower(), label)


def escape_text(text: str) -> str:
    return html.escape(text, quote=True)


def format_number(value: float, *, max_decimals: int = 4) -> str:
    """Render a coordinate or measurement without float noise (50.0 -> "50", 0.30000000000000004 -> "0.3")."""

    if value != value or value in (float("inf"), float("-inf")):
        return str(value)
    out = f"{value:.{max_decimals}f}"
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out in ("-0", ""):
        out = "0"
    return out
