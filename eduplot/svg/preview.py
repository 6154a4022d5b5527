from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
from typing import Optional
import xml.etree.ElementTree as ET

from PIL import Image, ImageDraw, ImageFont

LOGGER = logging.getLogger(__name__)

Color = tuple[int, int, int, int]

_PATH_TOKEN = re.compile(r"[A-Za-z]|-?\d*\.?\d+(?:e-?\d+)?")


@dataclass(frozen=True)
class PreviewOptions:
    scale: float = 1.0
    background: Color = (255, 255, 255, 255)


def render_svg_png(svg_markup: str, out_path: Path, options: PreviewOptions | None = None) -> Path:
    """Rasterize widget SVG into a PNG preview.

    Covers the primitives the canvas emits (rect, circle, ellipse, line,
    polyline, polygon, straight-segment paths and text). Clip paths, dash
    patterns, gradients and rotation are ignored, so the preview is a
    sketch of the layout rather than a faithful render.
    """

    opts = options or PreviewOptions()
    root = ET.fromstring(svg_markup)
    viewbox = _parse_viewbox(root.attrib.get("viewBox"))
    if viewbox is None:
        width = _parse_length(root.attrib.get("width")) or 100.0
        height = _parse_length(root.attrib.get("height")) or 100.0
        viewbox = (0.0, 0.0, width, height)
    vb_x, vb_y, vb_w, vb_h = viewbox
    size = (max(1, int(round(vb_w * opts.scale))), max(1, int(round(vb_h * opts.scale))))
    image = Image.new("RGBA", size, color=opts.background)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    def tx(x: float) -> float:
        return (x - vb_x) * opts.scale

    def ty(y: float) -> float:
        return (y - vb_y) * opts.scale

    skipped = 0
    for elem in root.iter():
        tag = _strip_namespace(elem.tag)
        if tag in ("defs", "clipPath", "pattern", "linearGradient", "radialGradient"):
            continue
        attrs = elem.attrib
        fill = _parse_color(attrs.get("fill"))
        stroke = _parse_color(attrs.get("stroke"))
        stroke_width = max(1, int(round((_parse_length(attrs.get("stroke-width")) or 1.0) * opts.scale)))
        if tag == "rect" and not _inside_defs(elem, root):
            x = tx(_parse_length(attrs.get("x")) or 0.0)
            y = ty(_parse_length(attrs.get("y")) or 0.0)
            w = (_parse_length(attrs.get("width")) or 0.0) * opts.scale
            h = (_parse_length(attrs.get("height")) or 0.0) * opts.scale
            draw.rectangle((x, y, x + w, y + h), fill=fill, outline=stroke, width=stroke_width if stroke else 0)
        elif tag in ("circle", "ellipse"):
            cx = tx(_parse_length(attrs.get("cx")) or 0.0)
            cy = ty(_parse_length(attrs.get("cy")) or 0.0)
            rx = (_parse_length(attrs.get("r")) or _parse_length(attrs.get("rx")) or 0.0) * opts.scale
            ry = (_parse_length(attrs.get("r")) or _parse_length(attrs.get("ry")) or 0.0) * opts.scale
            draw.ellipse((cx - rx, cy - ry, cx + rx, cy + ry), fill=fill, outline=stroke, width=stroke_width if stroke else 0)
        elif tag == "line":
            coords = [_parse_length(attrs.get(k)) for k in ("x1", "y1", "x2", "y2")]
            if None in coords or stroke is None:
                continue
            x1, y1, x2, y2 = coords
            draw.line((tx(x1), ty(y1), tx(x2), ty(y2)), fill=stroke, width=stroke_width)
        elif tag in ("polygon", "polyline"):
            points = [(tx(x), ty(y)) for x, y in _parse_points(attrs.get("points"))]
            if len(points) < 2:
                continue
            if tag == "polygon" and fill is not None:
                draw.polygon(points, fill=fill)
            if stroke is not None:
                outline = points + [points[0]] if tag == "polygon" else points
                draw.line(outline, fill=stroke, width=stroke_width)
        elif tag == "path":
            for segment in _parse_path_segments(attrs.get("d")):
                if stroke is not None and len(segment) >= 2:
                    draw.line([(tx(x), ty(y)) for x, y in segment], fill=stroke, width=stroke_width)
        elif tag == "text":
            content = "".join(elem.itertext())
            x = _parse_length(attrs.get("x")) or 0.0
            y = _parse_length(attrs.get("y")) or 0.0
            left, top, right, bottom = draw.textbbox((0, 0), content, font=font)
            shift = {"middle": (right - left) / 2, "end": right - left}.get(attrs.get("text-anchor", ""), 0)
            draw.text((tx(x) - shift, ty(y) - (bottom - top) / 2), content, fill=fill or (51, 51, 51, 255), font=font)
        elif tag not in ("svg", "g", "tspan", "style", "stop"):
            skipped += 1
    if skipped:
        LOGGER.debug("preview skipped %d unsupported elements", skipped)

    out = Path(out_path)
    image.save(out)
    return out


def _inside_defs(elem: ET.Element, root: ET.Element) -> bool:
    for parent in root.iter():
        if _strip_namespace(parent.tag) in ("clipPath", "pattern") and elem in list(parent):
            return True
    return False


def _strip_namespace(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _parse_length(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    value = value.strip()
    if value.endswith("px"):
        value = value[:-2]
    try:
        return float(value)
    except ValueError:
        return None


def _parse_viewbox(value: Optional[str]) -> Optional[tuple[float, float, float, float]]:
    if not value:
        return None
    parts = value.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        return tuple(float(p) for p in parts)  # type: ignore[return-value]
    except ValueError:
        return None


def _parse_points(value: Optional[str]) -> list[tuple[float, float]]:
    if not value:
        return []
    parts = value.replace(",", " ").split()
    points: list[tuple[float, float]] = []
    it = iter(parts)
    for x_str, y_str in zip(it, it):
        try:
            points.append((float(x_str), float(y_str)))
        except ValueError:
            continue
    return points


def _parse_path_segments(value: Optional[str]) -> list[list[tuple[float, float]]]:
    if not value:
        return []
    segments: list[list[tuple[float, float]]] = []
    numbers: list[float] = []
    command = ""
    for token in _PATH_TOKEN.findall(value):
        if token in ("M", "m"):
            segments.append([])
            command = "M"
        elif token in ("L", "l"):
            command = "L"
        elif token in ("Z", "z"):
            if segments and segments[-1]:
                segments[-1].append(segments[-1][0])
        elif token.isalpha():
            command = ""
            numbers = []
        else:
            numbers.append(float(token))
            if len(numbers) == 2 and command in ("M", "L") and segments:
                segments[-1].append((numbers[0], numbers[1]))
                numbers = []
            elif len(numbers) == 2:
                numbers = []
    return segments


def _parse_color(value: Optional[str]) -> Optional[Color]:
    if not value:
        return None
    value = value.strip()
    if value == "none":
        return None
    named = {"white": (255, 255, 255, 255), "black": (0, 0, 0, 255)}
    if value in named:
        return named[value]
    if value.startswith("#"):
        hex_value = value[1:]
        if len(hex_value) in (3, 4):
            hex_value = "".join(ch * 2 for ch in hex_value)
        if len(hex_value) == 6:
            hex_value += "ff"
        if len(hex_value) == 8:
            try:
                return tuple(int(hex_value[i : i + 2], 16) for i in (0, 2, 4, 6))  # type: ignore[return-value]
            except ValueError:
                return None
    return None
