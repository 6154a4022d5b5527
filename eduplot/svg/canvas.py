from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
import math
from typing import Callable, Iterator, Literal, Sequence

from ..constants import AXIS_VIEWBOX_PADDING_PX, DEFAULT_FONT_PX, DEFAULT_LINE_HEIGHT
from ..errors import CanvasError
from ..layout import ChartArea, Extents, FinalizedSvg
from ..text import escape_text, estimate_text_width, format_number, wrap_text
from .path import PathBuilder

LOGGER = logging.getLogger(__name__)

Anchor = Literal["start", "middle", "end"]
Baseline = Literal["alphabetic", "middle", "hanging"]
Point = tuple[float, float]

CLIP_ID = "clip-0"
_ASCENT_RATIO = 0.8
LEGEND_SAMPLE_LENGTH_PX = 20.0


@dataclass(frozen=True)
class Rotation:
    angle_deg: float
    cx: float
    cy: float

    def to_transform(self) -> str:
        return f"rotate({format_number(self.angle_deg)} {format_number(self.cx)} {format_number(self.cy)})"


@dataclass(frozen=True)
class GradientStop:
    offset: float
    color: str
    opacity: float | None = None


@dataclass(frozen=True)
class LegendRow:
    label: str
    color: str
    dash: str | None = None
    marker: Literal["circle", "square"] | None = None
    stroke_width: float = 2.0


def _attrs(pairs: Sequence[tuple[str, object]]) -> str:
    out: list[str] = []
    for name, value in pairs:
        if value is None:
            continue
        if isinstance(value, float):
            text = format_number(value)
        else:
            text = str(value)
        out.append(f' {name}="{escape_text(text)}"')
    return "".join(out)


def _paint_attrs(
    *,
    fill: str | None,
    stroke: str | None,
    stroke_width: float | None,
    dash: str | None,
    opacity: float | None,
    fill_opacity: float | None,
    stroke_opacity: float | None,
    transform: str | None,
) -> list[tuple[str, object]]:
    return [
        ("fill", fill),
        ("stroke", stroke),
        ("stroke-width", None if stroke_width is None else float(stroke_width)),
        ("stroke-dasharray", dash),
        ("opacity", None if opacity is None else float(opacity)),
        ("fill-opacity", None if fill_opacity is None else float(fill_opacity)),
        ("stroke-opacity", None if stroke_opacity is None else float(stroke_opacity)),
        ("transform", transform),
    ]


def _half_stroke(stroke: str | None, stroke_width: float | None) -> float:
    if stroke is None or stroke == "none" or not stroke_width:
        return 0.0
    return float(stroke_width) / 2.0


class _Surface:
    """Drawing primitives shared by the root canvas and clipped sub-canvases.

    Every primitive appends one markup fragment and reports a conservative
    bounding box of its painted area.
    """

    def __init__(self, font_px_default: float, line_height_default: float) -> None:
        self.font_px_default = font_px_default
        self.line_height_default = line_height_default

    def _emit(self, fragment: str) -> None:
        raise NotImplementedError

    def _include(self, min_x: float, max_x: float, min_y: float, max_y: float) -> None:
        raise NotImplementedError

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        stroke: str = "#000000",
        stroke_width: float = 1.0,
        dash: str | None = None,
        linecap: Literal["butt", "round", "square"] | None = None,
        opacity: float | None = None,
        stroke_opacity: float | None = None,
        marker_start: str | None = None,
        marker_end: str | None = None,
        transform: str | None = None,
    ) -> None:
        pairs: list[tuple[str, object]] = [("x1", float(x1)), ("y1", float(y1)), ("x2", float(x2)), ("y2", float(y2))]
        pairs += _paint_attrs(
            fill=None,
            stroke=stroke,
            stroke_width=stroke_width,
            dash=dash,
            opacity=opacity,
            fill_opacity=None,
            stroke_opacity=stroke_opacity,
            transform=transform,
        )
        pairs += [("stroke-linecap", linecap), ("marker-start", marker_start), ("marker-end", marker_end)]
        self._emit(f"<line{_attrs(pairs)} />")
        pad = _half_stroke(stroke, stroke_width)
        if linecap in ("round", "square"):
            pad *= math.sqrt(2.0) if linecap == "square" else 1.0
        self._include(min(x1, x2) - pad, max(x1, x2) + pad, min(y1, y2) - pad, max(y1, y2) + pad)

    def draw_circle(
        self,
        cx: float,
        cy: float,
        r: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float | None = None,
        dash: str | None = None,
        opacity: float | None = None,
        fill_opacity: float | None = None,
        stroke_opacity: float | None = None,
        transform: str | None = None,
    ) -> None:
        pairs: list[tuple[str, object]] = [("cx", float(cx)), ("cy", float(cy)), ("r", float(r))]
        pairs += _paint_attrs(
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
            dash=dash,
            opacity=opacity,
            fill_opacity=fill_opacity,
            stroke_opacity=stroke_opacity,
            transform=transform,
        )
        self._emit(f"<circle{_attrs(pairs)} />")
        pad = r + _half_stroke(stroke, stroke_width)
        self._include(cx - pad, cx + pad, cy - pad, cy + pad)

    def draw_ellipse(
        self,
        cx: float,
        cy: float,
        rx: float,
        ry: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float | None = None,
        dash: str | None = None,
        opacity: float | None = None,
        transform: str | None = None,
    ) -> None:
        pairs: list[tuple[str, object]] = [("cx", float(cx)), ("cy", float(cy)), ("rx", float(rx)), ("ry", float(ry))]
        pairs += _paint_attrs(
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
            dash=dash,
            opacity=opacity,
            fill_opacity=None,
            stroke_opacity=None,
            transform=transform,
        )
        self._emit(f"<ellipse{_attrs(pairs)} />")
        pad = _half_stroke(stroke, stroke_width)
        self._include(cx - rx - pad, cx + rx + pad, cy - ry - pad, cy + ry + pad)

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float | None = None,
        dash: str | None = None,
        rx: float | None = None,
        opacity: float | None = None,
        fill_opacity: float | None = None,
        transform: str | None = None,
    ) -> None:
        pairs: list[tuple[str, object]] = [
            ("x", float(x)),
            ("y", float(y)),
            ("width", float(width)),
            ("height", float(height)),
            ("rx", None if rx is None else float(rx)),
        ]
        pairs += _paint_attrs(
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
            dash=dash,
            opacity=opacity,
            fill_opacity=fill_opacity,
            stroke_opacity=None,
            transform=transform,
        )
        self._emit(f"<rect{_attrs(pairs)} />")
        pad = _half_stroke(stroke, stroke_width)
        self._include(x - pad, x + width + pad, y - pad, y + height + pad)

    def draw_polygon(self, points: Sequence[Point], **style: object) -> None:
        self._draw_poly("polygon", points, **style)

    def draw_polyline(self, points: Sequence[Point], **style: object) -> None:
        style.setdefault("fill", "none")
        self._draw_poly("polyline", points, **style)

    def _draw_poly(
        self,
        tag: str,
        points: Sequence[Point],
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float | None = None,
        dash: str | None = None,
        linejoin: str | None = None,
        opacity: float | None = None,
        fill_opacity: float | None = None,
        transform: str | None = None,
    ) -> None:
        if not points:
            return
        coords = " ".join(f"{format_number(x)},{format_number(y)}" for x, y in points)
        pairs: list[tuple[str, object]] = [("points", coords)]
        pairs += _paint_attrs(
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
            dash=dash,
            opacity=opacity,
            fill_opacity=fill_opacity,
            stroke_opacity=None,
            transform=transform,
        )
        pairs.append(("stroke-linejoin", linejoin))
        self._emit(f"<{tag}{_attrs(pairs)} />")
        pad = _half_stroke(stroke, stroke_width)
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        self._include(min(xs) - pad, max(xs) + pad, min(ys) - pad, max(ys) + pad)

    def draw_path(
        self,
        path: PathBuilder,
        *,
        fill: str | None = "none",
        stroke: str | None = None,
        stroke_width: float | None = None,
        dash: str | None = None,
        opacity: float | None = None,
        transform: str | None = None,
    ) -> None:
        data = path.path_data()
        if not data:
            return
        pairs: list[tuple[str, object]] = [("d", data)]
        pairs += _paint_attrs(
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
            dash=dash,
            opacity=opacity,
            fill_opacity=None,
            stroke_opacity=None,
            transform=transform,
        )
        self._emit(f"<path{_attrs(pairs)} />")
        if path.extents is not None:
            pad = _half_stroke(stroke, stroke_width)
            ext = path.extents
            self._include(ext.min_x - pad, ext.max_x + pad, ext.min_y - pad, ext.max_y + pad)

    def draw_image(self, x: float, y: float, width: float, height: float, href: str) -> None:
        pairs: list[tuple[str, object]] = [
            ("x", float(x)),
            ("y", float(y)),
            ("width", float(width)),
            ("height", float(height)),
            ("href", href),
        ]
        self._emit(f"<image{_attrs(pairs)} />")
        self._include(x, x + width, y, y + height)

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        anchor: Anchor = "start",
        baseline: Baseline = "alphabetic",
        font_px: float | None = None,
        font_weight: str | int | None = None,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float | None = None,
        paint_order: str | None = None,
        opacity: float | None = None,
        rotate: Rotation | None = None,
        max_width: float | None = None,
        line_height: float | None = None,
    ) -> None:
        """Draw a text label, wrapping it into tspans when `max_width` is given."""

        if max_width is not None:
            self.draw_wrapped_text(
                x,
                y,
                text,
                max_width_px=max_width,
                anchor=anchor,
                baseline=baseline,
                font_px=font_px,
                font_weight=font_weight,
                fill=fill,
                stroke=stroke,
                stroke_width=stroke_width,
                paint_order=paint_order,
                opacity=opacity,
                rotate=rotate,
                line_height=line_height,
            )
            return
        font = self.font_px_default if font_px is None else font_px
        pairs = self._text_attrs(
            x, y, anchor, baseline, font, font_px, font_weight, fill, stroke, stroke_width, paint_order, opacity, rotate
        )
        self._emit(f"<text{_attrs(pairs)}>{escape_text(text)}</text>")
        width = estimate_text_width(text, font)
        self._include_text_box(x, y, width, font, font, anchor, baseline, rotate, _half_stroke(stroke, stroke_width))

    def draw_wrapped_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        max_width_px: float,
        anchor: Anchor = "start",
        baseline: Baseline = "alphabetic",
        font_px: float | None = None,
        font_weight: str | int | None = None,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float | None = None,
        paint_order: str | None = None,
        opacity: float | None = None,
        rotate: Rotation | None = None,
        line_height: float | None = None,
    ) -> None:
        font = self.font_px_default if font_px is None else font_px
        lh = self.line_height_default if line_height is None else line_height
        lines = wrap_text(text, max_width_px, font)
        pairs = self._text_attrs(
            x, y, anchor, baseline, font, font_px, font_weight, fill, stroke, stroke_width, paint_order, opacity, rotate
        )
        first_dy = -(len(lines) - 1) * lh / 2.0 if baseline == "middle" else 0.0
        spans: list[str] = []
        for idx, line in enumerate(lines):
            dy = first_dy if idx == 0 else lh
            spans.append(f'<tspan x="{format_number(x)}" dy="{format_number(dy)}em">{escape_text(line)}</tspan>')
        self._emit(f"<text{_attrs(pairs)}>{''.join(spans)}</text>")
        width = max(estimate_text_width(line, font) for line in lines)
        height = font * lh * len(lines)
        self._include_text_box(x, y, width, height, font, anchor, baseline, rotate, _half_stroke(stroke, stroke_width))

    def draw_legend_block(
        self,
        start_x: float,
        start_y: float,
        rows: Sequence[LegendRow],
        *,
        row_gap_px: float = 6.0,
        label_font_px: float | None = None,
        text_color: str = "#333333",
    ) -> float:
        """Draw one legend row per entry and return the block height."""

        font = self.font_px_default if label_font_px is None else label_font_px
        y = start_y
        for row in rows:
            mid_y = y + font / 2.0
            self.draw_line(
                start_x,
                mid_y,
                start_x + LEGEND_SAMPLE_LENGTH_PX,
                mid_y,
                stroke=row.color,
                stroke_width=row.stroke_width,
                dash=row.dash,
            )
            marker_x = start_x + LEGEND_SAMPLE_LENGTH_PX / 2.0
            if row.marker == "circle":
                self.draw_circle(marker_x, mid_y, 3.5, fill=row.color)
            elif row.marker == "square":
                self.draw_rect(marker_x - 3.5, mid_y - 3.5, 7.0, 7.0, fill=row.color)
            self.draw_text(
                start_x + LEGEND_SAMPLE_LENGTH_PX + 8.0,
                mid_y,
                row.label,
                baseline="middle",
                font_px=font,
                fill=text_color,
            )
            y += font + row_gap_px
        return max(0.0, y - start_y - row_gap_px)

    def _text_attrs(
        self,
        x: float,
        y: float,
        anchor: Anchor,
        baseline: Baseline,
        font: float,
        font_px: float | None,
        font_weight: str | int | None,
        fill: str | None,
        stroke: str | None,
        stroke_width: float | None,
        paint_order: str | None,
        opacity: float | None,
        rotate: Rotation | None,
    ) -> list[tuple[str, object]]:
        return [
            ("x", float(x)),
            ("y", float(y)),
            ("text-anchor", None if anchor == "start" else anchor),
            ("dominant-baseline", None if baseline == "alphabetic" else baseline),
            ("font-size", None if font_px is None else float(font)),
            ("font-weight", font_weight),
            ("fill", fill),
            ("stroke", stroke),
            ("stroke-width", None if stroke_width is None else float(stroke_width)),
            ("paint-order", paint_order),
            ("opacity", None if opacity is None else float(opacity)),
            ("transform", None if rotate is None else rotate.to_transform()),
        ]

    def _include_text_box(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        font: float,
        anchor: Anchor,
        baseline: Baseline,
        rotate: Rotation | None,
        pad: float,
    ) -> None:
        if anchor == "middle":
            left = x - width / 2.0
        elif anchor == "end":
            left = x - width
        else:
            left = x
        if baseline == "hanging":
            top = y
        elif baseline == "middle":
            top = y - height / 2.0
        else:
            top = y - font * _ASCENT_RATIO
        corners = [(left, top), (left + width, top), (left, top + height), (left + width, top + height)]
        if rotate is not None:
            theta = math.radians(rotate.angle_deg)
            cos_t = math.cos(theta)
            sin_t = math.sin(theta)
            corners = [
                (
                    rotate.cx + (px - rotate.cx) * cos_t - (py - rotate.cy) * sin_t,
                    rotate.cy + (px - rotate.cx) * sin_t + (py - rotate.cy) * cos_t,
                )
                for px, py in corners
            ]
        xs = [c[0] for c in corners]
        ys = [c[1] for c in corners]
        self._include(min(xs) - pad, max(xs) + pad, min(ys) - pad, max(ys) + pad)


class SvgCanvas(_Surface):
    """Accumulates SVG markup plus a bounding box of everything drawn.

    `finalize` turns the tracked extents into a padded integer viewBox so
    labels drawn outside the chart area are never cut off.
    """

    def __init__(
        self,
        *,
        chart_area: ChartArea | None = None,
        font_px_default: float = DEFAULT_FONT_PX,
        line_height_default: float = DEFAULT_LINE_HEIGHT,
    ) -> None:
        if font_px_default <= 0:
            raise ValueError("font_px_default must be > 0")
        if line_height_default <= 0:
            raise ValueError("line_height_default must be > 0")
        super().__init__(font_px_default, line_height_default)
        self.chart_area = chart_area
        self.clip_id = CLIP_ID
        self._clip_rect: ChartArea | None = None
        self._defs: list[str] = []
        self._styles: list[str] = []
        self._body: list[str] = []
        self._extents: Extents | None = Extents.from_area(chart_area) if chart_area is not None else None
        self._offset: Point = (0.0, 0.0)
        self._clipping = False
        self._finalized = False

    @property
    def extents(self) -> Extents | None:
        return self._extents

    def _emit(self, fragment: str) -> None:
        self._check_open()
        self._body.append(fragment)

    def _include(self, min_x: float, max_x: float, min_y: float, max_y: float) -> None:
        dx, dy = self._offset
        min_x, max_x, min_y, max_y = min_x + dx, max_x + dx, min_y + dy, max_y + dy
        if self._extents is None:
            self._extents = Extents(min_x=min_x, max_x=max_x, min_y=min_y, max_y=max_y)
        else:
            self._extents = self._extents.include(min_x, max_x, min_y, max_y)

    def _check_open(self) -> None:
        if self._finalized:
            raise CanvasError("canvas is already finalized")

    def add_def(self, markup: str) -> None:
        self._check_open()
        self._defs.append(markup)

    def add_style(self, css: str) -> None:
        self._check_open()
        self._styles.append(css)

    @contextmanager
    def translated(self, dx: float, dy: float) -> Iterator[None]:
        """Group everything drawn inside the block under `translate(dx dy)`."""

        if self._clipping:
            raise CanvasError("cannot open a transform group while drawing a clipped region")
        self._emit(f'<g transform="translate({format_number(dx)} {format_number(dy)})">')
        previous = self._offset
        self._offset = (previous[0] + dx, previous[1] + dy)
        try:
            yield
        finally:
            self._offset = previous
            self._body.append("</g>")

    def add_hatch_pattern(
        self,
        pattern_id: str,
        *,
        color: str,
        spacing: float = 6.0,
        stroke_width: float = 1.0,
        angle_deg: float = 45.0,
        background: str | None = None,
    ) -> str:
        size = format_number(spacing)
        background_rect = "" if background is None else f'<rect width="{size}" height="{size}" fill="{background}" />'
        self.add_def(
            f'<pattern id="{pattern_id}" patternUnits="userSpaceOnUse" width="{size}" height="{size}" '
            f'patternTransform="rotate({format_number(angle_deg)})">{background_rect}'
            f'<line x1="0" y1="0" x2="0" y2="{size}" stroke="{color}" stroke-width="{format_number(stroke_width)}" />'
            "</pattern>"
        )
        return f"url(#{pattern_id})"

    def add_linear_gradient(
        self,
        gradient_id: str,
        stops: Sequence[GradientStop],
        *,
        x1: float = 0.0,
        y1: float = 0.0,
        x2: float = 0.0,
        y2: float = 1.0,
    ) -> str:
        coords = _attrs([("x1", float(x1)), ("y1", float(y1)), ("x2", float(x2)), ("y2", float(y2))])
        self.add_def(f'<linearGradient id="{gradient_id}"{coords}>{_stops(stops)}</linearGradient>')
        return f"url(#{gradient_id})"

    def add_radial_gradient(
        self,
        gradient_id: str,
        stops: Sequence[GradientStop],
        *,
        cx: float = 0.5,
        cy: float = 0.5,
        r: float = 0.5,
    ) -> str:
        coords = _attrs([("cx", float(cx)), ("cy", float(cy)), ("r", float(r))])
        self.add_def(f'<radialGradient id="{gradient_id}"{coords}>{_stops(stops)}</radialGradient>')
        return f"url(#{gradient_id})"

    def register_clip_rect(self, area: ChartArea) -> str:
        """Add the canvas clip path for `area` once and return its id."""

        if self._clip_rect is not None:
            if self._clip_rect != area:
                raise CanvasError("canvas clip rectangle is already registered with a different area")
            return self.clip_id
        self._clip_rect = area
        self.add_def(
            f'<clipPath id="{self.clip_id}"><rect x="{format_number(area.left)}" y="{format_number(area.top)}" '
            f'width="{format_number(area.width)}" height="{format_number(area.height)}" /></clipPath>'
        )
        return self.clip_id

    def draw_in_clipped_region(self, render: Callable[["ClippedCanvas"], None]) -> None:
        """Run `render` against a sub-canvas whose output is clipped to the chart area.

        Extents of clipped content are intersected with the clip rectangle,
        so only the visible part grows the viewBox.
        """

        self._check_open()
        if self._clipping:
            raise CanvasError("clipped regions cannot be nested")
        area = self._clip_rect or self.chart_area
        if area is None:
            raise CanvasError("canvas has no chart area to clip to")
        self.register_clip_rect(area)
        clipped = ClippedCanvas(self, area)
        self._clipping = True
        try:
            render(clipped)
        finally:
            self._clipping = False
        if clipped.fragments:
            self._body.append(f'<g clip-path="url(#{self.clip_id})">{"".join(clipped.fragments)}</g>')

    def finalize(self, pad_px: float = AXIS_VIEWBOX_PADDING_PX) -> FinalizedSvg:
        self._check_open()
        if self._clipping:
            raise CanvasError("cannot finalize while drawing a clipped region")
        if self._extents is None:
            raise CanvasError("cannot finalize an empty canvas")
        ext = self._extents
        self._finalized = True
        defs = "".join(self._defs)
        if self._styles:
            defs += f"<style>{''.join(self._styles)}</style>"
        body = f"<defs>{defs}</defs>{''.join(self._body)}"
        LOGGER.debug("finalized canvas extents=%s pad=%s", ext, pad_px)
        return FinalizedSvg(
            svg_body=body,
            vb_min_x=math.floor(ext.min_x - pad_px),
            vb_min_y=math.floor(ext.min_y - pad_px),
            width=math.ceil(ext.max_x - ext.min_x + 2 * pad_px),
            height=math.ceil(ext.max_y - ext.min_y + 2 * pad_px),
        )


class ClippedCanvas(_Surface):
    """Sub-canvas handed to `SvgCanvas.draw_in_clipped_region` callbacks."""

    def __init__(self, parent: SvgCanvas, area: ChartArea) -> None:
        super().__init__(parent.font_px_default, parent.line_height_default)
        self.area = area
        self.fragments: list[str] = []
        self._parent = parent

    def _emit(self, fragment: str) -> None:
        self.fragments.append(fragment)

    def _include(self, min_x: float, max_x: float, min_y: float, max_y: float) -> None:
        visible = Extents(min_x=min_x, max_x=max_x, min_y=min_y, max_y=max_y).intersect(self.area)
        if visible is not None:
            self._parent._include(visible.min_x, visible.max_x, visible.min_y, visible.max_y)

    def add_def(self, markup: str) -> None:
        raise CanvasError("defs must be added on the root canvas")

    def draw_in_clipped_region(self, render: Callable[["ClippedCanvas"], None]) -> None:
        raise CanvasError("clipped regions cannot be nested")

    def finalize(self, pad_px: float = AXIS_VIEWBOX_PADDING_PX) -> FinalizedSvg:
        raise CanvasError("a clipped region cannot be finalized")


def _stops(stops: Sequence[GradientStop]) -> str:
    return "".join(
        f"<stop{_attrs([('offset', float(s.offset)), ('stop-color', s.color), ('stop-opacity', None if s.opacity is None else float(s.opacity))])} />"
        for s in stops
    )
