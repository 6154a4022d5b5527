from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Callable, Literal, Mapping, Sequence

import numpy as np

from .errors import InvalidLineEquationError, LabelPlacementError
from .layout import ChartArea
from .placement import (
    LabelBox,
    Segment,
    box_hits,
    clip_segment,
    point_at_half_length,
    search_label_box,
    unit_vectors,
)
from .plane import PlaneAxis
from .svg.canvas import ClippedCanvas, SvgCanvas
from .text import abbreviate_month, estimate_text_width, format_number
from .theme import DEFAULT_THEME, ThemeTokens

LOGGER = logging.getLogger(__name__)

Mapper = Callable[[float], float]
LineStyle = Literal["solid", "dashed"]

LABEL_MIN_AXIS_GAP_PX = 14.0
LABEL_FAR_INWARD_FRACTION = 0.15
LABEL_FONT_WEIGHT = 700
MIN_FUNCTION_RESOLUTION = 10


@dataclass(frozen=True)
class PlotPoint:
    id: str
    x: float
    y: float
    label: str = ""
    style: Literal["open", "closed"] = "closed"
    color: str | None = None


@dataclass(frozen=True)
class SlopeInterceptEquation:
    slope: float
    y_intercept: float


@dataclass(frozen=True)
class StandardEquation:
    """Ax + By = C."""

    a: float
    b: float
    c: float


@dataclass(frozen=True)
class PointSlopeEquation:
    x1: float
    y1: float
    slope: float


LineEquation = SlopeInterceptEquation | StandardEquation | PointSlopeEquation


@dataclass(frozen=True)
class PlotLine:
    id: str
    equation: LineEquation
    color: str = "#000000"
    style: LineStyle = "solid"
    label: str | None = None


@dataclass(frozen=True)
class PlotPolygon:
    vertices: tuple[str, ...]
    is_closed: bool = True
    fill_color: str = "none"
    stroke_color: str = "#000000"
    label: str = ""


@dataclass(frozen=True)
class PlotDistance:
    point_id1: str
    point_id2: str
    show_legs: bool = True
    show_leg_labels: bool = False
    hypotenuse_label: str | None = None
    color: str = "#000000"
    style: LineStyle = "dashed"


@dataclass(frozen=True)
class PointsPolyline:
    id: str
    points: tuple[tuple[float, float], ...]
    color: str = "#000000"
    style: LineStyle = "solid"
    label: str | None = None


@dataclass(frozen=True)
class FunctionPolyline:
    """Polynomial y = c0*x^n + c1*x^(n-1) + ... + cn sampled over [x_min, x_max]."""

    id: str
    coefficients: tuple[float, ...]
    x_min: float
    x_max: float
    resolution: int = 100
    color: str = "#000000"
    style: LineStyle = "solid"
    label: str | None = None

    def __post_init__(self) -> None:
        if not self.coefficients:
            raise ValueError("FunctionPolyline.coefficients must not be empty")
        if self.resolution < MIN_FUNCTION_RESOLUTION:
            raise ValueError(f"FunctionPolyline.resolution must be >= {MIN_FUNCTION_RESOLUTION}")
        if not self.x_min < self.x_max:
            raise ValueError("FunctionPolyline.x_min must be less than x_max")

    def sample(self) -> tuple[np.ndarray, np.ndarray]:
        xs = np.linspace(self.x_min, self.x_max, self.resolution)
        ys = np.polyval(np.asarray(self.coefficients, dtype=np.float64), xs)
        return xs, ys


PlotPolyline = PointsPolyline | FunctionPolyline


def _dash(style: LineStyle, pattern: str) -> str | None:
    return pattern if style == "dashed" else None


def _label_size(text: str, font_px: float) -> tuple[float, float]:
    return estimate_text_width(text, font_px), font_px * 1.2


def render_points(
    points: Sequence[PlotPoint],
    to_svg_x: Mapper,
    to_svg_y: Mapper,
    canvas: SvgCanvas,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> None:
    for point in points:
        px = to_svg_x(point.x)
        py = to_svg_y(point.y)
        color = point.color or theme.black
        canvas.draw_circle(
            px,
            py,
            theme.point_radius,
            fill=theme.white if point.style == "open" else color,
            stroke=color,
            stroke_width=theme.stroke_base,
        )
        if point.label:
            canvas.draw_text(px + 6.0, py - 6.0, abbreviate_month(point.label), fill=theme.text)


def line_endpoints(line: PlotLine, x_axis: PlaneAxis, y_axis: PlaneAxis) -> tuple[float, float, float, float]:
    """Return data-space endpoints (x1, y1, x2, y2) spanning the visible domain."""

    eq = line.equation
    if isinstance(eq, SlopeInterceptEquation):
        return x_axis.min, eq.slope * x_axis.min + eq.y_intercept, x_axis.max, eq.slope * x_axis.max + eq.y_intercept
    if isinstance(eq, StandardEquation):
        if eq.b == 0:
            if eq.a == 0:
                raise InvalidLineEquationError(line.id)
            x = eq.c / eq.a
            return x, y_axis.min, x, y_axis.max
        return (
            x_axis.min,
            (eq.c - eq.a * x_axis.min) / eq.b,
            x_axis.max,
            (eq.c - eq.a * x_axis.max) / eq.b,
        )
    return (
        x_axis.min,
        eq.slope * (x_axis.min - eq.x1) + eq.y1,
        x_axis.max,
        eq.slope * (x_axis.max - eq.x1) + eq.y1,
    )


def render_lines(
    lines: Sequence[PlotLine],
    x_axis: PlaneAxis,
    y_axis: PlaneAxis,
    to_svg_x: Mapper,
    to_svg_y: Mapper,
    canvas: SvgCanvas,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> None:
    """Draw infinite lines clipped to the plot area and place their labels clear of axes."""

    area = _area_from_mappers(x_axis, y_axis, to_svg_x, to_svg_y)
    y_axis_x = to_svg_x(0.0) if x_axis.min <= 0 <= x_axis.max else None
    avoid_axes: list[Segment] = []
    if y_axis.min <= 0 <= y_axis.max:
        y0 = to_svg_y(0.0)
        avoid_axes.append(((area.left, y0), (area.right, y0)))
    if y_axis_x is not None:
        avoid_axes.append(((y_axis_x, area.top), (y_axis_x, area.bottom)))

    for line in lines:
        x1, y1, x2, y2 = line_endpoints(line, x_axis, y_axis)
        a = (to_svg_x(x1), to_svg_y(y1))
        b = (to_svg_x(x2), to_svg_y(y2))
        dash = _dash(line.style, theme.dash_dashed)

        def draw(clipped: ClippedCanvas, a=a, b=b, line=line, dash=dash) -> None:
            clipped.draw_line(a[0], a[1], b[0], b[1], stroke=line.color, stroke_width=theme.stroke_thick, dash=dash)

        canvas.draw_in_clipped_region(draw)

        text = (line.label or "").strip()
        if not text:
            continue
        visible = clip_segment((a, b), area)
        if visible is None:
            LOGGER.warning("line `%s` is outside the plot area; label skipped", line.id)
            continue
        box = _place_line_label(text, visible, avoid_axes, area, y_axis_x, theme.font_medium)
        if box is None:
            LOGGER.error("label placement failed for line `%s`", line.id)
            raise LabelPlacementError(text)
        canvas.draw_text(
            box.cx,
            box.cy,
            abbreviate_month(text),
            anchor="middle",
            baseline="middle",
            font_px=theme.font_medium,
            font_weight=LABEL_FONT_WEIGHT,
            fill=line.color,
        )


def _place_line_label(
    text: str,
    segment: Segment,
    avoid_axes: Sequence[Segment],
    area: ChartArea,
    y_axis_x: float | None,
    font_px: float,
) -> LabelBox | None:
    width, height = _label_size(text, font_px)
    (tx, ty), (nx, ny) = unit_vectors(*segment)
    avoid = [*avoid_axes, segment]
    a, b = segment
    x0 = y_axis_x if y_axis_x is not None else 0.0
    far, near = (a, b) if abs(a[0] - x0) >= abs(b[0] - x0) else (b, a)
    anchors = [
        (far[0] + (near[0] - far[0]) * LABEL_FAR_INWARD_FRACTION, far[1] + (near[1] - far[1]) * LABEL_FAR_INWARD_FRACTION),
        ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0),
    ]

    chosen: LabelBox | None = None
    best = -math.inf
    for anchor in anchors:
        preferred = 1
        if y_axis_x is not None:
            preferred = 1 if (anchor[0] - x0 >= 0) == (tx >= 0) else -1
        box = search_label_box(anchor, (tx, ty), (nx, ny), width, height, avoid, area, preferred)
        if box is None:
            continue
        if y_axis_x is not None and abs(box.cx - x0) < width / 2.0 + LABEL_MIN_AXIS_GAP_PX:
            box = _nudge_from_axis(box, (tx, ty), preferred, avoid, area, x0)
        distance = abs(box.cx - x0) if y_axis_x is not None else math.inf
        if distance > best:
            best = distance
            chosen = box
    return chosen


def _nudge_from_axis(
    box: LabelBox,
    tangent: tuple[float, float],
    direction: int,
    avoid: Sequence[Segment],
    area: ChartArea,
    axis_x: float,
) -> LabelBox:
    for i in range(1, 21):
        candidate = LabelBox(
            cx=box.cx + direction * tangent[0] * 6.0 * i,
            cy=box.cy + direction * tangent[1] * 6.0 * i,
            width=box.width,
            height=box.height,
        )
        if (
            candidate.within(area)
            and not box_hits(candidate, avoid)
            and abs(candidate.cx - axis_x) >= box.width / 2.0 + LABEL_MIN_AXIS_GAP_PX
        ):
            return candidate
    return box


def _area_from_mappers(x_axis: PlaneAxis, y_axis: PlaneAxis, to_svg_x: Mapper, to_svg_y: Mapper) -> ChartArea:
    left = min(to_svg_x(x_axis.min), to_svg_x(x_axis.max))
    right = max(to_svg_x(x_axis.min), to_svg_x(x_axis.max))
    top = min(to_svg_y(y_axis.min), to_svg_y(y_axis.max))
    bottom = max(to_svg_y(y_axis.min), to_svg_y(y_axis.max))
    return ChartArea(left=left, top=top, width=right - left, height=bottom - top)


def render_polygons(
    polygons: Sequence[PlotPolygon],
    point_map: Mapping[str, PlotPoint],
    to_svg_x: Mapper,
    to_svg_y: Mapper,
    canvas: SvgCanvas,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> None:
    """Draw polygons whose vertices reference plotted points; unknown ids are dropped."""

    def draw(clipped: ClippedCanvas) -> None:
        for polygon in polygons:
            missing = [vid for vid in polygon.vertices if vid not in point_map]
            if missing:
                LOGGER.warning("polygon skips unknown point ids: %s", ", ".join(missing))
            vertices = [
                (to_svg_x(point_map[vid].x), to_svg_y(point_map[vid].y)) for vid in polygon.vertices if vid in point_map
            ]
            if not vertices:
                continue
            if polygon.is_closed:
                clipped.draw_polygon(
                    vertices, fill=polygon.fill_color, stroke=polygon.stroke_color, stroke_width=theme.stroke_thick
                )
            else:
                clipped.draw_polyline(vertices, stroke=polygon.stroke_color, stroke_width=theme.stroke_thick)
            if polygon.label:
                centroid_x = sum(v[0] for v in vertices) / len(vertices)
                bottom_y = max(v[1] for v in vertices)
                clipped.draw_text(
                    centroid_x,
                    bottom_y + 20.0,
                    abbreviate_month(polygon.label),
                    anchor="middle",
                    font_px=theme.font_medium,
                    font_weight=500,
                    fill=polygon.stroke_color,
                )

    if polygons:
        canvas.draw_in_clipped_region(draw)


def render_distances(
    distances: Sequence[PlotDistance],
    point_map: Mapping[str, PlotPoint],
    to_svg_x: Mapper,
    to_svg_y: Mapper,
    canvas: SvgCanvas,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> None:
    """Draw the segment between two points plus optional right-triangle legs and length labels."""

    for distance in distances:
        p1 = point_map.get(distance.point_id1)
        p2 = point_map.get(distance.point_id2)
        if p1 is None or p2 is None:
            LOGGER.warning("distance references unknown point: %s -> %s", distance.point_id1, distance.point_id2)
            continue
        a = (to_svg_x(p1.x), to_svg_y(p1.y))
        b = (to_svg_x(p2.x), to_svg_y(p2.y))
        corner = (b[0], a[1])
        dash = _dash(distance.style, theme.dash_distance)
        canvas.draw_line(a[0], a[1], b[0], b[1], stroke=distance.color, stroke_width=theme.stroke_base, dash=dash)
        if distance.show_legs:
            canvas.draw_line(
                a[0], a[1], corner[0], corner[1], stroke=distance.color, stroke_width=theme.stroke_base, dash=dash
            )
            canvas.draw_line(
                corner[0], corner[1], b[0], b[1], stroke=distance.color, stroke_width=theme.stroke_base, dash=dash
            )
            if distance.show_leg_labels:
                below = 1.0 if corner[1] >= b[1] else -1.0
                canvas.draw_text(
                    (a[0] + corner[0]) / 2.0,
                    corner[1] + below * 14.0,
                    format_number(abs(p2.x - p1.x)),
                    anchor="middle",
                    baseline="middle",
                    font_px=theme.font_base,
                    fill=distance.color,
                )
                side = 1.0 if corner[0] >= a[0] else -1.0
                canvas.draw_text(
                    corner[0] + side * 8.0,
                    (corner[1] + b[1]) / 2.0,
                    format_number(abs(p2.y - p1.y)),
                    anchor="start" if side > 0 else "end",
                    baseline="middle",
                    font_px=theme.font_base,
                    fill=distance.color,
                )
        if distance.hypotenuse_label:
            _, (nx, ny) = unit_vectors(a, b)
            canvas.draw_text(
                (a[0] + b[0]) / 2.0 - nx * 12.0,
                (a[1] + b[1]) / 2.0 - ny * 12.0,
                distance.hypotenuse_label,
                anchor="middle",
                baseline="middle",
                font_px=theme.font_base,
                fill=distance.color,
            )


def polyline_pixels(polyline: PlotPolyline, to_svg_x: Mapper, to_svg_y: Mapper) -> list[tuple[float, float]]:
    if isinstance(polyline, FunctionPolyline):
        xs, ys = polyline.sample()
        return [(to_svg_x(float(x)), to_svg_y(float(y))) for x, y in zip(xs, ys)]
    return [(to_svg_x(x), to_svg_y(y)) for x, y in polyline.points]


def render_polylines(
    polylines: Sequence[PlotPolyline],
    to_svg_x: Mapper,
    to_svg_y: Mapper,
    canvas: SvgCanvas,
    *,
    theme: ThemeTokens = DEFAULT_THEME,
) -> None:
    """Draw point-list and polynomial polylines inside the clip region, labeling each at half its length."""

    def draw(clipped: ClippedCanvas) -> None:
        for polyline in polylines:
            pixels = polyline_pixels(polyline, to_svg_x, to_svg_y)
            if not pixels:
                continue
            clipped.draw_polyline(
                pixels,
                stroke=polyline.color,
                stroke_width=theme.stroke_thick,
                dash=_dash(polyline.style, theme.dash_dashed),
            )
            text = (polyline.label or "").strip()
            if not text or len(pixels) < 2:
                continue
            anchor, a, b = point_at_half_length(pixels)
            tangent, (nx, ny) = unit_vectors(a, b)
            width, height = _label_size(text, theme.font_medium)
            avoid: list[Segment] = list(zip(pixels, pixels[1:]))
            box = search_label_box(anchor, tangent, (nx, ny), width, height, avoid, None)
            if box is None:
                LOGGER.error("label placement failed for polyline `%s`", polyline.id)
                raise LabelPlacementError(text)
            clipped.draw_text(
                box.cx,
                box.cy,
                abbreviate_month(text),
                anchor="middle",
                baseline="middle",
                font_px=theme.font_medium,
                font_weight=LABEL_FONT_WEIGHT,
                fill=polyline.color,
            )

    if polylines:
        canvas.draw_in_clipped_region(draw)
