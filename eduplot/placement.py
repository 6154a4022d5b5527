from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

from .layout import ChartArea

Point = tuple[float, float]
Segment = tuple[Point, Point]

STEP_PX = 6.0
MAX_STEPS = 80
BOUNDS_PAD_PX = 2.0


@dataclass(frozen=True)
class LabelBox:
    cx: float
    cy: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.cx - self.width / 2.0

    @property
    def top(self) -> float:
        return self.cy - self.height / 2.0

    def edges(self) -> list[Segment]:
        x1, y1 = self.left, self.top
        x2, y2 = x1 + self.width, y1 + self.height
        return [((x1, y1), (x2, y1)), ((x2, y1), (x2, y2)), ((x2, y2), (x1, y2)), ((x1, y2), (x1, y1))]

    def within(self, area: ChartArea, pad: float = BOUNDS_PAD_PX) -> bool:
        return (
            self.left - pad >= area.left
            and self.left + self.width + pad <= area.right
            and self.top - pad >= area.top
            and self.top + self.height + pad <= area.bottom
        )


def _orient(p: Point, q: Point, r: Point) -> int:
    v = (q[1] - p[1]) * (r[0] - q[0]) - (q[0] - p[0]) * (r[1] - q[1])
    if v > 1e-9:
        return 1
    if v < -1e-9:
        return -1
    return 0


def segments_intersect(a: Segment, b: Segment) -> bool:
    p1, p2 = a
    p3, p4 = b
    return _orient(p1, p2, p3) != _orient(p1, p2, p4) and _orient(p3, p4, p1) != _orient(p3, p4, p2)


def box_hits(box: LabelBox, avoid: Sequence[Segment]) -> bool:
    return any(segments_intersect(edge, seg) for seg in avoid for edge in box.edges())


def clip_segment(segment: Segment, area: ChartArea) -> Segment | None:
    """Clip a segment to the chart rectangle (Liang-Barsky), or None when it misses entirely."""

    (x0, y0), (x1, y1) = segment
    dx = x1 - x0
    dy = y1 - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - area.left), (dx, area.right - x0), (-dy, y0 - area.top), (dy, area.bottom - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        t = q / p
        if p < 0:
            t0 = max(t0, t)
        else:
            t1 = min(t1, t)
        if t0 > t1:
            return None
    return (x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy)


def walk_along(
    base: Point,
    tangent: Point,
    direction: int,
    width: float,
    height: float,
    avoid: Sequence[Segment],
    area: ChartArea | None,
) -> tuple[LabelBox, int] | None:
    """Step from `base` along `tangent` until a box fits inside `area` without touching `avoid`."""

    tx, ty = tangent
    for i in range(MAX_STEPS):
        box = LabelBox(
            cx=base[0] + direction * tx * i * STEP_PX,
            cy=base[1] + direction * ty * i * STEP_PX,
            width=width,
            height=height,
        )
        if area is not None and not box.within(area):
            continue
        if not box_hits(box, avoid):
            return box, i
    return None


def nearest_of(first: tuple[LabelBox, int] | None, second: tuple[LabelBox, int] | None) -> tuple[LabelBox, int] | None:
    if first is not None and second is not None:
        return first if first[1] <= second[1] else second
    return first if first is not None else second


def unit_vectors(a: Point, b: Point) -> tuple[Point, Point]:
    """Return (tangent, normal) unit vectors for the direction a -> b."""

    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length = math.hypot(dx, dy) or 1.0
    tx, ty = dx / length, dy / length
    return (tx, ty), (-ty, tx)


def point_at_half_length(points: Sequence[Point]) -> tuple[Point, Point, Point]:
    """Return the point halfway along a polyline plus the segment it falls on."""

    lengths = [math.hypot(b[0] - a[0], b[1] - a[1]) for a, b in zip(points, points[1:])]
    target = sum(lengths) / 2.0
    index = 0
    while index < len(lengths) and target > lengths[index]:
        target -= lengths[index]
        index += 1
    index = min(index, len(lengths) - 1)
    a = points[index]
    b = points[index + 1]
    t = target / max(1.0, lengths[index] or 1.0)
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t), a, b


NORMAL_OFFSETS_PX: tuple[float, ...] = (14.0, 28.0, 42.0, 56.0, 70.0)


def search_label_box(
    anchor: Point,
    tangent: Point,
    normal: Point,
    width: float,
    height: float,
    avoid: Sequence[Segment],
    area: ChartArea | None,
    preferred: int = 1,
) -> LabelBox | None:
    """Find a collision-free label box near `anchor`.

    Each offset from the line is tried on both sides before moving further
    out; at a given offset the box slides along the tangent in both
    directions and the closest hit wins.
    """

    for offset in NORMAL_OFFSETS_PX:
        for side in (1, -1):
            base = (anchor[0] + side * normal[0] * offset, anchor[1] + side * normal[1] * offset)
            found = nearest_of(
                walk_along(base, tangent, preferred, width, height, avoid, area),
                walk_along(base, tangent, -preferred, width, height, avoid, area),
            )
            if found is not None:
                return found[0]
    return None
