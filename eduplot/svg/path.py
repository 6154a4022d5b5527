from __future__ import annotations

from ..layout import Extents
from ..text import format_number


class PathBuilder:
    """Incremental SVG path data builder that tracks the extents of the points it visits.

    Curve control points are included in the extents, which over-approximates
    the true curve bounds. Arcs only contribute their endpoints.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._extents: Extents | None = None

    @property
    def extents(self) -> Extents | None:
        return self._extents

    def move_to(self, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"M {format_number(x)} {format_number(y)}")
        self._track(x, y)
        return self

    def line_to(self, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"L {format_number(x)} {format_number(y)}")
        self._track(x, y)
        return self

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"Q {format_number(cx)} {format_number(cy)} {format_number(x)} {format_number(y)}")
        self._track(cx, cy)
        self._track(x, y)
        return self

    def bezier_curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> "PathBuilder":
        coords = " ".join(format_number(v) for v in (c1x, c1y, c2x, c2y, x, y))
        self._parts.append(f"C {coords}")
        self._track(c1x, c1y)
        self._track(c2x, c2y)
        self._track(x, y)
        return self

    def arc_to(
        self,
        rx: float,
        ry: float,
        x_axis_rotation: float,
        large_arc: bool,
        sweep: bool,
        x: float,
        y: float,
    ) -> "PathBuilder":
        self._parts.append(
            f"A {format_number(rx)} {format_number(ry)} {format_number(x_axis_rotation)} "
            f"{int(large_arc)} {int(sweep)} {format_number(x)} {format_number(y)}"
        )
        self._track(x, y)
        return self

    def close_path(self) -> "PathBuilder":
        self._parts.append("Z")
        return self

    def path_data(self) -> str:
        return " ".join(self._parts).strip()

    def _track(self, x: float, y: float) -> None:
        if self._extents is None:
            self._extents = Extents(min_x=x, max_x=x, min_y=y, max_y=y)
        else:
            self._extents = self._extents.include(x, x, y, y)
