from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal, Sequence

import numpy as np

from .constants import (
    AXIS_TITLE_FONT_PX,
    CHART_TITLE_FONT_PX,
    CHART_TITLE_TOP_PADDING_PX,
    LABEL_AVG_CHAR_WIDTH_PX,
    PADDING_PX,
    TICK_LABEL_FONT_PX,
    TICK_LABEL_PADDING_PX,
    TICK_LENGTH_PX,
    X_AXIS_TITLE_PADDING_PX,
)
from .text import estimate_wrapped_text_dimensions

Orientation = Literal["horizontal", "vertical"]


@dataclass(frozen=True)
class ChartArea:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class Extents:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def include(self, min_x: float, max_x: float, min_y: float, max_y: float) -> "Extents":
        return Extents(
            min_x=min(self.min_x, min_x),
            max_x=max(self.max_x, max_x),
            min_y=min(self.min_y, min_y),
            max_y=max(self.max_y, max_y),
        )

    def intersect(self, area: ChartArea) -> "Extents | None":
        min_x = max(self.min_x, area.left)
        max_x = min(self.max_x, area.right)
        min_y = max(self.min_y, area.top)
        max_y = min(self.max_y, area.bottom)
        if min_x > max_x or min_y > max_y:
            return None
        return Extents(min_x=min_x, max_x=max_x, min_y=min_y, max_y=max_y)

    @classmethod
    def from_area(cls, area: ChartArea) -> "Extents":
        return cls(min_x=area.left, max_x=area.right, min_y=area.top, max_y=area.bottom)


@dataclass(frozen=True)
class FinalizedSvg:
    svg_body: str
    vb_min_x: int
    vb_min_y: int
    width: int
    height: int

    @property
    def view_box(self) -> str:
        return f"{self.vb_min_x} {self.vb_min_y} {self.width} {self.height}"


def select_axis_labels(
    labels: Sequence[str],
    positions: Sequence[float],
    axis_length_px: float,
    orientation: Orientation,
    font_px: float = TICK_LABEL_FONT_PX,
    min_gap_px: float = 0.0,
    avg_char_width_px: float = LABEL_AVG_CHAR_WIDTH_PX,
) -> set[int]:
    """Pick the indices of tick labels to draw so that adjacent ones never collide.

    Labels are thinned to every n-th non-empty label. The stride starts from
    the count that fits the axis at average label size and grows until every
    pair of kept neighbours is at least `min_gap_px` apart at its real size.
    """

    if len(labels) != len(positions):
        raise ValueError("labels and positions must have equal length")
    candidates = [i for i, label in enumerate(labels) if label]
    if not candidates:
        return set()

    if orientation == "horizontal":
        sizes = np.asarray([len(labels[i]) * avg_char_width_px for i in candidates], dtype=np.float64)
    else:
        sizes = np.full(len(candidates), float(font_px), dtype=np.float64)
    coords = np.asarray([positions[i] for i in candidates], dtype=np.float64)

    avg_size = float(np.mean(sizes))
    max_fit = max(1, int(math.floor(axis_length_px / (avg_size + min_gap_px)))) if avg_size + min_gap_px > 0 else len(candidates)
    step = 1 if len(candidates) <= max_fit else int(math.ceil(len(candidates) / max_fit))

    while step < len(candidates) and not _stride_fits(coords, sizes, step, min_gap_px):
        step += 1
    return {candidates[i] for i in range(0, len(candidates), step)}


def _stride_fits(coords: np.ndarray, sizes: np.ndarray, step: int, min_gap_px: float) -> bool:
    picked_coords = coords[::step]
    picked_sizes = sizes[::step]
    if picked_coords.size < 2:
        return True
    gaps = np.abs(np.diff(picked_coords)) - (picked_sizes[:-1] + picked_sizes[1:]) / 2.0
    return bool(np.all(gaps >= min_gap_px - 1e-9))


def calculate_title_layout(title: str | None, chart_width_px: float) -> float:
    """Return the vertical space reserved above the plot for an optional chart title."""

    if not title:
        return 0.0
    dims = estimate_wrapped_text_dimensions(title, max(1.0, chart_width_px - 2 * PADDING_PX), CHART_TITLE_FONT_PX)
    return CHART_TITLE_TOP_PADDING_PX + dims.height


def calculate_y_axis_layout(
    tick_labels: Sequence[str],
    axis_title: str | None,
    chart_height_px: float,
    *,
    avg_char_width_px: float = LABEL_AVG_CHAR_WIDTH_PX,
) -> tuple[float, float]:
    """Return (left margin, x position of the rotated axis title) sized to the widest tick label."""

    max_label_width = max((len(label) * avg_char_width_px for label in tick_labels), default=0.0)
    title_width = 0.0
    if axis_title:
        title_width = estimate_wrapped_text_dimensions(axis_title, chart_height_px, AXIS_TITLE_FONT_PX).height
    left_margin = TICK_LENGTH_PX + TICK_LABEL_PADDING_PX + max_label_width + title_width + PADDING_PX
    title_x = PADDING_PX + title_width / 2.0
    return left_margin, title_x


def calculate_right_y_axis_layout(
    tick_labels: Sequence[str],
    axis_title: str | None,
    chart_height_px: float,
    *,
    avg_char_width_px: float = LABEL_AVG_CHAR_WIDTH_PX,
) -> tuple[float, float]:
    """Mirror of `calculate_y_axis_layout` for an axis on the right edge.

    Returns (right margin, distance of the rotated title from the right edge).
    """

    max_label_width = max((len(label) * avg_char_width_px for label in tick_labels), default=0.0)
    title_width = 0.0
    if axis_title:
        title_width = estimate_wrapped_text_dimensions(axis_title, chart_height_px, AXIS_TITLE_FONT_PX).height
    right_margin = TICK_LENGTH_PX + TICK_LABEL_PADDING_PX + max_label_width + title_width + PADDING_PX
    return right_margin, PADDING_PX + title_width / 2.0


def calculate_x_axis_layout(axis_title: str | None, chart_width_px: float) -> float:
    """Return the bottom margin needed for tick labels plus an optional wrapped axis title."""

    base = TICK_LENGTH_PX + TICK_LABEL_PADDING_PX + TICK_LABEL_FONT_PX
    if not axis_title:
        return base + PADDING_PX
    dims = estimate_wrapped_text_dimensions(axis_title, chart_width_px, AXIS_TITLE_FONT_PX)
    return base + X_AXIS_TITLE_PADDING_PX + dims.height + PADDING_PX / 2.0


def calculate_line_legend_layout(
    labels: Sequence[str],
    *,
    font_px: float = TICK_LABEL_FONT_PX,
    row_gap_px: float = 6.0,
    sample_length_px: float = 20.0,
) -> tuple[float, float]:
    """Return (width, height) of a vertical legend block with one row per label."""

    if not labels:
        return 0.0, 0.0
    max_label = max(len(label) * font_px * 0.6 for label in labels)
    width = sample_length_px + 8.0 + max_label
    height = len(labels) * font_px + (len(labels) - 1) * row_gap_px
    return width, height
