"""Point-sequence simplification for hand drawn fog.

Brush strokes arrive as dense pointer samples. Before they are committed the
sequence is reduced with the Douglas-Peucker algorithm using a tolerance tied
to the map's grid cell size, so a stroke keeps the same visual fidelity no
matter how finely the map is gridded.
"""
from __future__ import annotations

from typing import List, Sequence

import numpy as np

from .vector2 import Point, min_component

# Fraction of a grid cell used as the simplification tolerance at zoom 1.
SIMPLIFY_SIZE = 0.01
# Fog smoothing is downscaled because it does not play well with edge snapping.
SIMPLIFY_DOWNSCALE = 2.0


def _segment_distances(points: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Distance of every row of ``points`` to the segment ``a``-``b``."""
    ab = b - a
    denom = float(np.dot(ab, ab))
    if denom <= 1e-24:
        delta = points - a
        return np.hypot(delta[:, 0], delta[:, 1])
    t = np.clip(((points - a) @ ab) / denom, 0.0, 1.0)
    proj = a + t[:, None] * ab
    delta = points - proj
    return np.hypot(delta[:, 0], delta[:, 1])


def douglas_peucker(points: Sequence[Point], tolerance: float) -> List[Point]:
    """Return the subsequence of ``points`` kept by Douglas-Peucker.

    Endpoints are always kept. Interior points survive when their distance to
    the chord of the current span exceeds ``tolerance``. Ties resolve to the
    first maximal point so running the result through again is a no-op.
    """
    pts = [(float(p[0]), float(p[1])) for p in points]
    if len(pts) <= 2:
        return pts
    arr = np.asarray(pts, dtype=float)
    keep = np.zeros(len(pts), dtype=bool)
    keep[0] = keep[-1] = True
    stack = [(0, len(pts) - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue
        dists = _segment_distances(arr[first + 1:last], arr[first], arr[last])
        idx = int(np.argmax(dists))
        if dists[idx] > tolerance:
            split = first + 1 + idx
            keep[split] = True
            stack.append((first, split))
            stack.append((split, last))
    return [pt for pt, kept in zip(pts, keep) if kept]


def simplify_tolerance(grid_cell_size: Point, scale: float, base_size: float = SIMPLIFY_SIZE) -> float:
    return min_component(grid_cell_size) * base_size / max(float(scale), 1e-9)


def simplify_points(
    points: Sequence[Point],
    grid_cell_size: Point,
    scale: float,
    base_size: float = SIMPLIFY_SIZE,
) -> List[Point]:
    """Simplify ``points`` with a tolerance relative to the normalized grid cell size.

    ``scale`` divides the tolerance: larger zoom keeps more detail.
    """
    return douglas_peucker(points, simplify_tolerance(grid_cell_size, scale, base_size))


def simplify_scale(zoom: float, downscale: float = SIMPLIFY_DOWNSCALE) -> float:
    """Scale divisor passed to :func:`simplify_points` for the current view zoom."""
    return max(float(zoom), 1.0) / float(downscale)


__all__ = [
    "SIMPLIFY_SIZE",
    "SIMPLIFY_DOWNSCALE",
    "douglas_peucker",
    "simplify_tolerance",
    "simplify_points",
    "simplify_scale",
]
