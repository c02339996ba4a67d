"""Snapping guides for rectangle and polygon fog drawing.

Guides are axis-aligned lines proposed when the pointer comes within
``sensitivity`` grid cells of a grid cell edge or of another shape's bounding
box edge. ``select_best_guides`` keeps the closest candidate per axis and
``snap_to_guides`` moves a point onto them. Everything here is pure and runs on
every pointer move.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .grid import Grid, nearest_cell_box
from .shapes import BoundingBox
from .vector2 import Point, add, divide

MAP_BOUNDS = BoundingBox(min=(0.0, 0.0), max=(1.0, 1.0))


class Orientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class Guide:
    orientation: Orientation
    start: Point
    end: Point
    distance: float = 0.0

    def distance_to(self, point: Point) -> float:
        if self.orientation == Orientation.VERTICAL:
            return abs(point[0] - self.start[0])
        return abs(point[1] - self.start[1])


def _box_edges(box: BoundingBox) -> Iterable[Tuple[Orientation, Point, Point]]:
    for x in (box.min[0], box.max[0]):
        yield Orientation.VERTICAL, (x, box.min[1]), (x, box.max[1])
    for y in (box.min[1], box.max[1]):
        yield Orientation.HORIZONTAL, (box.min[0], y), (box.max[0], y)


def _guides_near(
    point: Point,
    edges: Iterable[Tuple[Orientation, Point, Point]],
    cell_size: Point,
    sensitivity: float,
) -> List[Guide]:
    guides: List[Guide] = []
    for orientation, start, end in edges:
        if orientation == Orientation.VERTICAL:
            dist = abs(point[0] - start[0])
            cells = dist / cell_size[0]
        else:
            dist = abs(point[1] - start[1])
            cells = dist / cell_size[1]
        if cells <= sensitivity:
            guides.append(Guide(orientation=orientation, start=start, end=end, distance=dist))
    return guides


def guides_from_bounding_boxes(
    point: Point,
    boxes: Sequence[BoundingBox],
    cell_size: Point,
    sensitivity: float,
) -> List[Guide]:
    """Candidate guides from shape bounding box edges.

    ``point``, ``boxes`` and ``cell_size`` are all normalized; ``sensitivity`` is
    measured in grid cells.
    """
    edges = [edge for box in boxes for edge in _box_edges(box)]
    return _guides_near(point, edges, cell_size, sensitivity)


def guides_from_grid(
    point: Point,
    grid: Grid,
    cell_pixel_size: Point,
    grid_offset: Point,
    cell_pixel_offset: Point,
    sensitivity: float,
    map_size: Point,
) -> List[Guide]:
    """Candidate guides from the nearest grid cell and the map border.

    ``point`` and the sizes are in map pixels; returned guides are normalized.
    """
    origin = add(grid_offset, cell_pixel_offset)
    cell_box = nearest_cell_box(grid, point, cell_pixel_size, origin)
    normalized_box = BoundingBox(min=divide(cell_box.min, map_size), max=divide(cell_box.max, map_size))
    edges = list(_box_edges(normalized_box))
    edges.extend(_box_edges(MAP_BOUNDS))
    return _guides_near(divide(point, map_size), edges, divide(cell_pixel_size, map_size), sensitivity)


def select_best_guides(point: Point, guides: Iterable[Guide]) -> List[Guide]:
    """Keep the closest vertical and the closest horizontal guide."""
    best: dict = {}
    for guide in guides:
        dist = guide.distance_to(point)
        current = best.get(guide.orientation)
        if current is None or dist < current[0]:
            best[guide.orientation] = (dist, guide)
    out: List[Guide] = []
    for orientation in (Orientation.VERTICAL, Orientation.HORIZONTAL):
        if orientation in best:
            dist, guide = best[orientation]
            out.append(Guide(orientation=guide.orientation, start=guide.start, end=guide.end, distance=dist))
    return out


def snap_to_guides(point: Point, guides: Iterable[Guide]) -> Point:
    x, y = point
    for guide in guides:
        if guide.orientation == Orientation.VERTICAL:
            x = guide.start[0]
        elif guide.orientation == Orientation.HORIZONTAL:
            y = guide.start[1]
    return (x, y)


def find_guides(
    point: Point,
    boxes: Sequence[BoundingBox],
    cell_size: Point,
    sensitivity: float,
    grid_guides: Optional[Iterable[Guide]] = None,
) -> List[Guide]:
    """Combine grid and bounding box candidates and select the best per axis."""
    candidates: List[Guide] = list(grid_guides or [])
    candidates.extend(guides_from_bounding_boxes(point, boxes, cell_size, sensitivity))
    return select_best_guides(point, candidates)


__all__ = [
    "Orientation",
    "Guide",
    "MAP_BOUNDS",
    "guides_from_bounding_boxes",
    "guides_from_grid",
    "select_best_guides",
    "snap_to_guides",
    "find_guides",
]
