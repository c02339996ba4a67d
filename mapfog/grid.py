"""Grid cell lookup used by grid snapping.

Square grids tile cells edge to edge. Hex grids come in two orientations:
``hexVertical`` hexes are pointy-top and stacked in rows, odd rows shifted right
by half a cell; ``hexHorizontal`` hexes are flat-top and laid out in columns,
odd columns shifted down by half a cell. Cell sizes are the pixel size of a
cell's bounding box.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Iterator, Tuple

from pydantic import BaseModel, Field

from .shapes import BoundingBox
from .vector2 import Point

# Row (or column) pitch of a hex grid as a fraction of the cell size.
HEX_PITCH = 0.75


class GridType(str, Enum):
    SQUARE = "square"
    HEX_VERTICAL = "hexVertical"
    HEX_HORIZONTAL = "hexHorizontal"


class Grid(BaseModel):
    type: GridType = Field(GridType.SQUARE, description="Cell layout of the grid.")
    size: Tuple[int, int] = Field((22, 22), description="Number of grid columns and rows.")


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, max(upper - 1, 0)))


def cell_center(grid: Grid, col: int, row: int, cell_size: Point, origin: Point) -> Point:
    """Pixel centre of cell ``(col, row)``."""
    w, h = cell_size
    ox, oy = origin
    if grid.type == GridType.HEX_VERTICAL:
        shift = w / 2.0 if row % 2 else 0.0
        return (ox + w / 2.0 + col * w + shift, oy + h / 2.0 + row * h * HEX_PITCH)
    if grid.type == GridType.HEX_HORIZONTAL:
        shift = h / 2.0 if col % 2 else 0.0
        return (ox + w / 2.0 + col * w * HEX_PITCH, oy + h / 2.0 + row * h + shift)
    return (ox + w / 2.0 + col * w, oy + h / 2.0 + row * h)


def _hex_candidates(grid: Grid, point: Point, cell_size: Point, origin: Point) -> Iterator[Tuple[int, int]]:
    w, h = cell_size
    cols, rows = grid.size
    if grid.type == GridType.HEX_VERTICAL:
        row_guess = round((point[1] - origin[1] - h / 2.0) / (h * HEX_PITCH))
        for row in range(row_guess - 1, row_guess + 2):
            shift = w / 2.0 if row % 2 else 0.0
            col_guess = round((point[0] - origin[0] - w / 2.0 - shift) / w)
            for col in range(col_guess - 1, col_guess + 2):
                yield _clamp(col, cols), _clamp(row, rows)
    else:
        col_guess = round((point[0] - origin[0] - w / 2.0) / (w * HEX_PITCH))
        for col in range(col_guess - 1, col_guess + 2):
            shift = h / 2.0 if col % 2 else 0.0
            row_guess = round((point[1] - origin[1] - h / 2.0 - shift) / h)
            for row in range(row_guess - 1, row_guess + 2):
                yield _clamp(col, cols), _clamp(row, rows)


def nearest_cell(grid: Grid, point: Point, cell_size: Point, origin: Point) -> Tuple[int, int]:
    """Column and row of the cell nearest to the pixel-space ``point``."""
    w, h = cell_size
    cols, rows = grid.size
    if grid.type == GridType.SQUARE:
        col = math.floor((point[0] - origin[0]) / w)
        row = math.floor((point[1] - origin[1]) / h)
        return _clamp(col, cols), _clamp(row, rows)
    best = None
    best_dist = float("inf")
    for col, row in _hex_candidates(grid, point, cell_size, origin):
        cx, cy = cell_center(grid, col, row, cell_size, origin)
        dist = math.hypot(point[0] - cx, point[1] - cy)
        if dist < best_dist:
            best = (col, row)
            best_dist = dist
    return best if best is not None else (0, 0)


def nearest_cell_box(grid: Grid, point: Point, cell_size: Point, origin: Point) -> BoundingBox:
    """Pixel bounding box of the cell nearest to ``point``."""
    col, row = nearest_cell(grid, point, cell_size, origin)
    cx, cy = cell_center(grid, col, row, cell_size, origin)
    half_w = cell_size[0] / 2.0
    half_h = cell_size[1] / 2.0
    return BoundingBox(min=(cx - half_w, cy - half_h), max=(cx + half_w, cy + half_h))


__all__ = [
    "GridType",
    "Grid",
    "cell_center",
    "nearest_cell",
    "nearest_cell_box",
]
