"""Fog shape value types, (de)serialization and bounding boxes.

Shapes live in normalized map space: every coordinate is in [0, 1] relative to
the map's pixel width and height. A shape is an outer ring plus any number of
holes. Rings are stored open (the first vertex is not repeated at the end).

Public API:
- FogColor, Shape, ShapePatch, ShapeCollection, BoundingBox
- new_shape_id()
- polygon_area(points)
- bounding_box_of(points), bounding_boxes_of(shapes)
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .vector2 import Point

Ring = Tuple[Point, ...]


class FogColor(str, Enum):
    """Symbolic colour tags. The renderer owns the mapping to real colours."""

    BLACK = "black"
    RED = "red"
    BLUE = "blue"
    ORANGE = "orange"
    YELLOW = "yellow"
    PURPLE = "purple"
    GREEN = "green"
    PINK = "pink"
    TEAL = "teal"
    WHITE = "white"
    DARK_GRAY = "darkGray"
    LIGHT_GRAY = "lightGray"


FOG_COLOR = FogColor.BLACK
CUT_COLOR = FogColor.RED


def new_shape_id() -> str:
    return uuid.uuid4().hex[:12]


def _ring(points: Iterable[Sequence[float]]) -> Ring:
    return tuple((float(p[0]), float(p[1])) for p in points)


def polygon_area(points: Sequence[Point]) -> float:
    """Return the absolute area spanned by a closed polygon."""
    if len(points) < 3:
        return 0.0
    pts = np.asarray(points, dtype=float)
    x = pts[:, 0]
    y = pts[:, 1]
    return float(0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


@dataclass(frozen=True)
class Shape:
    id: str
    points: Ring = ()
    holes: Tuple[Ring, ...] = ()
    stroke_width: float = 0.5
    color: FogColor = FOG_COLOR
    visible: bool = True
    type: str = "fog"

    def __post_init__(self):
        object.__setattr__(self, "points", _ring(self.points))
        object.__setattr__(self, "holes", tuple(_ring(h) for h in self.holes))
        object.__setattr__(self, "color", FogColor(self.color))

    @property
    def is_valid(self) -> bool:
        return len(self.points) >= 3

    @property
    def area(self) -> float:
        outer = polygon_area(self.points)
        return max(0.0, outer - sum(polygon_area(h) for h in self.holes))

    def with_points(self, points: Iterable[Point], holes: Optional[Iterable[Iterable[Point]]] = None) -> "Shape":
        return replace(self, points=points, holes=self.holes if holes is None else tuple(holes))

    def with_id(self, shape_id: str) -> "Shape":
        return replace(self, id=shape_id)

    def asdict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "data": {
                "points": [{"x": x, "y": y} for (x, y) in self.points],
                "holes": [[{"x": x, "y": y} for (x, y) in hole] for hole in self.holes],
            },
            "strokeWidth": float(self.stroke_width),
            "color": self.color.value,
            "visible": bool(self.visible),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Shape":
        if "id" not in data:
            raise ValueError("Shape data requires an 'id'")
        payload = data.get("data", {})
        points = [(float(p["x"]), float(p["y"])) for p in payload.get("points", [])]
        holes = [[(float(p["x"]), float(p["y"])) for p in hole] for hole in payload.get("holes", [])]
        return cls(
            id=str(data["id"]),
            points=points,
            holes=holes,
            stroke_width=float(data.get("strokeWidth", 0.5)),
            color=FogColor(data.get("color", FOG_COLOR.value)),
            visible=bool(data.get("visible", True)),
            type=str(data.get("type", "fog")),
        )


@dataclass(frozen=True)
class ShapePatch:
    """Visibility edit emitted by the toggle tool."""

    id: str
    visible: bool

    def asdict(self) -> Dict[str, Any]:
        return {"id": self.id, "visible": self.visible}


ShapeCollection = Dict[str, Shape]


def shapes_to_json(shapes: Iterable[Shape]) -> List[Dict[str, Any]]:
    return [shape.asdict() for shape in shapes]


def shapes_from_json(items: Iterable[Mapping[str, Any]]) -> List[Shape]:
    return [Shape.from_dict(item) for item in items]


# ---- Bounding boxes --------------------------------------------------------

@dataclass(frozen=True)
class BoundingBox:
    min: Point = field(default_factory=lambda: (0.0, 0.0))
    max: Point = field(default_factory=lambda: (0.0, 0.0))


def bounding_box_of(points: Sequence[Point]) -> BoundingBox:
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        raise ValueError("Cannot compute the bounding box of an empty point list")
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    return BoundingBox(min=(float(lo[0]), float(lo[1])), max=(float(hi[0]), float(hi[1])))


def bounding_boxes_of(shapes: Iterable[Shape]) -> List[BoundingBox]:
    """Axis-aligned boxes of each shape's outer ring. Holes are ignored."""
    return [bounding_box_of(shape.points) for shape in shapes if shape.points]


__all__ = [
    "FogColor",
    "FOG_COLOR",
    "CUT_COLOR",
    "Shape",
    "ShapePatch",
    "ShapeCollection",
    "BoundingBox",
    "new_shape_id",
    "polygon_area",
    "shapes_to_json",
    "shapes_from_json",
    "bounding_box_of",
    "bounding_boxes_of",
]
