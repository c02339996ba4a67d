"""2D vector helpers shared by the fog geometry routines."""
from __future__ import annotations

from typing import Tuple

Point = Tuple[float, float]


def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def subtract(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


def multiply(a: Point, b: Point) -> Point:
    return (a[0] * b[0], a[1] * b[1])


def divide(a: Point, b: Point) -> Point:
    return (a[0] / b[0], a[1] / b[1])


def scale(a: Point, s: float) -> Point:
    return (a[0] * s, a[1] * s)


def compare(a: Point, b: Point, epsilon: float) -> bool:
    """Return True when both components of ``a`` and ``b`` differ by at most ``epsilon``."""
    return abs(a[0] - b[0]) <= epsilon and abs(a[1] - b[1]) <= epsilon


def normalize(point: Point, size: Point) -> Point:
    """Map a pixel-space point into [0, 1] map space."""
    return (float(point[0]) / float(size[0]), float(point[1]) / float(size[1]))


def min_component(a: Point) -> float:
    return min(a[0], a[1])


__all__ = [
    "Point",
    "add",
    "subtract",
    "multiply",
    "divide",
    "scale",
    "compare",
    "normalize",
    "min_component",
]
