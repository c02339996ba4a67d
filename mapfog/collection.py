"""Apply emitted fog deltas to a host-owned shape collection.

Each reducer returns a new mapping; the input collection is never mutated, so
a host swapping in the result never exposes a partially applied edit.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping

from .boolean2d import SLIVER_AREA, SubtractShapeAction
from .shapes import Shape, ShapeCollection, ShapePatch


def add_shapes(collection: Mapping[str, Shape], shapes: Iterable[Shape]) -> ShapeCollection:
    result = dict(collection)
    for shape in shapes:
        result[shape.id] = shape
    return result


def cut_shapes(
    collection: Mapping[str, Shape],
    cuts: Iterable[Shape],
    sliver_area: float = SLIVER_AREA,
    repair: bool = True,
) -> ShapeCollection:
    """Subtract the cut shapes from every shape in ``collection``."""
    cuts = list(cuts)
    if not cuts:
        return dict(collection)
    action = SubtractShapeAction(cuts, sliver_area=sliver_area, repair=repair)
    subtracted = action.execute(collection)
    return {shape_id: shape for shape_id, shape in subtracted.items() if len(shape.points) >= 3}


def remove_shapes(collection: Mapping[str, Shape], ids: Iterable[str]) -> ShapeCollection:
    doomed = set(ids)
    return {shape_id: shape for shape_id, shape in collection.items() if shape_id not in doomed}


def edit_shapes(collection: Mapping[str, Shape], patches: Iterable[ShapePatch]) -> ShapeCollection:
    result = dict(collection)
    for patch in patches:
        shape = result.get(patch.id)
        if shape is None:
            continue
        result[patch.id] = replace(shape, visible=patch.visible)
    return result


__all__ = ["add_shapes", "cut_shapes", "remove_shapes", "edit_shapes"]
