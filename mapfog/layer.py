"""Select which fog shapes a view paints and which ones feed the guide index."""
from __future__ import annotations

from typing import Iterable, List

from .boolean2d import merge_shapes
from .shapes import BoundingBox, Shape, bounding_boxes_of


def editable_shapes(shapes: Iterable[Shape], active: bool, preview: bool) -> List[Shape]:
    """Shapes shown while editing: everything when actively editing, else visible fog only."""
    return [shape for shape in shapes if (active and not preview) or shape.visible]


def render_shapes(shapes: Iterable[Shape], editable: bool, active: bool = False, preview: bool = False) -> List[Shape]:
    """Paint set for a fog layer.

    Editable views keep individual shapes so they can be hovered and toggled.
    Other views get the visible fog merged into the fewest shapes possible.
    """
    if editable:
        return editable_shapes(shapes, active, preview)
    return merge_shapes(list(shapes))


def guide_boxes(shapes: Iterable[Shape], active: bool = True, preview: bool = False) -> List[BoundingBox]:
    return bounding_boxes_of(editable_shapes(shapes, active, preview))


__all__ = ["editable_shapes", "render_shapes", "guide_boxes"]
