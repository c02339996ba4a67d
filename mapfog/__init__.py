"""
mapfog: fog of war geometry for 2D battle maps.

Fog is a set of polygon shapes (with holes) in normalized map space. This
package merges and subtracts fog, simplifies hand drawn strokes, proposes
snapping guides and runs the interactive drawing session that ties them
together. Rendering and storage belong to the host application.

Usage:

    from mapfog import DrawingSession, SessionCallbacks, ToolSettings, events

    session = DrawingSession(
        SessionCallbacks(on_add, on_cut, on_remove, on_edit),
        tool=ToolSettings(type="rectangle"),
        shapes=current_fog,
    )
    session.dispatch(events.drag_start((120, 80)))
    session.dispatch(events.drag((480, 300)))
    session.dispatch(events.drag_end())
"""
from __future__ import annotations

from . import events
from .boolean2d import (
    SLIVER_AREA,
    GeometryError,
    SubtractShapeAction,
    merge_shapes,
    subtract_shapes,
    union_area,
)
from .collection import add_shapes, cut_shapes, edit_shapes, remove_shapes
from .grid import Grid, GridType
from .guides import (
    Guide,
    Orientation,
    guides_from_bounding_boxes,
    guides_from_grid,
    select_best_guides,
    snap_to_guides,
)
from .layer import render_shapes
from .session import DrawingSession, DrawingShape, SessionCallbacks, SessionState
from .settings import EngineConfig, GridSettings, MapView, ToolSettings
from .shapes import BoundingBox, FogColor, Shape, ShapePatch, bounding_boxes_of, new_shape_id
from .simplify import simplify_points, simplify_scale

__all__ = [
    "events",
    "SLIVER_AREA",
    "GeometryError",
    "SubtractShapeAction",
    "merge_shapes",
    "subtract_shapes",
    "union_area",
    "add_shapes",
    "cut_shapes",
    "edit_shapes",
    "remove_shapes",
    "Grid",
    "GridType",
    "Guide",
    "Orientation",
    "guides_from_bounding_boxes",
    "guides_from_grid",
    "select_best_guides",
    "snap_to_guides",
    "render_shapes",
    "DrawingSession",
    "DrawingShape",
    "SessionCallbacks",
    "SessionState",
    "EngineConfig",
    "GridSettings",
    "MapView",
    "ToolSettings",
    "BoundingBox",
    "FogColor",
    "Shape",
    "ShapePatch",
    "bounding_boxes_of",
    "new_shape_id",
    "simplify_points",
    "simplify_scale",
]

__version__ = "0.1.0"
