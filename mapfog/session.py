"""Interactive fog drawing session.

The host forwards discrete :class:`~mapfog.events.InputEvent` values to
:meth:`DrawingSession.dispatch`. The session keeps the single in-progress
drawing, the hover selection used by the toggle and remove tools, and the
current snapping guides. Finished edits leave through the
:class:`SessionCallbacks`; the host owns the shape collection and feeds it
back with :meth:`DrawingSession.set_shapes`.

States::

    IDLE --drag start (brush)------> BRUSHING ----drag end--> commit -> IDLE
    IDLE --drag start (rectangle)--> RECTANGLE_DRAGGING --drag end--> commit -> IDLE
    IDLE --click (polygon)---------> POLYGON_BUILDING --Enter--> commit -> IDLE
                                                      --Escape--> IDLE

Every other (state, event) pair is ignored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .boolean2d import GeometryError, merge_shapes, shape_to_polygon, subtract_shapes
from .events import EventType, InputEvent, Key
from .guides import Guide, find_guides, guides_from_grid, snap_to_guides
from .layer import guide_boxes
from .settings import EngineConfig, GridSettings, MapView, ToolSettings, ToolType
from .shapes import (
    CUT_COLOR,
    FOG_COLOR,
    BoundingBox,
    FogColor,
    Shape,
    ShapePatch,
    new_shape_id,
)
from .simplify import simplify_points, simplify_scale
from .vector2 import Point, compare, multiply, normalize, scale, subtract

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    BRUSHING = "brushing"
    RECTANGLE_DRAGGING = "rectangle_dragging"
    POLYGON_BUILDING = "polygon_building"


@dataclass(frozen=True)
class DrawingShape:
    """The shape being drawn plus what the session needs to keep drawing it.

    For polygons ``vertices`` holds the confirmed clicks and ``preview`` the
    live pointer position; ``shape.points`` is the vertices followed by one
    placeholder point (the preview, or the last vertex when there is none).
    """

    shape: Shape
    tool: ToolType
    cut: bool = False
    anchor: Optional[Point] = None
    vertices: Tuple[Point, ...] = ()
    preview: Optional[Point] = None

    @property
    def points(self) -> Tuple[Point, ...]:
        return self.shape.points


@dataclass(frozen=True)
class PolygonTick:
    """Accept/cancel marker drawn on a polygon's first vertex."""

    position: Point
    cross: bool


@dataclass
class SessionCallbacks:
    on_shapes_add: Callable[[List[Shape]], None]
    on_shapes_cut: Callable[[List[Shape]], None]
    on_shapes_remove: Callable[[List[str]], None]
    on_shapes_edit: Callable[[List[ShapePatch]], None]


@dataclass(frozen=True)
class SessionData:
    state: SessionState = SessionState.IDLE
    drawing: Optional[DrawingShape] = None
    brush_down: bool = False
    hovered: Tuple[Shape, ...] = ()
    guides: Tuple[Guide, ...] = ()


def _polygon_points(vertices: Sequence[Point], preview: Optional[Point]) -> List[Point]:
    return list(vertices) + [preview if preview is not None else vertices[-1]]


def _color_for(cut: bool) -> FogColor:
    return CUT_COLOR if cut else FOG_COLOR


class DrawingSession:
    """State machine driving fog brush, rectangle, polygon, toggle and remove tools."""

    def __init__(
        self,
        callbacks: SessionCallbacks,
        view: Optional[MapView] = None,
        grid: Optional[GridSettings] = None,
        tool: Optional[ToolSettings] = None,
        config: Optional[EngineConfig] = None,
        shapes: Iterable[Shape] = (),
    ):
        self.callbacks = callbacks
        self.view = view or MapView()
        self.grid = grid or GridSettings()
        self.tool = tool or ToolSettings()
        self.config = config or EngineConfig()
        self._shapes: List[Shape] = list(shapes)
        self._boxes: List[BoundingBox] = guide_boxes(self._shapes, preview=self.tool.preview)
        self._data = SessionData()
        self._handlers: Dict[EventType, Callable[[SessionData, InputEvent], SessionData]] = {
            EventType.DRAG_START: self._on_drag_start,
            EventType.DRAG: self._on_drag,
            EventType.DRAG_END: self._on_drag_end,
            EventType.POINTER_DOWN: self._on_pointer_move,
            EventType.POINTER_MOVE: self._on_pointer_move,
            EventType.POINTER_UP: self._on_pointer_up,
            EventType.CLICK: self._on_click,
            EventType.TOUCH_END: self._on_touch_end,
            EventType.KEY_DOWN: self._on_key_down,
            EventType.SHAPE_POINTER_DOWN: self._on_shape_pointer_down,
            EventType.SHAPE_POINTER_MOVE: self._on_shape_pointer_move,
            EventType.SHAPE_POINTER_UP: self._on_pointer_up,
            EventType.POLYGON_ACCEPT: self._on_polygon_accept,
        }

    # ---- Read-only view -----------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._data.state

    @property
    def data(self) -> SessionData:
        return self._data

    @property
    def drawing_shape(self) -> Optional[DrawingShape]:
        return self._data.drawing

    @property
    def guides(self) -> List[Guide]:
        return list(self._data.guides)

    @property
    def hovered(self) -> List[Shape]:
        return list(self._data.hovered)

    @property
    def bounding_boxes(self) -> List[BoundingBox]:
        return list(self._boxes)

    @property
    def shapes(self) -> List[Shape]:
        return list(self._shapes)

    @property
    def is_hovering(self) -> bool:
        return self.tool.hovers

    @property
    def polygon_tick(self) -> Optional[PolygonTick]:
        drawing = self._data.drawing
        if drawing is None or drawing.tool != "polygon" or not drawing.vertices:
            return None
        return PolygonTick(position=drawing.vertices[0], cross=len(drawing.points) < 4)

    # ---- Host updates -------------------------------------------------------

    def set_shapes(self, shapes: Iterable[Shape]) -> None:
        self._shapes = list(shapes)
        self._boxes = guide_boxes(self._shapes, preview=self.tool.preview)

    def set_view(self, view: MapView) -> None:
        self.view = view

    def set_grid(self, grid: GridSettings) -> None:
        self.grid = grid

    def set_config(self, config: EngineConfig) -> None:
        self.config = config

    def set_tool(self, tool: ToolSettings) -> None:
        previous = self.tool
        self.tool = tool
        if tool.type != previous.type:
            self._data = SessionData()
        elif tool.use_fog_cut != previous.use_fog_cut and self._data.drawing is not None:
            drawing = self._data.drawing
            recoloured = replace(
                drawing,
                cut=tool.use_fog_cut,
                shape=replace(drawing.shape, color=_color_for(tool.use_fog_cut)),
            )
            self._data = replace(self._data, drawing=recoloured)
        if tool.preview != previous.preview:
            self._boxes = guide_boxes(self._shapes, preview=tool.preview)

    def cancel(self) -> None:
        """Discard the in-progress shape."""
        self._data = replace(self._data, state=SessionState.IDLE, drawing=None)

    # ---- Transition function ------------------------------------------------

    def dispatch(self, event: InputEvent) -> SessionState:
        handler = self._handlers.get(event.type)
        if handler is None:
            return self._data.state
        try:
            self._data = handler(self._data, event)
        except Exception:
            self._data = SessionData()
            raise
        return self._data.state

    # ---- Positions and guides -----------------------------------------------

    def _map_position(self, position: Point) -> Point:
        relative = scale(subtract(position, self.view.stage_offset), 1.0 / self.view.stage_scale)
        return normalize(relative, self.view.size)

    def _brush_position(self, data: SessionData, position: Point) -> Point:
        point = self._map_position(position)
        if self.tool.uses_guides:
            point = snap_to_guides(point, data.guides)
        return point

    def _find_guides(self, point: Point) -> Tuple[Guide, ...]:
        sensitivity = self.config.grid_snapping_sensitivity
        grid_guides: List[Guide] = []
        if self.grid.snap_to_grid:
            grid_guides = guides_from_grid(
                multiply(point, self.view.size),
                self.grid.grid,
                self.grid.cell_pixel_size,
                self.grid.offset,
                self.grid.pixel_offset,
                sensitivity,
                self.view.size,
            )
        return tuple(find_guides(point, self._boxes, self.grid.cell_size, sensitivity, grid_guides))

    def _with_guides(self, data: SessionData, position: Point) -> SessionData:
        return replace(data, guides=self._find_guides(self._map_position(position)))

    def _new_shape(self, points: Sequence[Point]) -> Shape:
        return Shape(
            id=new_shape_id(),
            points=points,
            stroke_width=self.config.stroke_width,
            color=_color_for(self.tool.use_fog_cut),
            visible=True,
        )

    # ---- Handlers -----------------------------------------------------------

    def _on_drag_start(self, data: SessionData, event: InputEvent) -> SessionData:
        data = replace(data, brush_down=True)
        if event.position is None:
            return data
        if self.tool.type == "brush":
            point = self._brush_position(data, event.position)
            drawing = DrawingShape(shape=self._new_shape([point]), tool="brush", cut=self.tool.use_fog_cut)
            return replace(data, state=SessionState.BRUSHING, drawing=drawing)
        if self.tool.type == "rectangle":
            point = self._brush_position(data, event.position)
            drawing = DrawingShape(
                shape=self._new_shape([point] * 4),
                tool="rectangle",
                cut=self.tool.use_fog_cut,
                anchor=point,
            )
            return replace(data, state=SessionState.RECTANGLE_DRAGGING, drawing=drawing)
        return data

    def _on_drag(self, data: SessionData, event: InputEvent) -> SessionData:
        drawing = data.drawing
        if not data.brush_down or drawing is None or event.position is None:
            return data
        if data.state == SessionState.BRUSHING:
            point = self._brush_position(data, event.position)
            if compare(drawing.points[-1], point, self.config.brush_epsilon):
                return data
            shape = drawing.shape.with_points(drawing.points + (point,))
            return replace(data, drawing=replace(drawing, shape=shape))
        if data.state == SessionState.RECTANGLE_DRAGGING:
            data = self._with_guides(data, event.position)
            point = self._brush_position(data, event.position)
            ax, ay = drawing.anchor
            corners = [(ax, ay), (point[0], ay), point, (ax, point[1])]
            return replace(data, drawing=replace(drawing, shape=drawing.shape.with_points(corners)))
        return data

    def _on_drag_end(self, data: SessionData, event: InputEvent) -> SessionData:
        drawing = data.drawing
        if data.state in (SessionState.BRUSHING, SessionState.RECTANGLE_DRAGGING) and drawing is not None:
            data = replace(data, state=SessionState.IDLE, drawing=None)
            self._commit(drawing, drawing.points, simplify=True)
        data = self._erase_hovered(data)
        return replace(data, brush_down=False)

    def _on_pointer_move(self, data: SessionData, event: InputEvent) -> SessionData:
        if event.position is None:
            return data
        if self.tool.uses_guides:
            data = self._with_guides(data, event.position)
        drawing = data.drawing
        if data.state == SessionState.POLYGON_BUILDING and drawing is not None:
            preview = self._brush_position(data, event.position)
            shape = drawing.shape.with_points(_polygon_points(drawing.vertices, preview))
            data = replace(data, drawing=replace(drawing, shape=shape, preview=preview))
        return data

    def _on_pointer_up(self, data: SessionData, event: InputEvent) -> SessionData:
        return self._erase_hovered(data)

    def _on_click(self, data: SessionData, event: InputEvent) -> SessionData:
        if self.tool.type != "polygon" or event.position is None:
            return data
        point = self._brush_position(data, event.position)
        drawing = data.drawing
        if data.state != SessionState.POLYGON_BUILDING or drawing is None:
            drawing = DrawingShape(
                shape=self._new_shape([point, point]),
                tool="polygon",
                cut=self.tool.use_fog_cut,
                vertices=(point,),
            )
            return replace(data, state=SessionState.POLYGON_BUILDING, drawing=drawing)
        vertices = drawing.vertices + (point,)
        shape = drawing.shape.with_points(_polygon_points(vertices, None))
        return replace(data, drawing=replace(drawing, shape=shape, vertices=vertices, preview=None))

    def _on_touch_end(self, data: SessionData, event: InputEvent) -> SessionData:
        return replace(data, guides=())

    def _on_key_down(self, data: SessionData, event: InputEvent) -> SessionData:
        drawing = data.drawing
        if drawing is None:
            return data
        if event.key == Key.ESCAPE:
            return replace(data, state=SessionState.IDLE, drawing=None)
        if data.state != SessionState.POLYGON_BUILDING:
            return data
        if event.key == Key.ENTER:
            return self._finish_polygon(data)
        if event.key in (Key.BACKSPACE, Key.DELETE):
            if len(drawing.points) <= 3:
                return replace(data, state=SessionState.IDLE, drawing=None)
            vertices = drawing.vertices[:-1]
            shape = drawing.shape.with_points(_polygon_points(vertices, drawing.preview))
            return replace(data, drawing=replace(drawing, shape=shape, vertices=vertices))
        return data

    def _on_polygon_accept(self, data: SessionData, event: InputEvent) -> SessionData:
        tick = self.polygon_tick
        if data.state != SessionState.POLYGON_BUILDING or tick is None:
            return data
        if tick.cross:
            return replace(data, state=SessionState.IDLE, drawing=None)
        return self._finish_polygon(data)

    def _on_shape_pointer_down(self, data: SessionData, event: InputEvent) -> SessionData:
        return self._hover(data, event.shape)

    def _on_shape_pointer_move(self, data: SessionData, event: InputEvent) -> SessionData:
        if not data.brush_down:
            return data
        return self._hover(data, event.shape)

    # ---- Effects ------------------------------------------------------------

    def _hover(self, data: SessionData, shape: Optional[Shape]) -> SessionData:
        if shape is None or not self.tool.hovers:
            return data
        if any(hovered.id == shape.id for hovered in data.hovered):
            return data
        return replace(data, hovered=data.hovered + (shape,))

    def _erase_hovered(self, data: SessionData) -> SessionData:
        hovered = data.hovered
        if not hovered:
            return data
        data = replace(data, hovered=())
        if self.tool.type == "remove":
            self.callbacks.on_shapes_remove([shape.id for shape in hovered])
        elif self.tool.type == "toggle":
            self.callbacks.on_shapes_edit([ShapePatch(id=shape.id, visible=not shape.visible) for shape in hovered])
        return data

    def _finish_polygon(self, data: SessionData) -> SessionData:
        drawing = data.drawing
        data = replace(data, state=SessionState.IDLE, drawing=None)
        if drawing is not None and len(drawing.vertices) >= 3:
            self._commit(drawing, drawing.vertices, simplify=False)
        return data

    def _is_degenerate(self, shape: Shape) -> bool:
        if len(shape.points) < 3:
            return True
        try:
            geom = shape_to_polygon(shape, repair=self.config.repair_invalid)
        except GeometryError as exc:
            logger.warning(f"Keeping unchecked {shape.type} shape {shape.id}: {exc}")
            return False
        return geom.area <= self.config.sliver_area

    def _commit(self, drawing: DrawingShape, points: Sequence[Point], simplify: bool) -> None:
        cut = self.tool.use_fog_cut
        cfg = self.config
        if simplify:
            points = simplify_points(
                points,
                self.grid.cell_size,
                simplify_scale(self.view.stage_scale, cfg.simplify_downscale),
                cfg.simplify_size,
            )
        shape = drawing.shape.with_points(points, ())
        results = [shape]
        if not self.tool.multilayer:
            opposing = [s for s in self._shapes if (not s.visible if cut else s.visible)]
            region = merge_shapes(
                opposing,
                treat_hidden_as_visible=cut,
                sliver_area=cfg.sliver_area,
                repair=cfg.repair_invalid,
            )
            subtracted = subtract_shapes(
                region, {shape.id: shape}, sliver_area=cfg.sliver_area, repair=cfg.repair_invalid
            )
            results = [piece.with_id(new_shape_id()) for piece in subtracted.values()]
        results = [piece for piece in results if not self._is_degenerate(piece)]
        if not results:
            logger.debug(f"Discarded degenerate {drawing.tool} shape {drawing.shape.id}")
            return
        if cut:
            framed = [Shape(id=piece.id, points=piece.points, holes=piece.holes, type=piece.type) for piece in results]
            logger.debug(f"Cutting fog with {len(framed)} shape(s)")
            self.callbacks.on_shapes_cut(framed)
        else:
            framed = [replace(piece, color=FOG_COLOR) for piece in results]
            logger.debug(f"Adding {len(framed)} fog shape(s)")
            self.callbacks.on_shapes_add(framed)


__all__ = [
    "SessionState",
    "DrawingShape",
    "PolygonTick",
    "SessionCallbacks",
    "SessionData",
    "DrawingSession",
]
