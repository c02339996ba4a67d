"""Discrete input events delivered by the host to a drawing session.

Positions are host canvas pixels; the session converts them to normalized map
space with the current :class:`~mapfog.settings.MapView`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .shapes import Shape
from .vector2 import Point


class EventType(str, Enum):
    DRAG_START = "drag_start"
    DRAG = "drag"
    DRAG_END = "drag_end"
    POINTER_DOWN = "pointer_down"
    POINTER_MOVE = "pointer_move"
    POINTER_UP = "pointer_up"
    CLICK = "click"
    TOUCH_END = "touch_end"
    KEY_DOWN = "key_down"
    # Pointer events the renderer reports against a specific fog shape.
    SHAPE_POINTER_DOWN = "shape_pointer_down"
    SHAPE_POINTER_MOVE = "shape_pointer_move"
    SHAPE_POINTER_UP = "shape_pointer_up"
    # Click on the polygon accept/cancel tick.
    POLYGON_ACCEPT = "polygon_accept"


class Key(str, Enum):
    ENTER = "Enter"
    ESCAPE = "Escape"
    BACKSPACE = "Backspace"
    DELETE = "Delete"


@dataclass(frozen=True)
class InputEvent:
    type: EventType
    position: Optional[Point] = None
    key: Optional[Key] = None
    shape: Optional[Shape] = None


def drag_start(position: Point) -> InputEvent:
    return InputEvent(EventType.DRAG_START, position=position)


def drag(position: Point) -> InputEvent:
    return InputEvent(EventType.DRAG, position=position)


def drag_end(position: Optional[Point] = None) -> InputEvent:
    return InputEvent(EventType.DRAG_END, position=position)


def pointer_down(position: Point) -> InputEvent:
    return InputEvent(EventType.POINTER_DOWN, position=position)


def pointer_move(position: Point) -> InputEvent:
    return InputEvent(EventType.POINTER_MOVE, position=position)


def pointer_up(position: Optional[Point] = None) -> InputEvent:
    return InputEvent(EventType.POINTER_UP, position=position)


def click(position: Point) -> InputEvent:
    return InputEvent(EventType.CLICK, position=position)


def touch_end() -> InputEvent:
    return InputEvent(EventType.TOUCH_END)


def key_down(key: Key | str) -> InputEvent:
    return InputEvent(EventType.KEY_DOWN, key=Key(key))


def shape_pointer_down(shape: Shape) -> InputEvent:
    return InputEvent(EventType.SHAPE_POINTER_DOWN, shape=shape)


def shape_pointer_move(shape: Shape) -> InputEvent:
    return InputEvent(EventType.SHAPE_POINTER_MOVE, shape=shape)


def shape_pointer_up(shape: Optional[Shape] = None) -> InputEvent:
    return InputEvent(EventType.SHAPE_POINTER_UP, shape=shape)


def polygon_accept() -> InputEvent:
    return InputEvent(EventType.POLYGON_ACCEPT)


__all__ = [
    "EventType",
    "Key",
    "InputEvent",
    "drag_start",
    "drag",
    "drag_end",
    "pointer_down",
    "pointer_move",
    "pointer_up",
    "click",
    "touch_end",
    "key_down",
    "shape_pointer_down",
    "shape_pointer_move",
    "shape_pointer_up",
    "polygon_accept",
]
