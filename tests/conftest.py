from __future__ import annotations

from typing import List

import pytest

from mapfog.session import SessionCallbacks
from mapfog.shapes import Shape, ShapePatch


def rect(shape_id: str, x0: float, y0: float, x1: float, y1: float, visible: bool = True, holes=()) -> Shape:
    return Shape(
        id=shape_id,
        points=[(x0, y0), (x1, y0), (x1, y1), (x0, y1)],
        holes=holes,
        visible=visible,
    )


class Recorder:
    """Collects every callback the drawing session emits."""

    def __init__(self):
        self.added: List[List[Shape]] = []
        self.cut: List[List[Shape]] = []
        self.removed: List[List[str]] = []
        self.edited: List[List[ShapePatch]] = []

    @property
    def calls(self) -> int:
        return len(self.added) + len(self.cut) + len(self.removed) + len(self.edited)

    def callbacks(self) -> SessionCallbacks:
        return SessionCallbacks(
            on_shapes_add=self.added.append,
            on_shapes_cut=self.cut.append,
            on_shapes_remove=self.removed.append,
            on_shapes_edit=self.edited.append,
        )


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
