import pytest

from mapfog.layer import editable_shapes, guide_boxes, render_shapes

from conftest import rect

SHAPES = [
    rect("a", 0.0, 0.0, 0.5, 0.5),
    rect("b", 0.25, 0.25, 0.75, 0.75),
    rect("hidden", 0.8, 0.8, 0.9, 0.9, visible=False),
]


def test_active_editing_shows_hidden_fog():
    assert [s.id for s in editable_shapes(SHAPES, active=True, preview=False)] == ["a", "b", "hidden"]


@pytest.mark.parametrize("active,preview", [(True, True), (False, False), (False, True)])
def test_other_modes_show_visible_fog(active, preview):
    assert [s.id for s in editable_shapes(SHAPES, active, preview)] == ["a", "b"]


def test_read_only_view_renders_merged_fog():
    rendered = render_shapes(SHAPES, editable=False)
    assert [s.id for s in rendered] == ["merged-0"]
    assert rendered[0].area == pytest.approx(0.4375)


def test_editable_view_keeps_individual_shapes():
    assert len(render_shapes(SHAPES, editable=True, active=True)) == 3


def test_preview_hides_hidden_boxes():
    assert len(guide_boxes(SHAPES)) == 3
    assert len(guide_boxes(SHAPES, preview=True)) == 2
