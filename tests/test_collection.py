import pytest

from mapfog.collection import add_shapes, cut_shapes, edit_shapes, remove_shapes
from mapfog.shapes import ShapePatch

from conftest import rect


@pytest.fixture
def collection():
    return {
        "a": rect("a", 0.0, 0.0, 0.5, 0.5),
        "b": rect("b", 0.5, 0.5, 1.0, 1.0, visible=False),
    }


def test_add_inserts_by_id(collection):
    result = add_shapes(collection, [rect("c", 0.2, 0.2, 0.3, 0.3)])
    assert sorted(result) == ["a", "b", "c"]
    assert sorted(collection) == ["a", "b"]


def test_cut_trims_every_shape(collection):
    result = cut_shapes(collection, [rect("cut", 0.25, 0.25, 0.75, 0.75)])
    assert sorted(result) == ["a", "b"]
    assert result["a"].area == pytest.approx(0.1875)
    assert result["b"].area == pytest.approx(0.1875)
    assert not result["b"].visible
    assert collection["a"].area == pytest.approx(0.25)


def test_cut_removes_covered_shapes(collection):
    result = cut_shapes(collection, [rect("cut", 0.0, 0.0, 0.5, 0.5)])
    assert list(result) == ["b"]


def test_cut_with_nothing_is_a_copy(collection):
    result = cut_shapes(collection, [])
    assert result == collection
    assert result is not collection


def test_remove_ignores_unknown_ids(collection):
    assert list(remove_shapes(collection, ["a", "zzz"])) == ["b"]


def test_edit_sets_visibility(collection):
    result = edit_shapes(collection, [ShapePatch(id="a", visible=False), ShapePatch(id="zzz", visible=True)])
    assert not result["a"].visible
    assert result["a"].points == collection["a"].points
    assert collection["a"].visible
    assert "zzz" not in result
