import math

import pytest
from shapely.errors import GEOSException
from shapely.geometry import Polygon

from mapfog import boolean2d
from mapfog.boolean2d import (
    GeometryError,
    SubtractShapeAction,
    merge_shapes,
    polygons_to_shapes,
    shape_to_polygon,
    subtract_shapes,
    union_area,
)
from mapfog.shapes import FogColor, Shape

from conftest import rect

BOWTIE = [(0.0, 0.0), (1.0, 1.0), (1.0, 0.0), (0.0, 1.0)]


def _area(shapes):
    return sum(shape.area for shape in shapes)


def test_merge_overlapping_squares():
    a = rect("a", 0.0, 0.0, 0.5, 0.5)
    b = rect("b", 0.25, 0.25, 0.75, 0.75)
    merged = merge_shapes([a, b])
    assert [shape.id for shape in merged] == ["merged-0"]
    assert _area(merged) == pytest.approx(0.4375)


def test_merge_keeps_disjoint_pieces_apart():
    merged = merge_shapes([rect("a", 0.0, 0.0, 0.1, 0.1), rect("b", 0.5, 0.5, 0.6, 0.6)])
    assert sorted(shape.id for shape in merged) == ["merged-0", "merged-1"]


def test_merge_produces_holes():
    bars = [
        rect("bottom", 0.0, 0.0, 1.0, 0.25),
        rect("top", 0.0, 0.75, 1.0, 1.0),
        rect("left", 0.0, 0.25, 0.25, 0.75),
        rect("right", 0.75, 0.25, 1.0, 0.75),
    ]
    merged = merge_shapes(bars)
    assert len(merged) == 1
    assert len(merged[0].holes) == 1
    assert merged[0].area == pytest.approx(0.75)


def test_merge_skips_hidden_unless_asked():
    hidden = rect("h", 0.0, 0.0, 0.5, 0.5, visible=False)
    shown = rect("s", 0.5, 0.0, 1.0, 0.5)
    assert _area(merge_shapes([hidden, shown])) == pytest.approx(0.25)
    assert _area(merge_shapes([hidden, shown], treat_hidden_as_visible=True)) == pytest.approx(0.5)
    assert merge_shapes([hidden]) == []


def test_merge_copies_style_of_first_shape():
    first = Shape(id="a", points=[(0, 0), (1, 0), (1, 1)], color="blue", stroke_width=2.0)
    merged = merge_shapes([first, rect("b", 0.5, 0.0, 1.0, 0.5)])
    assert merged[0].color is FogColor.BLUE
    assert merged[0].stroke_width == 2.0


def test_merge_passes_bad_shape_through():
    bad = Shape(id="bad", points=[(0.0, 0.0), (math.nan, 0.0), (1.0, 1.0)])
    good = rect("good", 0.0, 0.0, 0.5, 0.5)
    merged = merge_shapes([good, bad])
    assert [shape.id for shape in merged] == ["merged-0", "bad"]
    assert merged[1] is bad


def test_subtract_splits_into_numbered_pieces():
    strip = rect("a", 0.0, 0.0, 1.0, 0.2)
    bar = rect("bar", 0.4, -1.0, 0.6, 1.0)
    result = subtract_shapes([bar], {"a": strip})
    assert sorted(result) == ["a-0", "a-1"]
    assert all(shape.id == key for key, shape in result.items())
    assert _area(result.values()) == pytest.approx(0.16)


def test_subtract_single_piece_keeps_id():
    result = subtract_shapes([rect("r", 0.5, 0.0, 2.0, 2.0)], {"a": rect("a", 0.0, 0.0, 1.0, 1.0)})
    assert list(result) == ["a"]
    assert result["a"].area == pytest.approx(0.5)


def test_subtract_area_law():
    candidate = rect("a", 0.0, 0.0, 1.0, 1.0)
    region = [rect("r1", 0.2, 0.2, 0.4, 0.4), rect("r2", 0.3, 0.3, 1.5, 0.5)]
    result = subtract_shapes(region, {"a": candidate})
    # r1 covers 0.04, the clipped r2 0.14 and they share 0.01.
    expected = candidate.area - 0.17
    assert _area(result.values()) == pytest.approx(expected)


def test_subtract_cuts_holes():
    result = subtract_shapes([rect("r", 0.4, 0.4, 0.6, 0.6)], {"a": rect("a", 0.0, 0.0, 1.0, 1.0)})
    assert len(result["a"].holes) == 1
    assert result["a"].area == pytest.approx(0.96)


def test_fully_covered_candidate_disappears():
    assert subtract_shapes([rect("r", -1.0, -1.0, 2.0, 2.0)], {"a": rect("a", 0.0, 0.0, 1.0, 1.0)}) == {}


def test_empty_region_leaves_candidates_alone():
    candidate = rect("a", 0.0, 0.0, 1.0, 1.0)
    result = subtract_shapes([], {"a": candidate})
    assert result["a"].area == pytest.approx(1.0)


def test_bad_candidate_is_isolated():
    bad = Shape(id="bad", points=[(0.0, 0.0), (math.inf, 0.0), (1.0, 1.0)])
    good = rect("good", 0.0, 0.0, 1.0, 1.0)
    result = subtract_shapes([rect("r", 0.5, 0.0, 2.0, 2.0)], {"bad": bad, "good": good})
    assert result["bad"] is bad
    assert result["good"].area == pytest.approx(0.5)


def test_sliver_is_dropped():
    result = subtract_shapes([rect("r", -1.0, -1.0, 2.0, 1.0 - 1e-10)], {"a": rect("a", 0.0, 0.0, 1.0, 1.0)})
    assert result == {}


def test_self_intersecting_without_repair_is_kept_unchanged():
    bowtie = Shape(id="b", points=BOWTIE)
    with pytest.raises(GeometryError):
        shape_to_polygon(bowtie, repair=False)
    assert subtract_shapes([], {"b": bowtie}, repair=False) == {"b": bowtie}


def test_self_intersecting_is_repaired():
    bowtie = Shape(id="b", points=BOWTIE)
    assert union_area([bowtie]) == pytest.approx(0.5)
    assert _area(subtract_shapes([], {"b": bowtie}).values()) == pytest.approx(0.5)


def test_degenerate_shapes_are_empty_not_errors():
    assert shape_to_polygon(Shape(id="two", points=[(0, 0), (1, 1)])).is_empty
    assert shape_to_polygon(Shape(id="line", points=[(0, 0), (0.5, 0.5), (1, 1)])).is_empty


def test_output_rings_are_counter_clockwise():
    clockwise = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)], [[(0.4, 0.4), (0.6, 0.4), (0.6, 0.6), (0.4, 0.6)]])
    (shape,) = polygons_to_shapes(clockwise, Shape(id="t"))
    assert Polygon(shape.points).exterior.is_ccw
    assert not Polygon(shape.holes[0]).exterior.is_ccw
    assert shape.points[0] != shape.points[-1]


def test_action_reuses_region():
    action = SubtractShapeAction([rect("r", 0.0, 0.0, 0.5, 1.0)])
    first = action.execute({"a": rect("a", 0.0, 0.0, 1.0, 1.0)})
    second = action.execute({"b": rect("b", 0.25, 0.0, 0.75, 1.0)})
    assert first["a"].area == pytest.approx(0.5)
    assert second["b"].area == pytest.approx(0.25)


def _failing_union(geoms):
    raise GEOSException("TopologyException: side location conflict")


def test_union_failure_leaves_region_empty(monkeypatch):
    monkeypatch.setattr(boolean2d, "unary_union", _failing_union)
    candidate = rect("a", 0.0, 0.0, 1.0, 1.0)
    assert union_area([candidate, rect("b", 0.5, 0.5, 2.0, 2.0)]) == 0.0
    result = subtract_shapes([rect("r1", 0.0, 0.0, 0.5, 1.0), rect("r2", 0.5, 0.0, 1.0, 0.5)], {"a": candidate})
    assert result["a"].area == pytest.approx(1.0)
