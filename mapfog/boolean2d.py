"""Polygon boolean helpers for fog shapes (union / difference with holes).

Fog shapes are converted to shapely polygons, combined, and exploded back
into shapes. Pieces whose area is below ``SLIVER_AREA`` (normalized map units
squared, about a hundredth of a pixel squared on a 10k pixel map) are dropped
rather than kept as zero-width artifacts.

A shape the engine cannot process raises :class:`GeometryError`. Merge and
subtract catch it per shape, log it and carry that shape through unchanged so
sibling shapes are still processed.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Sequence

import numpy as np
import shapely
from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import unary_union
from shapely.validation import explain_validity

from .shapes import Shape, ShapeCollection

logger = logging.getLogger(__name__)

SLIVER_AREA = 1e-9

_EMPTY = GeometryCollection()


class GeometryError(ValueError):
    """Raised when a shape cannot go through the boolean engine."""


def _explode_polygons(geom: BaseGeometry) -> List[Polygon]:
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, (MultiPolygon, GeometryCollection)):
        polys: List[Polygon] = []
        for part in geom.geoms:
            polys.extend(_explode_polygons(part))
        return polys
    # Points and lines carry no area.
    return []


def _finite(points: Sequence) -> bool:
    return bool(np.all(np.isfinite(np.asarray(points, dtype=float))))


def shape_to_polygon(shape: Shape, repair: bool = True) -> BaseGeometry:
    """Return the polygonal area covered by ``shape``.

    Shapes with fewer than three points or no area give an empty geometry.
    Invalid rings (self intersections, bad holes) are repaired with
    ``make_valid`` unless ``repair`` is off, in which case they raise.
    """
    if len(shape.points) < 3:
        return _EMPTY
    if not _finite(shape.points) or not all(_finite(h) for h in shape.holes if h):
        raise GeometryError(f"shape {shape.id} has non-finite coordinates")
    holes = [hole for hole in shape.holes if len(hole) >= 3]
    try:
        poly = Polygon(shape.points, holes)
        valid = poly.is_valid
    except (GEOSException, ValueError) as exc:
        raise GeometryError(f"shape {shape.id} could not be built: {exc}") from exc
    if valid:
        geom: BaseGeometry = poly
    elif repair:
        try:
            geom = unary_union(_explode_polygons(shapely.make_valid(poly)))
        except GEOSException as exc:
            raise GeometryError(f"shape {shape.id} could not be repaired: {exc}") from exc
    else:
        raise GeometryError(f"shape {shape.id} is invalid: {explain_validity(poly)}")
    if geom.is_empty or geom.area <= 0.0:
        return _EMPTY
    return geom


def polygons_to_shapes(geom: BaseGeometry, template: Shape, sliver_area: float = SLIVER_AREA) -> List[Shape]:
    """Explode ``geom`` into shapes styled like ``template``.

    Exteriors are oriented counter-clockwise and holes clockwise. The returned
    shapes all carry ``template.id``; callers assign final ids.
    """
    shapes: List[Shape] = []
    for poly in _explode_polygons(geom):
        if poly.area <= sliver_area:
            continue
        poly = orient(poly, sign=1.0)
        points = list(poly.exterior.coords)[:-1]
        holes = [list(ring.coords)[:-1] for ring in poly.interiors]
        shapes.append(template.with_points(points, holes))
    return shapes


def _union_of(shapes: Iterable[Shape], repair: bool, context: str) -> BaseGeometry:
    geoms: List[BaseGeometry] = []
    for shape in shapes:
        try:
            geom = shape_to_polygon(shape, repair=repair)
        except GeometryError as exc:
            logger.warning(f"Skipping shape {shape.id} in {context}: {exc}")
            continue
        if not geom.is_empty:
            geoms.append(geom)
    if not geoms:
        return _EMPTY
    try:
        return unary_union(geoms)
    except GEOSException as exc:
        logger.error(f"Unable to union shapes for {context}: {exc}")
        return _EMPTY


def union_area(shapes: Iterable[Shape], repair: bool = True) -> float:
    """Area covered by the union of ``shapes``."""
    return float(_union_of(shapes, repair, "area").area)


def merge_shapes(
    shapes: Sequence[Shape],
    treat_hidden_as_visible: bool = False,
    sliver_area: float = SLIVER_AREA,
    repair: bool = True,
) -> List[Shape]:
    """Union overlapping fog into a minimal set of shapes with holes.

    Hidden shapes are left out unless ``treat_hidden_as_visible`` is set.
    Merged shapes take the style of the first included shape and the ids
    ``merged-0``, ``merged-1``, ... Shapes that fail to convert are returned
    unchanged after the merged ones.
    """
    included = [shape for shape in shapes if treat_hidden_as_visible or shape.visible]
    if not included:
        return []
    geoms: List[BaseGeometry] = []
    passthrough: List[Shape] = []
    for shape in included:
        try:
            geom = shape_to_polygon(shape, repair=repair)
        except GeometryError as exc:
            logger.error(f"Unable to merge shape {shape.id}: {exc}")
            passthrough.append(shape)
            continue
        if not geom.is_empty:
            geoms.append(geom)
    if not geoms:
        return passthrough
    try:
        union = unary_union(geoms)
    except GEOSException as exc:
        logger.error(f"Unable to merge shapes: {exc}")
        return list(included)
    pieces = polygons_to_shapes(union, included[0], sliver_area)
    merged = [piece.with_id(f"merged-{i}") for i, piece in enumerate(pieces)]
    return merged + passthrough


def _difference(shape: Shape, region: BaseGeometry, sliver_area: float, repair: bool) -> List[Shape]:
    geom = shape_to_polygon(shape, repair=repair)
    if geom.is_empty:
        return []
    if not region.is_empty:
        try:
            geom = geom.difference(region)
        except GEOSException as exc:
            raise GeometryError(f"shape {shape.id} could not be subtracted: {exc}") from exc
    return polygons_to_shapes(geom, shape, sliver_area)


def _subtract(
    region: BaseGeometry,
    candidates: Mapping[str, Shape],
    sliver_area: float,
    repair: bool,
) -> ShapeCollection:
    result: ShapeCollection = {}
    for shape in candidates.values():
        try:
            pieces = _difference(shape, region, sliver_area, repair)
        except GeometryError as exc:
            logger.error(f"Unable to subtract shape {shape.id}: {exc}")
            result[shape.id] = shape
            continue
        for i, piece in enumerate(pieces):
            piece_id = f"{shape.id}-{i}" if len(pieces) > 1 else shape.id
            result[piece_id] = piece.with_id(piece_id)
    return result


def subtract_shapes(
    region: Iterable[Shape],
    candidates: Mapping[str, Shape],
    sliver_area: float = SLIVER_AREA,
    repair: bool = True,
) -> ShapeCollection:
    """Remove the area covered by ``region`` from every candidate.

    A candidate split into several pieces yields ``<id>-0``, ``<id>-1``, ...;
    a single piece keeps the candidate id; a fully covered candidate yields
    nothing. A candidate raising :class:`GeometryError` is kept unmodified.
    """
    return _subtract(_union_of(region, repair, "subtract region"), candidates, sliver_area, repair)


class SubtractShapeAction:
    """Subtract a fixed region from any number of candidate shape maps."""

    def __init__(self, region: Iterable[Shape], sliver_area: float = SLIVER_AREA, repair: bool = True):
        self.region = list(region)
        self.sliver_area = sliver_area
        self.repair = repair
        self._geometry = _union_of(self.region, repair, "subtract region")

    def execute(self, candidates: Mapping[str, Shape]) -> ShapeCollection:
        return _subtract(self._geometry, candidates, self.sliver_area, self.repair)


__all__ = [
    "SLIVER_AREA",
    "GeometryError",
    "shape_to_polygon",
    "polygons_to_shapes",
    "union_area",
    "merge_shapes",
    "subtract_shapes",
    "SubtractShapeAction",
]
