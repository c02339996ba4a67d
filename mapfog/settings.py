"""Pydantic models for the fog engine configuration and per-session tool settings."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Literal, Tuple

from pydantic import BaseModel, Field, field_validator

from .grid import Grid
from .simplify import SIMPLIFY_DOWNSCALE, SIMPLIFY_SIZE
from .boolean2d import SLIVER_AREA

ToolType = Literal["brush", "rectangle", "polygon", "toggle", "remove"]


class ToolSettings(BaseModel):
    type: ToolType = Field("brush", description="Active fog tool.")
    use_fog_cut: bool = Field(False, description="Cut (reveal) instead of adding fog.")
    multilayer: bool = Field(False, description="Skip subtracting existing fog from new shapes.")
    preview: bool = Field(False, description="Show only visible fog while editing.")

    @property
    def hovers(self) -> bool:
        return self.type in ("toggle", "remove")

    @property
    def uses_guides(self) -> bool:
        return self.type in ("rectangle", "polygon")


class GridSettings(BaseModel):
    grid: Grid = Field(default_factory=Grid, description="Grid layout and dimensions.")
    cell_size: Tuple[float, float] = Field(
        (1.0 / 22.0, 1.0 / 22.0), description="Normalized size of one grid cell (x, y)."
    )
    cell_pixel_size: Tuple[float, float] = Field((50.0, 50.0), description="Cell size in map pixels.")
    pixel_offset: Tuple[float, float] = Field(
        (0.0, 0.0), description="Offset of the first cell inside the grid, in map pixels."
    )
    offset: Tuple[float, float] = Field((0.0, 0.0), description="Grid inset from the map origin, in map pixels.")
    snap_to_grid: bool = Field(True, description="Offer grid cell edges as guides.")

    @field_validator("cell_size", "cell_pixel_size")
    @classmethod
    def _positive_size(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        if value[0] <= 0.0 or value[1] <= 0.0:
            raise ValueError("Cell sizes must be positive")
        return value


class MapView(BaseModel):
    width: float = Field(1000.0, gt=0.0, description="Map width in pixels.")
    height: float = Field(1000.0, gt=0.0, description="Map height in pixels.")
    stage_scale: float = Field(1.0, gt=0.0, description="Current view zoom.")
    stage_offset: Tuple[float, float] = Field(
        (0.0, 0.0), description="Canvas position of the map origin, in canvas pixels."
    )

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)


class EngineConfig(BaseModel):
    grid_snapping_sensitivity: float = Field(
        0.1, ge=0.0, description="Guide snapping distance in grid cells."
    )
    brush_epsilon: float = Field(
        0.001, ge=0.0, description="Brush samples closer than this to the last point are skipped."
    )
    simplify_size: float = Field(SIMPLIFY_SIZE, ge=0.0, description="Simplify tolerance as a fraction of a cell.")
    simplify_downscale: float = Field(
        SIMPLIFY_DOWNSCALE, gt=0.0, description="Divisor applied to the zoom when simplifying fog."
    )
    sliver_area: float = Field(SLIVER_AREA, ge=0.0, description="Boolean results at or below this area are dropped.")
    repair_invalid: bool = Field(True, description="Repair self-intersecting shapes before boolean operations.")
    stroke_width: float = Field(0.5, gt=0.0, description="Stroke weight of new fog shapes.")

    @classmethod
    def from_file(cls, path: str | Path) -> "EngineConfig":
        with Path(path).open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError("Engine config file must contain a JSON object.")
        return cls.model_validate(data)


__all__ = [
    "ToolType",
    "ToolSettings",
    "GridSettings",
    "MapView",
    "EngineConfig",
]
