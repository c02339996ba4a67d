import json

import pytest
from pydantic import ValidationError

from mapfog.grid import Grid, GridType
from mapfog.settings import EngineConfig, GridSettings, MapView, ToolSettings


def test_defaults():
    cfg = EngineConfig()
    assert cfg.grid_snapping_sensitivity == 0.1
    assert cfg.brush_epsilon == 0.001
    assert cfg.repair_invalid
    assert GridSettings().grid.type == GridType.SQUARE


@pytest.mark.parametrize(
    "tool,hovers,guides",
    [
        ("brush", False, False),
        ("rectangle", False, True),
        ("polygon", False, True),
        ("toggle", True, False),
        ("remove", True, False),
    ],
)
def test_tool_capabilities(tool, hovers, guides):
    settings = ToolSettings(type=tool)
    assert settings.hovers is hovers
    assert settings.uses_guides is guides


def test_unknown_tool_rejected():
    with pytest.raises(ValidationError):
        ToolSettings(type="lasso")


def test_cell_sizes_must_be_positive():
    with pytest.raises(ValidationError):
        GridSettings(cell_size=(0.0, 0.1))
    with pytest.raises(ValidationError):
        GridSettings(cell_pixel_size=(50.0, -1.0))


def test_view_rejects_zero_scale():
    with pytest.raises(ValidationError):
        MapView(stage_scale=0.0)
    assert MapView(width=800, height=600).size == (800.0, 600.0)


def test_grid_accepts_host_type_names():
    assert Grid(type="hexVertical").type == GridType.HEX_VERTICAL


def test_config_from_file(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"sliver_area": 1e-6, "repair_invalid": False}), encoding="utf-8")
    cfg = EngineConfig.from_file(path)
    assert cfg.sliver_area == 1e-6
    assert not cfg.repair_invalid
    assert cfg.simplify_downscale == 2.0


def test_config_file_must_be_object(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        EngineConfig.from_file(path)
