from __future__ import annotations

import json
from pathlib import Path

from quadpath import _config


def test_defaults_written_on_first_use(isolated_config: Path):
    settings = _config.get_unit_settings()
    assert settings.name == "meters"
    assert settings.label == "m"
    assert settings.scale_from_m == 1.0
    written = json.loads((isolated_config / _config.CONFIG_FILENAME).read_text())
    assert written["units"] == "meters"


def test_unit_aliases(isolated_config: Path):
    isolated_config.mkdir(parents=True)
    (isolated_config / _config.CONFIG_FILENAME).write_text(json.dumps({"units": " KM "}))
    settings = _config.get_unit_settings()
    assert settings.name == "kilometers"
    assert settings.scale_from_m == 0.001


def test_unknown_units_fall_back(isolated_config: Path):
    isolated_config.mkdir(parents=True)
    (isolated_config / _config.CONFIG_FILENAME).write_text(json.dumps({"units": "furlongs"}))
    assert _config.get_unit_settings().name == "meters"


def test_corrupt_config_falls_back(isolated_config: Path):
    isolated_config.mkdir(parents=True)
    (isolated_config / _config.CONFIG_FILENAME).write_text("{not json")
    assert _config.get_unit_settings().name == "meters"
    render = _config.get_render_settings()
    assert render.stroke_color == "black"
    assert render.stroke_width == 2


def test_render_settings(isolated_config: Path):
    isolated_config.mkdir(parents=True)
    (isolated_config / _config.CONFIG_FILENAME).write_text(
        json.dumps({"stroke_color": "#ff7a18", "stroke_width": "0"})
    )
    render = _config.get_render_settings()
    assert render.stroke_color == "#ff7a18"
    assert render.stroke_width == 2
