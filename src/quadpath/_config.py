from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

CONFIG_ENV_VAR = "QUADPATH_CONFIG_DIR"
CONFIG_FILENAME = "quadpath.cfg"
DEFAULT_CONFIG = {
    "_comment": "Valid units: meters (default), kilometers, miles. Value is case-insensitive.",
    "units": "meters",
    "stroke_color": "black",
    "stroke_width": 2,
}
_UNIT_INFO: Dict[str, Dict[str, Any]] = {
    "meters": {"label": "m", "scale_from_m": 1.0},
    "kilometers": {"label": "km", "scale_from_m": 0.001},
    "miles": {"label": "mi", "scale_from_m": 1.0 / 1609.344},
}
_UNIT_ALIASES = {
    "meter": "meters",
    "meters": "meters",
    "metres": "meters",
    "m": "meters",
    "kilometer": "kilometers",
    "kilometers": "kilometers",
    "km": "kilometers",
    "mile": "miles",
    "miles": "miles",
    "mi": "miles",
}


@dataclass(frozen=True)
class UnitSettings:
    """Resolved distance units from quadpath.cfg."""

    name: str
    label: str
    scale_from_m: float


@dataclass(frozen=True)
class RenderSettings:
    stroke_color: str
    stroke_width: int


def config_dir() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".quadpath"


def config_file() -> Path:
    return config_dir() / CONFIG_FILENAME


def ensure_user_config() -> None:
    """Ensure the config file exists with sane defaults."""

    try:
        config_dir().mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    path = config_file()
    if path.exists():
        return

    try:
        path.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        return


def _load_user_config() -> Dict[str, Any]:
    ensure_user_config()
    try:
        loaded = json.loads(config_file().read_text())
    except (OSError, json.JSONDecodeError):
        return DEFAULT_CONFIG.copy()
    if not isinstance(loaded, dict):
        return DEFAULT_CONFIG.copy()
    return loaded


def _normalize_units(value: str) -> str | None:
    key = value.strip().lower()
    if key in _UNIT_INFO:
        return key
    return _UNIT_ALIASES.get(key)


def get_unit_settings() -> UnitSettings:
    """Return the configured distance units and the conversion from meters."""

    raw_config = _load_user_config()
    raw_units = str(raw_config.get("units", DEFAULT_CONFIG["units"]))
    normalized = _normalize_units(raw_units)
    if normalized is None:
        normalized = DEFAULT_CONFIG["units"]

    info = _UNIT_INFO[normalized]
    return UnitSettings(name=normalized, label=info["label"], scale_from_m=info["scale_from_m"])


def get_render_settings() -> RenderSettings:
    raw_config = _load_user_config()
    color = raw_config.get("stroke_color", DEFAULT_CONFIG["stroke_color"])
    try:
        width = int(raw_config.get("stroke_width", DEFAULT_CONFIG["stroke_width"]))
    except (TypeError, ValueError):
        width = DEFAULT_CONFIG["stroke_width"]
    if width < 1:
        width = DEFAULT_CONFIG["stroke_width"]
    return RenderSettings(stroke_color=str(color), stroke_width=width)
