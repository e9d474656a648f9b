from __future__ import annotations

import os
from pathlib import Path

import pytest

from quadpath.curves import Point
from quadpath.io.points import write_points

PROJECT_ROOT = Path(__file__).resolve().parents[1]

SQUARE_POINTS = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


def pytest_configure():
    os.environ.setdefault("PYVISTA_OFF_SCREEN", "true")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    config_dir = tmp_path / "config"
    monkeypatch.setenv("QUADPATH_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def square_points() -> list[tuple[float, float]]:
    return list(SQUARE_POINTS)


@pytest.fixture
def points_file(tmp_path: Path, square_points) -> Path:
    path = tmp_path / "points.json"
    write_points([Point.of(p) for p in square_points], path)
    return path
