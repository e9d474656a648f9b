from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from quadpath.curves import Point


def _coerce_point(item: Any, index: int) -> Point:
    if isinstance(item, dict):
        try:
            item = (item["x"], item["y"])
        except KeyError as exc:
            raise ValueError(f"Point {index} is missing key {exc.args[0]!r}.") from exc
    return Point.of(item, label=f"point {index}")


def parse_points(data: Any) -> list[Point]:
    """Accept a list of [x, y] pairs or {"x", "y"} objects, optionally under "points"."""

    if isinstance(data, dict):
        if "points" not in data:
            raise ValueError("Expected a list of points or an object with a 'points' key.")
        data = data["points"]
    if not isinstance(data, list):
        raise ValueError("Expected a list of points.")
    return [_coerce_point(item, idx) for idx, item in enumerate(data)]


def read_points(path: Path) -> list[Point]:
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    return parse_points(data)


def write_points(points: list[Point], path: Path) -> None:
    path = Path(path)
    payload = {"points": [[p.x, p.y] for p in points]}
    path.write_text(json.dumps(payload, indent=2) + "\n")
