from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from quadpath.curves import Point


class ValidationError(ValueError):
    """Raised when validation constraints are violated."""


def validate_path_points(points: Iterable[Point | Sequence[float]]) -> list[Point]:
    """Coerce builder input into Points, rejecting anything a path cannot pass through."""

    try:
        pts = [Point.of(p) for p in points]
    except TypeError as exc:
        raise ValidationError(f"Path points must be an iterable of 2D coordinates: {exc}") from exc
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    if len(pts) < 3:
        raise ValidationError("A path requires at least three points.")
    arr = np.array([p.as_array() for p in pts])
    if np.allclose(arr, arr[0]):
        raise ValidationError("Path points must not all coincide.")
    return pts


def validate_percentage(percent: object) -> int:
    if isinstance(percent, bool) or not isinstance(percent, (int, np.integer)):
        raise ValueError("percent must be an integer between 0 and 100.")
    value = int(percent)
    if value < 0 or value > 100:
        raise ValueError("percent must be an integer between 0 and 100.")
    return value
