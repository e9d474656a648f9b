from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


def _require_vec2(value: Sequence[float], label: str) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=float).reshape(2)
    except Exception as exc:
        raise ValueError(f"{label} must be a 2D coordinate.") from exc
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{label} must be finite.")
    return arr


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @classmethod
    def of(cls, value: "Point | Sequence[float]", label: str = "point") -> "Point":
        """Coerce a Point, an object with x/y attributes, or an (x, y) pair."""

        if isinstance(value, Point):
            return value
        if hasattr(value, "x") and hasattr(value, "y"):
            value = (value.x, value.y)
        arr = _require_vec2(value, label)
        return cls(float(arr[0]), float(arr[1]))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)


def quadratic_bezier_length(start: Point, control: Point, end: Point) -> float:
    """Closed-form arc length of a quadratic Bezier segment.

    Integrates the speed sqrt(A t^2 + B t + C) over t in [0, 1]. Straight or
    zero-length segments make the closed form undefined (A == 0 or a log of a
    non-positive value); those return 0.
    """

    a = start.as_array() - 2 * control.as_array() + end.as_array()
    b = 2 * control.as_array() - 2 * start.as_array()
    A = 4 * float(np.dot(a, a))
    B = 4 * float(np.dot(a, b))
    C = float(np.dot(b, b))

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        sabc = 2 * np.sqrt(np.float64(A + B + C))
        a_2 = np.sqrt(np.float64(A))
        a_32 = 2 * A * a_2
        c_2 = 2 * np.sqrt(np.float64(C))
        ba = B / a_2
        length = (
            a_32 * sabc
            + a_2 * B * (sabc - c_2)
            + (4 * C * A - B * B) * np.log((2 * a_2 + ba + sabc) / (ba + c_2))
        ) / (4 * a_32)

    length = float(length)
    if not np.isfinite(length) or length < 0:
        return 0.0
    return length


@dataclass(frozen=True)
class Curve:
    """Quadratic Bezier segment with its arc length computed up front."""

    start: Point
    control: Point
    end: Point
    length: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", Point.of(self.start, "start"))
        object.__setattr__(self, "control", Point.of(self.control, "control"))
        object.__setattr__(self, "end", Point.of(self.end, "end"))
        object.__setattr__(self, "length", quadratic_bezier_length(self.start, self.control, self.end))

    def point_at(self, t: float) -> Point:
        return evaluate_quadratic_bezier(self, t)

    def sample(self, samples: int) -> np.ndarray:
        samples = max(int(samples), 2)
        t = np.linspace(0.0, 1.0, samples, endpoint=True).reshape(-1, 1)
        a = (1 - t) ** 2
        b = 2 * (1 - t) * t
        c = t**2
        return a * self.start.as_array() + b * self.control.as_array() + c * self.end.as_array()


def evaluate_quadratic_bezier(curve: Curve, t: float) -> Point:
    """Return the point at parameter t (0..1) along a quadratic curve."""

    u = 1.0 - t
    x = u * u * curve.start.x + 2 * u * t * curve.control.x + t * t * curve.end.x
    y = u * u * curve.start.y + 2 * u * t * curve.control.y + t * t * curve.end.y
    return Point(x, y)


__all__ = ["Curve", "Point", "evaluate_quadratic_bezier", "quadratic_bezier_length"]
