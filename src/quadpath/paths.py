from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np
import pyvista as pv

from quadpath.curves import Curve, Point, evaluate_quadratic_bezier
from quadpath.validation import validate_path_points, validate_percentage

PERCENT_STEPS = 101


def _segment_percentages(curves: Sequence[Curve]) -> tuple[int, ...]:
    total = sum(curve.length for curve in curves)
    if total <= 0:
        # Every segment is degenerate; fall back to an even split.
        share = math.ceil(100 / len(curves)) if curves else 0
        return tuple(share for _ in curves)
    return tuple(math.ceil((curve.length / total) * 100) for curve in curves)


@dataclass(frozen=True)
class Path:
    """A start point and a chain of quadratic curves, traversable by percentage.

    Each curve's share of the total length is rounded up to a whole percent,
    and the points at every integer percentage are computed once on
    construction so repeated lookups are constant time.
    """

    start: Point
    curves: tuple[Curve, ...] = ()
    segment_percentages: tuple[int, ...] = field(init=False)
    precomputed_points: tuple[Point | None, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", Point.of(self.start, "start"))
        object.__setattr__(self, "curves", tuple(self.curves))
        object.__setattr__(self, "segment_percentages", _segment_percentages(self.curves))
        object.__setattr__(
            self,
            "precomputed_points",
            tuple(self.compute_point_at_percentage(percent) for percent in range(PERCENT_STEPS)),
        )

    @property
    def end(self) -> Point:
        if not self.curves:
            return self.start
        return self.curves[-1].end

    @property
    def length(self) -> float:
        return float(sum(curve.length for curve in self.curves))

    def point_at_percentage(self, percent: int) -> Point | None:
        return self.precomputed_points[validate_percentage(percent)]

    def compute_point_at_percentage(self, percent: float) -> Point | None:
        """Locate the point `percent` of the way along the path, or None past the end."""

        if percent < 0:
            return None
        running = 0
        for curve, share in zip(self.curves, self.segment_percentages):
            running += share
            if percent <= running:
                if share == 0:
                    return curve.start
                local = (percent - (running - share)) / share
                return evaluate_quadratic_bezier(curve, local)
        return None

    def sample(self, samples_per_curve: int = 32) -> np.ndarray:
        if not self.curves:
            return self.start.as_array().reshape(1, 2)
        points = []
        for idx, curve in enumerate(self.curves):
            seg_points = curve.sample(samples_per_curve)
            if idx > 0:
                seg_points = seg_points[1:]
            points.append(seg_points)
        return np.vstack(points)

    def bounds(self, samples_per_curve: int = 32) -> tuple[float, float, float, float]:
        pts = self.sample(samples_per_curve)
        mins = pts.min(axis=0)
        maxs = pts.max(axis=0)
        return float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1])

    def to_polydata(self, samples_per_curve: int = 32) -> pv.PolyData:
        pts = self.sample(samples_per_curve)
        pts3 = np.column_stack([pts, np.zeros(pts.shape[0])])
        n_pts = len(pts3)
        lines = np.hstack(([n_pts], np.arange(n_pts)))
        return pv.PolyData(pts3, lines=lines)


def control_point(start: Point, end: Point) -> Point:
    """Midpoint of two points, used as the joint between consecutive curves."""

    return Point((start.x + end.x) / 2, (start.y + end.y) / 2)


def build_path(points: Iterable[Point | Sequence[float]]) -> Path:
    """Return a smooth Path through `points`.

    Interior points act as Bezier control points; consecutive curves meet at
    the midpoints between them. The final curve ends exactly on the last point.
    """

    pts = validate_path_points(points)
    start = pts[0]
    curves: list[Curve] = []
    cursor = start
    for i in range(1, len(pts) - 2):
        joint = control_point(pts[i], pts[i + 1])
        curves.append(Curve(cursor, pts[i], joint))
        cursor = joint
    curves.append(Curve(cursor, pts[-2], pts[-1]))
    return Path(start, curves)


__all__ = ["PERCENT_STEPS", "Path", "build_path", "control_point"]
