"""quadpath – smooth quadratic Bezier paths through points."""

from __future__ import annotations

from .curves import Curve, Point, evaluate_quadratic_bezier, quadratic_bezier_length
from .geo import LatLng, distance
from .paths import Path, build_path, control_point
from .render import make_path, render_path
from .validation import ValidationError

__all__ = [
    "__version__",
    "Curve",
    "LatLng",
    "Path",
    "Point",
    "ValidationError",
    "build_path",
    "control_point",
    "distance",
    "evaluate_quadratic_bezier",
    "make_path",
    "quadratic_bezier_length",
    "render_path",
]

__version__ = "0.1.0"
