from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
import pyvista as pv

RGBA = Tuple[int, int, int, int]


def _normalize_color(color: Sequence[float] | str) -> Tuple[Tuple[float, float, float], float]:
    if isinstance(color, str):
        col = pv.Color(color)
        rgb = tuple(col.float_rgb)
        alpha = float(col.float_rgba[3])
        return rgb, alpha

    arr = np.asarray(color, dtype=float).flatten()
    if arr.size not in (3, 4):
        raise ValueError("Color must be RGB or RGBA.")
    if arr.max() > 1.0:
        arr = arr / 255.0
    rgb = tuple(float(c) for c in arr[:3])
    alpha = float(arr[3]) if arr.size == 4 else 1.0
    return rgb, alpha


def to_rgba8(color: Sequence[float] | str) -> RGBA:
    """Convert a colour name, hex string, or RGB(A) sequence to 8-bit RGBA for Pillow."""

    rgb, alpha = _normalize_color(color)
    r, g, b = (int(round(c * 255)) for c in rgb)
    return r, g, b, int(round(alpha * 255))
