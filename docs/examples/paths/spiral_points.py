"""Spiral control points; build() returns raw points for the CLI to fit."""

from __future__ import annotations

import numpy as np


def build():
    angles = np.linspace(0.0, 4 * np.pi, 24)
    radii = np.linspace(10.0, 90.0, 24)
    x = 100 + radii * np.cos(angles)
    y = 100 + radii * np.sin(angles)
    return np.column_stack([x, y]).tolist()
