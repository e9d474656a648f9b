"""Smooth path through a zig-zag of points."""

from __future__ import annotations

from quadpath import build_path


def build():
    points = [(20 + 40 * i, 40 if i % 2 else 140) for i in range(8)]
    return build_path(points)


if __name__ == "__main__":
    path = build()
    print("Curves:", len(path.curves))
    print("Halfway:", path.point_at_percentage(50))
