from __future__ import annotations

import math
from pathlib import Path as FilePath
from typing import List, Protocol, Sequence

from PIL import Image, ImageDraw

from quadpath._color import to_rgba8
from quadpath.curves import Curve, Point
from quadpath.paths import Path


class DrawingContext(Protocol):
    """The subset of a canvas-style 2D context that paths are drawn with."""

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None: ...


def make_path(context: DrawingContext, path: Path) -> None:
    """Trace `path` onto `context` as one sub-path of quadratic curves."""

    context.begin_path()
    context.move_to(path.start.x, path.start.y)
    for curve in path.curves:
        context.quadratic_curve_to(curve.control.x, curve.control.y, curve.end.x, curve.end.y)


class ImageContext:
    """DrawingContext backed by a Pillow image.

    Curves are flattened into polylines as they are added; nothing reaches the
    image until stroke() is called.
    """

    def __init__(
        self,
        image: Image.Image,
        color: Sequence[float] | str = "black",
        width: int = 2,
        samples_per_curve: int = 32,
    ) -> None:
        if width < 1:
            raise ValueError("width must be >= 1.")
        self.image = image
        self.color = to_rgba8(color)
        self.width = int(width)
        self.samples_per_curve = samples_per_curve
        self._draw = ImageDraw.Draw(image)
        self._subpaths: List[List[tuple[float, float]]] = []
        self._offset = (0.0, 0.0)

    def translate(self, dx: float, dy: float) -> None:
        self._offset = (self._offset[0] + float(dx), self._offset[1] + float(dy))

    def _to_device(self, x: float, y: float) -> tuple[float, float]:
        return float(x) + self._offset[0], float(y) + self._offset[1]

    def begin_path(self) -> None:
        self._subpaths = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append([self._to_device(x, y)])

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        if not self._subpaths:
            # Canvas semantics: a curve with no current point starts at its control point.
            self.move_to(cpx, cpy)
        current = self._subpaths[-1]
        curve = Curve(current[-1], self._to_device(cpx, cpy), self._to_device(x, y))
        current.extend((float(px), float(py)) for px, py in curve.sample(self.samples_per_curve)[1:])

    def stroke(self) -> None:
        for points in self._subpaths:
            if len(points) < 2:
                continue
            self._draw.line(points, fill=self.color, width=self.width, joint="curve")


def _canvas_layout(
    path: Path,
    size: tuple[int, int] | None,
    margin: int,
) -> tuple[tuple[int, int], tuple[float, float]]:
    """Return the canvas size and the translation applied to path coordinates.

    An explicit size draws the path in its own coordinates. Without one the
    canvas is fitted to the path bounds plus `margin` on every side.
    """

    if size is not None:
        return (int(size[0]), int(size[1])), (0.0, 0.0)
    min_x, min_y, max_x, max_y = path.bounds()
    fitted = (
        max(int(math.ceil(max_x - min_x)) + 2 * margin, 1),
        max(int(math.ceil(max_y - min_y)) + 2 * margin, 1),
    )
    return fitted, (margin - min_x, margin - min_y)


def draw_marker(
    image: Image.Image,
    point: Point,
    radius: int = 4,
    color: Sequence[float] | str = "red",
    offset: tuple[float, float] = (0.0, 0.0),
) -> Image.Image:
    draw = ImageDraw.Draw(image)
    x, y = point.x + offset[0], point.y + offset[1]
    box = [x - radius, y - radius, x + radius, y + radius]
    draw.ellipse(box, fill=to_rgba8(color))
    return image


def _stroke_path(
    path: Path,
    size: tuple[int, int],
    offset: tuple[float, float],
    color: Sequence[float] | str,
    width: int,
    background: Sequence[float] | str,
    samples_per_curve: int,
) -> Image.Image:
    image = Image.new("RGBA", size, to_rgba8(background))
    context = ImageContext(image, color=color, width=width, samples_per_curve=samples_per_curve)
    context.translate(*offset)
    make_path(context, path)
    context.stroke()
    return image


def render_path(
    path: Path,
    size: tuple[int, int] | None = None,
    color: Sequence[float] | str = "black",
    width: int = 2,
    background: Sequence[float] | str = "white",
    margin: int = 10,
    marker: int | None = None,
    marker_color: Sequence[float] | str = "red",
    marker_radius: int = 4,
    samples_per_curve: int = 32,
) -> Image.Image:
    """Stroke `path` onto a new RGBA image, optionally marking a percentage along it.

    When `size` is omitted the path is shifted so its bounds sit `margin`
    pixels inside the canvas; with an explicit `size` coordinates are used
    as-is and anything outside the canvas is clipped.
    """

    canvas, offset = _canvas_layout(path, size, margin)
    image = _stroke_path(path, canvas, offset, color, width, background, samples_per_curve)
    if marker is not None:
        point = path.point_at_percentage(marker)
        if point is not None:
            draw_marker(image, point, radius=marker_radius, color=marker_color, offset=offset)
    return image


def render_frames(
    path: Path,
    step: int = 1,
    size: tuple[int, int] | None = None,
    color: Sequence[float] | str = "black",
    width: int = 2,
    background: Sequence[float] | str = "white",
    margin: int = 10,
    marker_color: Sequence[float] | str = "red",
    marker_radius: int = 4,
    samples_per_curve: int = 32,
) -> list[Image.Image]:
    """Render one frame per `step` percent with the marker moving from 0 to 100."""

    if step < 1 or step > 100:
        raise ValueError("step must be between 1 and 100.")
    canvas, offset = _canvas_layout(path, size, margin)
    base = _stroke_path(path, canvas, offset, color, width, background, samples_per_curve)
    percents = list(range(0, 101, step))
    if percents[-1] != 100:
        percents.append(100)
    frames = []
    for percent in percents:
        frame = base.copy()
        point = path.point_at_percentage(percent)
        if point is not None:
            draw_marker(frame, point, radius=marker_radius, color=marker_color, offset=offset)
        frames.append(frame)
    return frames


def save_animation(frames: Sequence[Image.Image], target: FilePath, fps: int = 25) -> FilePath:
    if not frames:
        raise ValueError("save_animation requires at least one frame.")
    if fps < 1:
        raise ValueError("fps must be >= 1.")
    target = FilePath(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    duration = int(round(1000 / fps))
    frames[0].save(
        target,
        format="GIF",
        save_all=True,
        append_images=list(frames[1:]),
        duration=duration,
        loop=0,
    )
    return target


__all__ = [
    "DrawingContext",
    "ImageContext",
    "draw_marker",
    "make_path",
    "render_frames",
    "render_path",
    "save_animation",
]
