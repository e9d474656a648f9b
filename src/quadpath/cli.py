from __future__ import annotations

import importlib.util
import pathlib
import sys
import traceback
import warnings
from types import ModuleType
from typing import Callable, List

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from watchfiles import Change, watch

from quadpath._config import get_render_settings, get_unit_settings
from quadpath.geo import LatLng, distance as geo_distance
from quadpath.io.points import read_points
from quadpath.paths import Path, build_path
from quadpath.render import render_frames, render_path, save_animation

console = Console()
app = typer.Typer(help="Fit smooth quadratic paths through points and render them.")


class PathBuildError(RuntimeError):
    """Raised when an input file cannot provide a usable path."""


def _load_module(path: pathlib.Path) -> ModuleType:
    module_name = "quadpath_user_points"
    if module_name in sys.modules:
        del sys.modules[module_name]

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise typer.BadParameter(f"Unable to import points module at {path}")

    module = importlib.util.module_from_spec(spec)
    # Register module so features relying on sys.modules (e.g., dataclasses) work.
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def _format_exception(exc: BaseException) -> str:
    return "".join(traceback.format_exception(exc))


def _path_factory(source: pathlib.Path) -> Callable[[], Path]:
    def factory() -> Path:
        if source.suffix.lower() == ".py":
            module = _load_module(source)
            builder = getattr(module, "build", None)
            if builder is None or not callable(builder):
                raise PathBuildError(f"{source} must define a callable build() function.")
            try:
                result = builder()
            except Exception as exc:
                raise PathBuildError(f"{source} build() failed: {exc}") from exc
            if isinstance(result, Path):
                return result
            return build_path(result)
        return build_path(read_points(source))

    return factory


def _build_or_fail(source: pathlib.Path) -> Path:
    if not source.exists():
        raise typer.BadParameter(f"Points file {source} does not exist.")
    try:
        return _path_factory(source)()
    except (PathBuildError, ValueError, OSError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _next_available_path(path: pathlib.Path) -> pathlib.Path:
    """Return a non-conflicting path by appending ' (n)' before the suffix."""

    if not path.exists():
        return path

    parent = path.parent
    stem = path.stem
    suffix = path.suffix
    n = 1
    while True:
        candidate = parent / f"{stem} ({n}){suffix}"
        if not candidate.exists():
            return candidate
        n += 1


def _resolve_output(output: pathlib.Path, overwrite: bool) -> pathlib.Path:
    if output.exists() and not overwrite:
        final_output = _next_available_path(output)
        console.print(f"[yellow]Output {output} exists; writing to {final_output} instead.[/yellow]")
        return final_output
    return output


def _parse_size(size: str | None) -> tuple[int, int] | None:
    if size is None:
        return None
    try:
        width, height = (int(part) for part in size.lower().split("x"))
    except ValueError as exc:
        raise typer.BadParameter(f"Size must look like WIDTHxHEIGHT, got {size!r}.") from exc
    if width <= 0 or height <= 0:
        raise typer.BadParameter("Size must be positive.")
    return width, height


def _clamp_marker(marker: int | None) -> int | None:
    if marker is None:
        return None
    if 0 <= marker <= 100:
        return marker
    clamped = min(max(marker, 0), 100)
    warnings.warn(f"Marker percentage {marker} clamped to {clamped}.", RuntimeWarning)
    return clamped


def _render_once(
    source: pathlib.Path,
    output: pathlib.Path,
    size: tuple[int, int] | None,
    color: str,
    width: int,
    marker: int | None,
) -> None:
    path = _path_factory(source)()
    image = render_path(path, size=size, color=color, width=width, marker=marker)
    output.parent.mkdir(parents=True, exist_ok=True)
    image.save(output)
    console.print(
        f"[green]Rendered {len(path.curves)} curves ({path.length:.2f} units) to {output}[/green]"
    )


def _watch_and_render(source: pathlib.Path, render: Callable[[], None]) -> None:
    resolved = source.resolve()
    watch_root = resolved.parent
    for changes in watch(str(watch_root), debounce=300):
        for change, changed_path in changes:
            if Change.deleted == change and pathlib.Path(changed_path) == resolved:
                console.print(f"[yellow]{source} was deleted; waiting for it to return…[/yellow]")
                break
            if pathlib.Path(changed_path).resolve() == resolved:
                console.print(f"[yellow]Reloading {source}…[/yellow]")
                try:
                    render()
                except Exception as exc:
                    console.print(Panel.fit(_format_exception(exc), title="Render failed", style="red"))
                break


@app.command()
def render(
    points: pathlib.Path = typer.Argument(..., help="JSON points file or Python module with build()."),
    output: pathlib.Path = typer.Option(pathlib.Path("path.png"), "--output", "-o", help="Image to write."),
    size: str | None = typer.Option(None, "--size", help="Canvas size as WIDTHxHEIGHT; fits the path if omitted."),
    color: str | None = typer.Option(None, "--color", help="Stroke colour (name, hex, or configured default)."),
    width: int | None = typer.Option(None, "--width", min=1, help="Stroke width in pixels."),
    marker: int | None = typer.Option(None, "--marker", help="Draw a marker at this percentage along the path."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Allow replacing an existing image."),
    watch_file: bool = typer.Option(False, "--watch", help="Re-render whenever the points file changes."),
) -> None:
    """
    Build a smooth path through the given points and stroke it to an image.
    """

    settings = get_render_settings()
    stroke_color = color or settings.stroke_color
    stroke_width = width or settings.stroke_width
    canvas = _parse_size(size)
    marker_percent = _clamp_marker(marker)

    _build_or_fail(points)
    final_output = _resolve_output(output, overwrite)

    def do_render() -> None:
        _render_once(points, final_output, canvas, stroke_color, stroke_width, marker_percent)

    try:
        do_render()
    except (PathBuildError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    if watch_file:
        console.print("[cyan]Watching for changes; save to re-render, Ctrl+C to stop.[/cyan]")
        try:
            _watch_and_render(points, do_render)
        except KeyboardInterrupt:
            console.print("[cyan]Stopped watching.[/cyan]")


@app.command()
def animate(
    points: pathlib.Path = typer.Argument(..., help="JSON points file or Python module with build()."),
    output: pathlib.Path = typer.Option(pathlib.Path("path.gif"), "--output", "-o", help="GIF to write."),
    step: int = typer.Option(2, "--step", min=1, max=100, help="Percent advanced per frame."),
    fps: int = typer.Option(25, "--fps", min=1, max=100, help="Frames per second."),
    size: str | None = typer.Option(None, "--size", help="Canvas size as WIDTHxHEIGHT."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Allow replacing an existing GIF."),
) -> None:
    """
    Write an animated GIF of a marker travelling along the path.
    """

    settings = get_render_settings()
    path = _build_or_fail(points)
    final_output = _resolve_output(output, overwrite)
    frames = render_frames(
        path,
        step=step,
        size=_parse_size(size),
        color=settings.stroke_color,
        width=settings.stroke_width,
    )
    save_animation(frames, final_output, fps=fps)
    console.print(
        Panel(
            f"Wrote {len(frames)} frames to [green]{final_output}[/green].",
            title="Animation complete",
            border_style="green",
        )
    )


@app.command()
def sample(
    points: pathlib.Path = typer.Argument(..., help="JSON points file or Python module with build()."),
    percent: List[int] = typer.Option([0, 25, 50, 75, 100], "--percent", "-p", help="Percentages to report."),
) -> None:
    """
    Print the points found at whole percentages along the path.
    """

    for value in percent:
        if value < 0 or value > 100:
            raise typer.BadParameter(f"Percent {value} is outside 0..100.")

    path = _build_or_fail(points)
    console.rule("Path")
    console.print(f"Curves: {len(path.curves)}  Length: {path.length:.4f}")
    console.print(f"Segment percentages: {list(path.segment_percentages)}")

    table = Table(title="Points along path")
    table.add_column("percent", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    for value in percent:
        point = path.point_at_percentage(value)
        if point is None:
            table.add_row(str(value), "-", "-")
        else:
            table.add_row(str(value), f"{point.x:.4f}", f"{point.y:.4f}")
    console.print(table)


@app.command()
def distance(
    lat1: float = typer.Argument(..., help="Latitude of the first coordinate, degrees."),
    lng1: float = typer.Argument(..., help="Longitude of the first coordinate, degrees."),
    lat2: float = typer.Argument(..., help="Latitude of the second coordinate, degrees."),
    lng2: float = typer.Argument(..., help="Longitude of the second coordinate, degrees."),
) -> None:
    """
    Approximate the distance between two nearby coordinates.
    """

    units = get_unit_settings()
    meters = geo_distance(LatLng(lat1, lng1), LatLng(lat2, lng2))
    console.print(f"{meters * units.scale_from_m:.3f} {units.label}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
