from __future__ import annotations

import json
import warnings
from pathlib import Path

import pytest
from PIL import Image
from rich.console import Console
from typer.testing import CliRunner
from watchfiles import Change

from quadpath import _config, cli
from quadpath.cli import _clamp_marker, _next_available_path, _path_factory, _watch_and_render, app

runner = CliRunner()

EXAMPLES = [
    "docs/examples/paths/wave_example.py",
    "docs/examples/paths/spiral_points.py",
    "docs/examples/paths/square.json",
]


@pytest.mark.parametrize("relative", EXAMPLES)
def test_examples_build(project_root: Path, relative: str):
    path = _path_factory(project_root / relative)()
    assert len(path.curves) >= 1
    assert sum(path.segment_percentages) >= 100


def test_render_writes_png(tmp_path: Path, points_file: Path):
    output = tmp_path / "out.png"
    result = runner.invoke(app, ["render", str(points_file), "-o", str(output), "--size", "40x40"])
    assert result.exit_code == 0, result.output
    with Image.open(output) as image:
        assert image.size == (40, 40)


def test_render_does_not_overwrite(tmp_path: Path, points_file: Path):
    output = tmp_path / "out.png"
    output.write_bytes(b"existing")
    result = runner.invoke(app, ["render", str(points_file), "-o", str(output)])
    assert result.exit_code == 0, result.output
    assert output.read_bytes() == b"existing"
    assert (tmp_path / "out (1).png").exists()


def test_render_rejects_too_few_points(tmp_path: Path):
    source = tmp_path / "short.json"
    source.write_text(json.dumps([[0, 0], [1, 1]]))
    result = runner.invoke(app, ["render", str(source), "-o", str(tmp_path / "short.png")])
    assert result.exit_code != 0
    assert not (tmp_path / "short.png").exists()


def test_render_missing_file(tmp_path: Path):
    result = runner.invoke(app, ["render", str(tmp_path / "missing.json")])
    assert result.exit_code != 0


def test_render_bad_size(points_file: Path, tmp_path: Path):
    result = runner.invoke(app, ["render", str(points_file), "-o", str(tmp_path / "x.png"), "--size", "big"])
    assert result.exit_code != 0


def test_module_without_build(tmp_path: Path):
    source = tmp_path / "nothing.py"
    source.write_text("VALUE = 1\n")
    result = runner.invoke(app, ["sample", str(source)])
    assert result.exit_code != 0


def test_sample_reports_percentages(tmp_path: Path):
    source = tmp_path / "arch.json"
    source.write_text(json.dumps([[0, 0], [5, 8], [10, 0]]))
    result = runner.invoke(app, ["sample", str(source), "-p", "0", "-p", "100"])
    assert result.exit_code == 0, result.output
    assert "Segment percentages: [100]" in result.output
    assert "10.0000" in result.output


def test_sample_rejects_out_of_range(points_file: Path):
    result = runner.invoke(app, ["sample", str(points_file), "-p", "150"])
    assert result.exit_code != 0


def test_animate_writes_gif(tmp_path: Path, points_file: Path):
    output = tmp_path / "anim.gif"
    result = runner.invoke(app, ["animate", str(points_file), "-o", str(output), "--step", "50"])
    assert result.exit_code == 0, result.output
    with Image.open(output) as gif:
        assert gif.n_frames == 3


def test_distance_in_meters():
    result = runner.invoke(app, ["distance", "0", "0", "1", "0"])
    assert result.exit_code == 0, result.output
    assert "111194.927 m" in result.output


def test_distance_uses_configured_units(isolated_config: Path):
    isolated_config.mkdir(parents=True)
    (isolated_config / _config.CONFIG_FILENAME).write_text(json.dumps({"units": "kilometers"}))
    result = runner.invoke(app, ["distance", "0", "0", "1", "0"])
    assert result.exit_code == 0, result.output
    assert "111.195 km" in result.output


def test_next_available_path(tmp_path: Path):
    target = tmp_path / "path.png"
    assert _next_available_path(target) == target
    target.write_bytes(b"")
    (tmp_path / "path (1).png").write_bytes(b"")
    assert _next_available_path(target) == tmp_path / "path (2).png"


def test_clamp_marker_warns():
    assert _clamp_marker(None) is None
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert _clamp_marker(40) == 40
    with pytest.warns(RuntimeWarning):
        assert _clamp_marker(140) == 100


def test_module_build_returning_none(tmp_path: Path):
    source = tmp_path / "returns_none.py"
    source.write_text("def build():\n    return None\n")
    result = runner.invoke(app, ["sample", str(source)])
    assert result.exit_code == 2
    assert "Traceback" not in result.output


def test_module_build_raising(tmp_path: Path):
    source = tmp_path / "failing_build.py"
    source.write_text("def build():\n    raise RuntimeError('boom')\n")
    result = runner.invoke(app, ["render", str(source), "-o", str(tmp_path / "failing_build.png")])
    assert result.exit_code == 2
    assert not (tmp_path / "failing_build.png").exists()


def _fake_watch(source: Path):
    def fake(*args, **kwargs):
        return iter([{(Change.modified, str(source.resolve()))}])

    return fake


def test_watch_rerenders_on_change(monkeypatch, points_file: Path):
    monkeypatch.setattr(cli, "watch", _fake_watch(points_file))
    calls = []
    _watch_and_render(points_file, lambda: calls.append(1))
    assert calls == [1]


def test_watch_ignores_other_files(monkeypatch, tmp_path: Path, points_file: Path):
    monkeypatch.setattr(cli, "watch", _fake_watch(tmp_path / "other.json"))
    calls = []
    _watch_and_render(points_file, lambda: calls.append(1))
    assert calls == []


def test_watch_reports_render_failure(monkeypatch, points_file: Path):
    recorder = Console(record=True, width=120)
    monkeypatch.setattr(cli, "console", recorder)
    monkeypatch.setattr(cli, "watch", _fake_watch(points_file))

    def failing() -> None:
        raise ValueError("bad points")

    _watch_and_render(points_file, failing)
    output = recorder.export_text()
    assert "Render failed" in output
    assert "bad points" in output
