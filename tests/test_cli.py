"""Tests for the plot command line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from plot_writer.scripts import plot

SCENE = {
    "schema": "scene.v1",
    "nodes": [
        {
            "type": "group",
            "layer": "ink",
            "children": [
                {"type": "shape", "contours": [{"rect": [10, 10, 20, 20]}]},
            ],
        },
    ],
}


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch) -> None:
    # Keep the root logger untouched between tests.
    monkeypatch.setattr(plot, "setup_logging", lambda *args, **kwargs: [])


@pytest.fixture
def scene_path(tmp_path: Path) -> Path:
    path = tmp_path / "portrait.yaml"
    path.write_text(yaml.safe_dump(SCENE), encoding="utf-8")
    return path


def test_writes_file_set(scene_path: Path, tmp_path: Path, capsys) -> None:
    out = tmp_path / "plots"
    code = plot.main(["--scene", str(scene_path), "--output", str(out), "--seed", "3"])
    assert code == 0
    job_dir = out / "portrait"
    assert (job_dir / "layer_ink.txt").exists()
    assert (job_dir / "layer_default.txt").exists()
    assert (job_dir / "plot.svg").exists()
    assert str(job_dir / "layout.svg") in capsys.readouterr().out


def test_job_id(scene_path: Path, tmp_path: Path) -> None:
    out = tmp_path / "plots"
    assert plot.main(["-s", str(scene_path), "-o", str(out), "--id", "run1"]) == 0
    assert (out / "run1" / "layer_ink.txt").exists()


def test_dry_run_prints_programs(scene_path: Path, tmp_path: Path, capsys) -> None:
    out = tmp_path / "plots"
    assert plot.main(["--scene", str(scene_path), "--output", str(out), "--dry-run"]) == 0
    printed = capsys.readouterr().out
    assert "--- layer ink ---" in printed
    assert "draw_path" in printed
    assert not out.exists()


def test_seed_makes_runs_repeatable(scene_path: Path, capsys) -> None:
    plot.main(["--scene", str(scene_path), "--seed", "9", "--dry-run"])
    first = capsys.readouterr().out
    plot.main(["--scene", str(scene_path), "--seed", "9", "--dry-run"])
    assert capsys.readouterr().out == first


def test_missing_config(scene_path: Path, tmp_path: Path) -> None:
    code = plot.main(["--scene", str(scene_path), "--config", str(tmp_path / "nope.yaml")])
    assert code == 1


def test_invalid_config(scene_path: Path, tmp_path: Path) -> None:
    config = tmp_path / "plot.yaml"
    config.write_text("tool_type: Dip\n", encoding="utf-8")
    assert plot.main(["--scene", str(scene_path), "--config", str(config)]) == 1


def test_invalid_scene(tmp_path: Path) -> None:
    scene = tmp_path / "scene.yaml"
    scene.write_text("schema: scene.v9\n", encoding="utf-8")
    assert plot.main(["--scene", str(scene), "--dry-run"]) == 1


def test_scene_is_required() -> None:
    with pytest.raises(SystemExit):
        plot.main([])
