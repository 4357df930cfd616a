"""Tests for flattened paths: metrics, seam rotation, merging and splitting."""

from __future__ import annotations

import math
import random

import pytest

from plot_writer.configs.loader import PlotConfig
from plot_writer.geometry.primitives import Point, Rectangle
from plot_writer.pipeline.paths import (
    Path,
    contour_to_path,
    merge_paths,
    split_into_strokes,
    split_paths,
)


def _path(*coords) -> Path:
    return Path(Point(float(x), float(y)) for x, y in coords)


@pytest.fixture
def path1() -> Path:
    return _path((0, 0), (100, 0), (100, 100), (0, 100), (0, 0))


@pytest.fixture
def path2() -> Path:
    return _path((0, 0), (100, 0), (100, 100), (0, 100))


@pytest.fixture
def path3() -> Path:
    return _path((100, 100), (300, 100))


# ---------------------------------------------------------------------------
# Path metrics
# ---------------------------------------------------------------------------


class TestPath:
    def test_length(self, path1: Path, path2: Path) -> None:
        assert path1.length == 400.0
        assert path2.length == 300.0

    def test_closed(self, path1: Path, path2: Path, path3: Path) -> None:
        assert path1.closed
        assert not path2.closed
        assert not path3.closed

    def test_two_identical_points_are_not_closed(self) -> None:
        assert not _path((1, 1), (1, 1)).closed

class TestShiftStart:
    @pytest.fixture
    def ring(self) -> list[Point]:
        return [Point(float(i), float(i)) for i in range(9)] + [Point(0.0, 0.0)]

    def test_rotates_start_point(self, ring: list[Point]) -> None:
        path = Path(ring)
        path.shift_start(5)
        assert len(path) == 10
        assert path.closed
        assert path.points[0] == ring[5]
        assert path.points[8] == ring[4]

    def test_offset_wraps(self, ring: list[Point]) -> None:
        path = Path(ring)
        path.shift_start(12)
        assert len(path) == 10
        assert path.closed
        assert path.points[0] == ring[3]

    def test_open_path_untouched(self, path2: Path) -> None:
        before = list(path2.points)
        path2.shift_start(2)
        assert path2.points == before

    def test_random_offset_is_seeded(self, ring: list[Point]) -> None:
        a, b = Path(ring), Path(ring)
        a.shift_start(rng=random.Random(7))
        b.shift_start(rng=random.Random(7))
        assert a == b
        assert set(a.points) == set(ring)
        assert a.length == pytest.approx(Path(ring).length)


# ---------------------------------------------------------------------------
# Contour conversion
# ---------------------------------------------------------------------------


class TestContourToPath:
    def test_keeps_seam_when_not_randomised(self) -> None:
        config = PlotConfig(randomize_start=False)
        path = contour_to_path(Rectangle(0, 0, 10, 10).contour, config)
        assert path.start == Point(0, 0)
        assert path.closed

    def test_randomised_seam_keeps_shape(self) -> None:
        config = PlotConfig(randomize_start=True)
        contour = Rectangle(0, 0, 10, 10).contour
        path = contour_to_path(contour, config, random.Random(3))
        assert path.closed
        assert len(path) == 5
        assert path.length == pytest.approx(40.0)


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


class TestMergePaths:
    def test_touching_paths_join(self) -> None:
        merged = merge_paths(
            [_path((0, 0), (10, 0)), _path((10, 0), (20, 0)), _path((30, 0), (40, 0))],
            0.1524,
        )
        assert merged == [_path((0, 0), (10, 0), (20, 0)), _path((30, 0), (40, 0))]

    def test_near_paths_join_keeping_both_points(self) -> None:
        merged = merge_paths([_path((0, 0), (10, 0)), _path((10.1, 0), (20, 0))], 0.1524)
        assert merged == [_path((0, 0), (10, 0), (10.1, 0), (20, 0))]

    def test_gap_beyond_tolerance(self) -> None:
        merged = merge_paths([_path((0, 0), (10, 0)), _path((10.2, 0), (20, 0))], 0.1524)
        assert len(merged) == 2

    def test_inputs_are_not_mutated(self) -> None:
        first = _path((0, 0), (10, 0))
        merge_paths([first, _path((10, 0), (20, 0))], 0.1524)
        assert first == _path((0, 0), (10, 0))


# ---------------------------------------------------------------------------
# Refill splitting
# ---------------------------------------------------------------------------


class TestSplitIntoStrokes:
    def test_cut_point_is_shared(self) -> None:
        strokes = split_into_strokes(_path((0, 0), (5, 0), (10, 0), (15, 0)), 10.0)
        assert strokes == [_path((0, 0), (5, 0), (10, 0)), _path((10, 0), (15, 0))]

    def test_long_span_kept_whole(self) -> None:
        strokes = split_into_strokes(_path((0, 0), (50, 0), (55, 0)), 10.0)
        assert strokes == [_path((0, 0), (50, 0)), _path((50, 0), (55, 0))]

    def test_infinite_refill_keeps_path(self) -> None:
        path = _path((0, 0), (5, 0), (10, 0))
        assert split_into_strokes(path, math.inf) == [path]

    def test_single_point_yields_nothing(self) -> None:
        assert split_into_strokes(_path((1, 1)), 10.0) == []

    def test_every_stroke_has_two_points(self) -> None:
        path = _path(*((x, 0) for x in range(0, 40, 3)))
        strokes = split_paths([path, _path((0, 5))], 7.0)
        assert strokes
        assert all(len(s) >= 2 for s in strokes)
        assert all(s.length <= 7.0 for s in strokes)
