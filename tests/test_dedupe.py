"""Tests for duplicate segment removal."""

from __future__ import annotations

import pytest

from plot_writer.geometry.dedupe import deduplicate, segment_contains
from plot_writer.geometry.primitives import Rectangle, Segment
from plot_writer.scene import circle_contour


class TestSegmentContains:
    def test_identical_lines(self) -> None:
        assert segment_contains(Segment.line(0, 0, 1, 1), Segment.line(0, 0, 1, 1))

    def test_segment_does_not_contain_itself(self) -> None:
        seg = Segment.line(0, 0, 1, 1)
        assert not segment_contains(seg, seg)

    def test_shorter_line_inside(self) -> None:
        outer = Segment.line(1, 1, 10, 10)
        assert segment_contains(outer, Segment.line(7, 7, 8, 8))

    def test_offset_line_outside_tolerance(self) -> None:
        outer = Segment.line(1, 1, 10, 10)
        assert not segment_contains(outer, Segment.line(7.1, 7, 8, 8), 0.05)

    @pytest.mark.parametrize("tolerance,expected", [(0.1, True), (0.01, False)])
    def test_tolerance_bounds(self, tolerance: float, expected: bool) -> None:
        outer = Segment.line(1, 1, 10, 10)
        inner = Segment.line(7.05, 7, 8, 8)
        assert segment_contains(outer, inner, tolerance) is expected

    def test_overhanging_line(self) -> None:
        outer = Segment.line(0, 0, 10, 0)
        assert not segment_contains(outer, Segment.line(5, 0, 12, 0))

    def test_curved_piece_inside_curve(self) -> None:
        outer = circle_contour(50, 50, 20).segments[1]
        assert segment_contains(outer, outer.sub(0.3, 0.35))

    def test_kinds_never_match(self) -> None:
        curve = circle_contour(0, 0, 5).segments[0]
        chord = Segment(curve.start, curve.end)
        assert not segment_contains(curve, chord, 100.0)
        assert not segment_contains(chord, curve, 100.0)


class TestDeduplicate:
    def test_stacked_rectangles_collapse(self) -> None:
        segments = []
        for _ in range(6):
            segments.extend(Rectangle(100.0, 100.10, 25.0, 43.2).contour.segments)
        assert len(deduplicate(segments, 1.0)) == 4

    def test_lines_over_rectangle_edges(self) -> None:
        segments = list(Rectangle(100.0, 100.0, 25.0, 43.2).contour.segments)
        segments += [
            Segment.line(110, 100, 121.1, 100),
            Segment.line(105, 100, 121.1, 100),
            Segment.line(100, 125.9, 100, 140),
            Segment.line(100, 10, 100, 210),
        ]
        kept = deduplicate(segments, 1.0)
        assert len(kept) == 4
        assert kept[0] == Segment.line(100, 10, 100, 210)

    def test_result_is_longest_first(self) -> None:
        kept = deduplicate([Segment.line(0, 0, 1, 0), Segment.line(0, 5, 10, 5)])
        assert [s.length for s in kept] == [10.0, 1.0]

    def test_empty(self) -> None:
        assert deduplicate([]) == []
