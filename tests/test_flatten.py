"""Tests for segment and contour flattening."""

from __future__ import annotations

import logging
import math

import pytest

from plot_writer.geometry.flatten import (
    bezier_cubic_polyline,
    flatten_contour,
    flatten_segment,
)
from plot_writer.geometry.primitives import Contour, Point, Rectangle, Segment
from plot_writer.scene import circle_contour


@pytest.fixture
def quarter_circle() -> Segment:
    return circle_contour(0.0, 0.0, 10.0).segments[0]


class TestBezierPolyline:
    def test_straight_segment(self) -> None:
        seg = Segment.line(0, 0, 5, 5)
        assert bezier_cubic_polyline(seg) == [Point(0, 0), Point(5, 5)]

    def test_ends_are_exact(self, quarter_circle: Segment) -> None:
        pts = bezier_cubic_polyline(quarter_circle, 0.05)
        assert pts[0] == quarter_circle.start
        assert pts[-1] == quarter_circle.end
        assert len(pts) > 2

    def test_points_stay_on_curve(self, quarter_circle: Segment) -> None:
        for p in bezier_cubic_polyline(quarter_circle, 0.05):
            assert math.hypot(p.x, p.y) == pytest.approx(10.0, abs=0.05)

    def test_tighter_tolerance_adds_points(self, quarter_circle: Segment) -> None:
        coarse = bezier_cubic_polyline(quarter_circle, 0.5)
        fine = bezier_cubic_polyline(quarter_circle, 0.005)
        assert len(fine) > len(coarse)

    def test_degenerate_dot(self) -> None:
        p = Point(3, 3)
        assert bezier_cubic_polyline(Segment(p, p, (p, p))) == [p, p]


class TestFlattenSegment:
    def test_short_line_keeps_end_points(self) -> None:
        assert flatten_segment(Segment.line(0, 0, 10, 0), refill_distance=20) == [
            Point(0, 0),
            Point(10, 0),
        ]

    def test_long_line_is_split_for_refills(self) -> None:
        pts = flatten_segment(Segment.line(0, 0, 25, 0), refill_distance=10)
        # ceil(25 / 10) strokes need 4 points
        assert len(pts) == 4
        assert [p.x for p in pts] == pytest.approx([0.0, 25 / 3, 50 / 3, 25.0])

    def test_fixed_step_resolution(self, quarter_circle: Segment) -> None:
        pts = flatten_segment(quarter_circle, step_resolution=1.0)
        assert len(pts) == math.ceil(quarter_circle.length)
        assert pts[0] == quarter_circle.start
        assert pts[-1] == quarter_circle.end

    def test_fixed_step_short_curve(self) -> None:
        seg = Segment(Point(0, 0), Point(1, 0), (Point(0.3, 0.1), Point(0.6, 0.1)))
        assert flatten_segment(seg, step_resolution=5.0) == [Point(0, 0), Point(1, 0)]


class TestFlattenContour:
    def test_closed_rectangle(self) -> None:
        pts = flatten_contour(Rectangle(0, 0, 10, 5).contour)
        assert pts == [Point(0, 0), Point(10, 0), Point(10, 5), Point(0, 5), Point(0, 0)]

    def test_circle_has_no_duplicate_joins(self) -> None:
        pts = flatten_contour(circle_contour(0, 0, 10))
        assert all(a != b for a, b in zip(pts, pts[1:]))
        assert pts[0] == pts[-1]

    def test_non_contiguous_segment_is_skipped(self, caplog) -> None:
        contour = Contour((Segment.line(0, 0, 1, 0), Segment.line(5, 5, 6, 6)))
        with caplog.at_level(logging.ERROR, logger="plot_writer.geometry.flatten"):
            pts = flatten_contour(contour)
        assert pts == [Point(0, 0), Point(1, 0)]
        assert "Non-contiguous" in caplog.text
