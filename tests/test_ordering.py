"""Tests for greedy travel ordering."""

from __future__ import annotations

from plot_writer.geometry.primitives import Contour, Point, Segment
from plot_writer.pipeline.ordering import order_contours, order_segments


def _line(x0, y0, x1, y1) -> Contour:
    return Contour((Segment.line(x0, y0, x1, y1),))


class TestOrderContours:
    def test_scrambled_chain_is_restored(self) -> None:
        c1, c2, c3 = _line(0, 0, 10, 0), _line(10, 0, 20, 0), _line(20, 0, 30, 0)
        assert order_contours([c3, c1, c2]) == [c1, c2, c3]

    def test_closer_end_reverses(self) -> None:
        ordered = order_contours([_line(10, 0, 0, 0)])
        assert ordered[0].start == Point(0, 0)
        assert ordered[0].end == Point(10, 0)

    def test_tie_keeps_direction(self) -> None:
        contour = _line(1, 0, -1, 0)
        assert order_contours([contour]) == [contour]

    def test_first_of_equal_candidates_wins(self) -> None:
        a, b = _line(0, 5, 0, 10), _line(5, 0, 10, 0)
        assert order_contours([a, b])[0] == a
        assert order_contours([b, a])[0] == b

    def test_empty_contours_dropped(self) -> None:
        c1 = _line(0, 0, 1, 0)
        assert order_contours([Contour(()), c1]) == [c1]

    def test_custom_origin(self) -> None:
        near, far = _line(0, 0, 1, 0), _line(100, 0, 101, 0)
        assert order_contours([near, far], origin=Point(99, 0))[0] == far


class TestOrderSegments:
    def test_scrambled_segments(self) -> None:
        s1, s2, s3 = (
            Segment.line(0, 0, 10, 0),
            Segment.line(10, 0, 20, 0),
            Segment.line(20, 0, 30, 0),
        )
        assert order_segments([s2, s3, s1]) == [s1, s2, s3]

    def test_reversed_segments_chain(self) -> None:
        ordered = order_segments([Segment.line(20, 0, 10, 0), Segment.line(10, 0, 0, 0)])
        assert [(s.start, s.end) for s in ordered] == [
            (Point(0, 0), Point(10, 0)),
            (Point(10, 0), Point(20, 0)),
        ]
