"""Curve flattening: segments and contours to plotter-ready point lists.

Two strategies for curved segments:

* Adaptive (default): recursive de Casteljau subdivision until both
  control points lie within ``bezier_tolerance`` of the chord.  Bounds the
  geometric error rather than the point count.
* Fixed step (``step_resolution`` set): curves longer than the step are cut
  into ``ceil(length / step)`` points spaced evenly by arc length.

Straight segments emit their two end points, or ``ceil(length / refill) + 1``
evenly spaced points when longer than the refill distance so that no single
uninterrupted stroke exceeds the refill budget.

All units in mm.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from plot_writer.geometry.primitives import (
    POINT_TOLERANCE,
    Contour,
    Point,
    Segment,
    array_to_points,
)

logger = logging.getLogger(__name__)

MAX_SUBDIVISION_DEPTH = 12


def bezier_cubic_polyline(
    segment: Segment,
    max_err_mm: float = 0.05,
    max_depth: int = MAX_SUBDIVISION_DEPTH,
) -> list[Point]:
    """Flatten a cubic segment to a polyline via adaptive subdivision.

    Parameters
    ----------
    segment : Segment
        Curve to flatten.  Straight segments return their end points.
    max_err_mm : float
        Maximum distance of a control point from its sub-curve's chord.
    max_depth : int
        Maximum recursion depth, default 12.

    Returns
    -------
    list[Point]
        Polyline vertices, N >= 2, starting at ``segment.start`` and ending
        at ``segment.end``.

    Notes
    -----
    Flatness criterion: perpendicular distance of both control points to
    the chord q1-q4.  Degenerate curves (all four points coincident) are
    flat and yield two points.
    """
    if segment.is_straight:
        return [segment.start, segment.end]

    q = np.array([p.as_tuple() for p in segment.control_points()], dtype=float)

    def subdivide(q1, q2, q3, q4, depth):
        if depth >= max_depth:
            return [q1, q4]

        chord = q4 - q1
        chord_len = float(np.hypot(chord[0], chord[1])) + 1e-12
        v2 = q2 - q1
        v3 = q3 - q1
        d2 = abs(v2[0] * chord[1] - v2[1] * chord[0]) / chord_len
        d3 = abs(v3[0] * chord[1] - v3[1] * chord[0]) / chord_len

        if chord_len <= 1e-9:
            # Closed loop: measure against the start point instead.
            d2 = float(np.hypot(v2[0], v2[1]))
            d3 = float(np.hypot(v3[0], v3[1]))

        if max(d2, d3) <= max_err_mm:
            return [q1, q4]

        # De Casteljau subdivision at t=0.5
        q12 = (q1 + q2) / 2.0
        q23 = (q2 + q3) / 2.0
        q34 = (q3 + q4) / 2.0
        q123 = (q12 + q23) / 2.0
        q234 = (q23 + q34) / 2.0
        mid = (q123 + q234) / 2.0

        left = subdivide(q1, q12, q123, mid, depth + 1)
        right = subdivide(mid, q234, q34, q4, depth + 1)
        return left + right[1:]

    points = array_to_points(np.array(subdivide(q[0], q[1], q[2], q[3], 0)))
    points[0] = segment.start
    points[-1] = segment.end
    return points


def curve_steps(segment: Segment, step_resolution: float) -> list[Point]:
    """Fixed-step flattening: ``ceil(length / step)`` equidistant points."""
    length = segment.length
    if length > step_resolution:
        return segment.equidistant_positions(math.ceil(length / step_resolution))
    return [segment.start, segment.end]


def flatten_segment(
    segment: Segment,
    bezier_tolerance: float = 0.05,
    refill_distance: float = math.inf,
    step_resolution: float | None = None,
) -> list[Point]:
    """Convert one segment to points.

    Curves (including zero-length "dots") use the adaptive flattener, or
    fixed steps when ``step_resolution`` is given.  Straight segments are
    split only when longer than ``refill_distance``.
    """
    if segment.is_curve:
        if step_resolution is not None:
            return curve_steps(segment, step_resolution)
        return bezier_cubic_polyline(segment, bezier_tolerance)

    length = segment.length
    if length <= refill_distance:
        return [segment.start, segment.end]
    strokes = math.ceil(length / refill_distance)
    return segment.equidistant_positions(strokes + 1)


def flatten_contour(
    contour: Contour,
    bezier_tolerance: float = 0.05,
    refill_distance: float = math.inf,
    step_resolution: float | None = None,
) -> list[Point]:
    """Flatten a contour into one point list.

    Each segment's first point is dropped when it coincides with the
    previous segment's end.  A segment that does not start where the
    previous one ended is logged and skipped; the rest of the contour is
    still emitted.
    """
    points: list[Point] = []
    for index, segment in enumerate(contour.segments):
        seg_points = flatten_segment(
            segment, bezier_tolerance, refill_distance, step_resolution
        )
        if not points:
            points.extend(seg_points)
        elif points[-1].is_close(seg_points[0], POINT_TOLERANCE):
            points.extend(seg_points[1:])
        else:
            logger.error(
                "Non-contiguous contour segments: segment %d starts at (%.3f, %.3f), "
                "previous ended at (%.3f, %.3f); skipping segment",
                index, seg_points[0].x, seg_points[0].y, points[-1].x, points[-1].y,
            )
    return points
