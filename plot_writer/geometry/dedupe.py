"""Duplicate segment removal.

A segment is dropped when an already-kept, longer segment of the same kind
"contains" it within a tolerance.  Repeated strokes in a drawing (the same
rectangle stacked six times, a line traced over an edge) collapse to one
pen pass.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from plot_writer.geometry.flatten import bezier_cubic_polyline
from plot_writer.geometry.primitives import Point, Segment, points_to_array

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.01

# Interior parameters sampled on the inner curve.
CURVE_SAMPLE_PARAMS = (0.3, 0.6)


def _distance_to_polyline(point: Point, polyline: np.ndarray) -> float:
    """Shortest distance from ``point`` to a polyline of shape (N, 2)."""
    p = np.array(point.as_tuple())
    if len(polyline) == 1:
        return float(np.linalg.norm(p - polyline[0]))
    a = polyline[:-1]
    b = polyline[1:]
    ab = b - a
    denom = np.einsum("ij,ij->i", ab, ab)
    # Zero-length spans have ab == 0, so t collapses to 0.
    safe = np.where(denom > 0, denom, 1.0)
    t = np.clip(np.einsum("ij,ij->i", p - a, ab) / safe, 0.0, 1.0)
    closest = a + ab * t[:, None]
    return float(np.min(np.linalg.norm(closest - p, axis=1)))


def _line_contains_point(outer: Segment, point: Point, tolerance: float) -> bool:
    direction = outer.end - outer.start
    length = outer.length
    if length == 0.0:
        return point.distance_to(outer.start) <= tolerance
    rel = point - outer.start
    # Perpendicular distance to the infinite line
    cross = abs(rel.x * direction.y - rel.y * direction.x) / length
    if cross > tolerance:
        return False
    along = (rel.x * direction.x + rel.y * direction.y) / length
    return -tolerance <= along <= length + tolerance


def segment_contains(
    outer: Segment,
    inner: Segment,
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """Return True when ``inner`` lies on ``outer`` within ``tolerance``.

    Never true for the same object, and never true across kinds (a line
    cannot contain a curve or vice versa).

    Parameters
    ----------
    outer, inner : Segment
        Candidate container and candidate duplicate.
    tolerance : float
        Maximum distance, in the segments' units.
    """
    if outer is inner:
        return False
    if outer.is_straight != inner.is_straight:
        return False

    if outer.is_straight:
        return all(
            _line_contains_point(outer, p, tolerance) for p in (inner.start, inner.end)
        )

    polyline = points_to_array(bezier_cubic_polyline(outer, tolerance / 10.0))
    samples = [inner.start, inner.end] + [inner.position(t) for t in CURVE_SAMPLE_PARAMS]
    return all(_distance_to_polyline(p, polyline) <= tolerance for p in samples)


def deduplicate(
    segments: Iterable[Segment],
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[Segment]:
    """Remove segments contained in another, longest first.

    Parameters
    ----------
    segments : Iterable[Segment]
        Segments of one bucket.
    tolerance : float
        Containment tolerance.

    Returns
    -------
    list[Segment]
        Kept segments, ordered by descending length.
    """
    ordered = sorted(segments, key=lambda s: s.length, reverse=True)
    kept: list[Segment] = []
    dropped = 0
    for candidate in ordered:
        if any(segment_contains(k, candidate, tolerance) for k in kept):
            dropped += 1
            logger.debug(
                "Dropping duplicate segment (%.3f, %.3f) -> (%.3f, %.3f)",
                candidate.start.x, candidate.start.y, candidate.end.x, candidate.end.y,
            )
            continue
        kept.append(candidate)
    if dropped:
        logger.info("Removed %d duplicate segment(s), %d kept", dropped, len(kept))
    return kept
