"""Greedy nearest-neighbour ordering to minimise pen-up travel.

Starting from the plotter origin, repeatedly take the remaining element
whose start or end is closest to the current pen position.  When an end is
strictly closer than every start the element is reversed.  Ties go to the
un-reversed candidate, and among equally distant candidates the first in
input order wins.

O(n^2) per bucket; buckets are drawing-sized.
"""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from plot_writer.geometry.primitives import ORIGIN, Contour, Point, Segment

T = TypeVar("T")


def _order_greedy(
    items: Sequence[T],
    start_of: Callable[[T], Point],
    end_of: Callable[[T], Point],
    reverse: Callable[[T], T],
    origin: Point = ORIGIN,
) -> list[T]:
    remaining = list(items)
    ordered: list[T] = []
    position = origin

    while remaining:
        best_start = min(
            range(len(remaining)),
            key=lambda i: position.squared_distance_to(start_of(remaining[i])),
        )
        best_end = min(
            range(len(remaining)),
            key=lambda i: position.squared_distance_to(end_of(remaining[i])),
        )
        d_start = position.squared_distance_to(start_of(remaining[best_start]))
        d_end = position.squared_distance_to(end_of(remaining[best_end]))

        if d_start <= d_end:
            chosen = remaining.pop(best_start)
        else:
            chosen = reverse(remaining.pop(best_end))
        ordered.append(chosen)
        position = end_of(chosen)

    return ordered


def order_contours(contours: Sequence[Contour], origin: Point = ORIGIN) -> list[Contour]:
    """Order contours; reversed ones run their segments backwards.

    Empty contours are dropped.
    """
    return _order_greedy(
        [c for c in contours if not c.empty],
        start_of=lambda c: c.start,
        end_of=lambda c: c.end,
        reverse=lambda c: c.reversed(),
        origin=origin,
    )


def order_segments(segments: Sequence[Segment], origin: Point = ORIGIN) -> list[Segment]:
    """Order loose segments, flipping direction where that shortens travel."""
    return _order_greedy(
        segments,
        start_of=lambda s: s.start,
        end_of=lambda s: s.end,
        reverse=lambda s: s.reverse(),
        origin=origin,
    )
