"""Geometry primitives: points, segments, contours, rectangles and colors.

Every primitive is an immutable, slotted dataclass.  Coordinates are plain
floats; units depend on the stage of the pipeline (display units inside a
scene, millimetres after the grouper's transform).

Segments
--------
A :class:`Segment` is either straight (no control points) or a cubic
Bézier (two control points).  Quadratic curves are elevated to cubics on
construction via :meth:`Segment.quadratic`, so the rest of the pipeline
only ever deals with the two kinds.

Colors
------
Grouping and palette lookups use opaque colors only.  :meth:`Color.opaque`
drops the alpha channel; nothing downstream of the grouper sees alpha.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

import numpy as np

# Number of samples used to approximate the arc length of a cubic segment.
ARC_LENGTH_SAMPLES = 64

# Tolerance for treating two points as coincident (mm).
POINT_TOLERANCE = 1e-3


# ---------------------------------------------------------------------------
# Point
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """2D coordinate."""

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def squared_distance_to(self, other: Point) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def is_close(self, other: Point, tolerance: float = POINT_TOLERANCE) -> bool:
        return abs(self.x - other.x) <= tolerance and abs(self.y - other.y) <= tolerance

    def lerp(self, other: Point, t: float) -> Point:
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


ORIGIN = Point(0.0, 0.0)


def points_to_array(points: Sequence[Point]) -> np.ndarray:
    """Stack points into an ``(N, 2)`` float array."""
    return np.array([(p.x, p.y) for p in points], dtype=float).reshape(-1, 2)


def array_to_points(arr: np.ndarray) -> list[Point]:
    return [Point(float(x), float(y)) for x, y in arr]


# ---------------------------------------------------------------------------
# Segment
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Segment:
    """Straight line or cubic Bézier segment.

    Parameters
    ----------
    start, end : Point
        End points.
    control : tuple[Point, ...]
        Empty for a straight segment, exactly two points for a cubic.
    """

    start: Point
    end: Point
    control: tuple[Point, ...] = ()

    def __post_init__(self) -> None:
        if len(self.control) not in (0, 2):
            raise ValueError(
                f"Segment requires 0 or 2 control points, got {len(self.control)}"
            )

    @classmethod
    def line(cls, x0: float, y0: float, x1: float, y1: float) -> Segment:
        return cls(Point(x0, y0), Point(x1, y1))

    @classmethod
    def quadratic(cls, start: Point, control: Point, end: Point) -> Segment:
        """Build the cubic equivalent of a quadratic Bézier."""
        c1 = start + (control - start) * (2.0 / 3.0)
        c2 = end + (control - end) * (2.0 / 3.0)
        return cls(start, end, (c1, c2))

    @property
    def is_straight(self) -> bool:
        return not self.control

    @property
    def is_curve(self) -> bool:
        return bool(self.control)

    def control_points(self) -> tuple[Point, Point, Point, Point]:
        """Cubic control polygon (straight segments use their thirds)."""
        if self.control:
            return (self.start, self.control[0], self.control[1], self.end)
        return (
            self.start,
            self.start.lerp(self.end, 1.0 / 3.0),
            self.start.lerp(self.end, 2.0 / 3.0),
            self.end,
        )

    def position(self, t: float) -> Point:
        """Point at parameter ``t`` in [0, 1]."""
        if self.is_straight:
            return self.start.lerp(self.end, t)
        p1, p2, p3, p4 = self.control_points()
        mt = 1.0 - t
        b0 = mt ** 3
        b1 = 3.0 * mt * mt * t
        b2 = 3.0 * mt * t * t
        b3 = t ** 3
        return Point(
            b0 * p1.x + b1 * p2.x + b2 * p3.x + b3 * p4.x,
            b0 * p1.y + b1 * p2.y + b2 * p3.y + b3 * p4.y,
        )

    def sample(self, count: int = ARC_LENGTH_SAMPLES) -> np.ndarray:
        """Evaluate ``count + 1`` uniformly spaced parameters, shape (N, 2)."""
        t = np.linspace(0.0, 1.0, count + 1)
        if self.is_straight:
            a = np.array(self.start.as_tuple())
            b = np.array(self.end.as_tuple())
            return a + (b - a) * t[:, None]
        p1, p2, p3, p4 = (np.array(p.as_tuple()) for p in self.control_points())
        mt = 1.0 - t[:, None]
        tt = t[:, None]
        return (
            mt ** 3 * p1
            + 3.0 * mt ** 2 * tt * p2
            + 3.0 * mt * tt ** 2 * p3
            + tt ** 3 * p4
        )

    @property
    def length(self) -> float:
        """Chord length for lines, sampled arc length for curves."""
        if self.is_straight:
            return self.start.distance_to(self.end)
        pts = self.sample()
        return float(np.linalg.norm(np.diff(pts, axis=0), axis=1).sum())

    def equidistant_positions(self, count: int) -> list[Point]:
        """``count`` points spaced evenly by arc length, end points included.

        A count of one yields the start point only.
        """
        if count <= 0:
            return []
        if count == 1:
            return [self.start]
        if self.is_straight:
            out = [self.start.lerp(self.end, i / (count - 1)) for i in range(count)]
        else:
            pts = self.sample(ARC_LENGTH_SAMPLES * 4)
            cumulative = np.concatenate(
                ([0.0], np.cumsum(np.linalg.norm(np.diff(pts, axis=0), axis=1)))
            )
            targets = np.linspace(0.0, cumulative[-1], count)
            xs = np.interp(targets, cumulative, pts[:, 0])
            ys = np.interp(targets, cumulative, pts[:, 1])
            out = [Point(float(x), float(y)) for x, y in zip(xs, ys)]
        # Pin the ends exactly so joined paths stay contiguous.
        out[0] = self.start
        out[-1] = self.end
        return out

    def reverse(self) -> Segment:
        return Segment(self.end, self.start, tuple(reversed(self.control)))

    def split(self, t: float) -> tuple[Segment, Segment]:
        """De Casteljau split at ``t``."""
        if self.is_straight:
            mid = self.position(t)
            return Segment(self.start, mid), Segment(mid, self.end)
        p1, p2, p3, p4 = self.control_points()
        p12 = p1.lerp(p2, t)
        p23 = p2.lerp(p3, t)
        p34 = p3.lerp(p4, t)
        p123 = p12.lerp(p23, t)
        p234 = p23.lerp(p34, t)
        mid = p123.lerp(p234, t)
        return Segment(p1, mid, (p12, p123)), Segment(mid, p4, (p234, p34))

    def sub(self, t0: float, t1: float) -> Segment:
        """Portion of the segment between parameters ``t0`` and ``t1``."""
        if t1 <= 0.0:
            ctrl = (self.start, self.start) if self.control else ()
            return Segment(self.start, self.start, ctrl)
        head, _ = self.split(t1)
        if t0 <= 0.0:
            return head
        _, piece = head.split(t0 / t1)
        return piece

    def map_points(self, fn: Callable[[Point], Point]) -> Segment:
        return Segment(fn(self.start), fn(self.end), tuple(fn(c) for c in self.control))


# ---------------------------------------------------------------------------
# Contour
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Contour:
    """Ordered, contiguous sequence of segments.

    Contiguity (``segments[i].end == segments[i + 1].start``) is expected
    but not enforced here: broken contours are reported when they are
    flattened into paths.  A closed contour must end where it starts.
    """

    segments: tuple[Segment, ...]
    closed: bool = False

    def __post_init__(self) -> None:
        if self.closed and self.segments:
            if not self.segments[0].start.is_close(self.segments[-1].end):
                raise ValueError(
                    "Closed contour must end at its start point, "
                    f"got {self.segments[0].start} and {self.segments[-1].end}"
                )

    @classmethod
    def from_points(cls, points: Sequence[Point], closed: bool = False) -> Contour:
        """Polyline contour; a closed contour gets its closing segment."""
        pts = list(points)
        if closed and len(pts) > 1 and not pts[0].is_close(pts[-1]):
            pts.append(pts[0])
        segments = tuple(Segment(a, b) for a, b in zip(pts, pts[1:]))
        return cls(segments, closed and len(segments) > 0)

    @property
    def empty(self) -> bool:
        return not self.segments

    @property
    def start(self) -> Point:
        return self.segments[0].start

    @property
    def end(self) -> Point:
        return self.segments[-1].end

    @property
    def length(self) -> float:
        return sum(s.length for s in self.segments)

    def reversed(self) -> Contour:
        return Contour(tuple(s.reverse() for s in reversed(self.segments)), self.closed)

    def map_points(self, fn: Callable[[Point], Point]) -> Contour:
        return Contour(tuple(s.map_points(fn) for s in self.segments), self.closed)


# ---------------------------------------------------------------------------
# Rectangle
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Rectangle:
    """Axis-aligned rectangle; ``(x, y)`` is the top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def corner(self) -> Point:
        return Point(self.x, self.y)

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def offset_edges(self, distance: float) -> Rectangle:
        """Grow (positive) or shrink (negative) every edge by ``distance``.

        Shrinking never inverts the rectangle: an over-shrunk side
        collapses onto the centre line.
        """
        width = max(0.0, self.width + 2.0 * distance)
        height = max(0.0, self.height + 2.0 * distance)
        c = self.center
        return Rectangle(c.x - width / 2.0, c.y - height / 2.0, width, height)

    @property
    def contour(self) -> Contour:
        """Clockwise (screen coordinates) outline: top, right, bottom, left."""
        x0, y0 = self.x, self.y
        x1, y1 = self.x + self.width, self.y + self.height
        return Contour.from_points(
            [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)],
            closed=True,
        )


# ---------------------------------------------------------------------------
# Color
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Color:
    """RGBA color with channels in [0, 1]."""

    r: float
    g: float
    b: float
    a: float = 1.0

    def __post_init__(self) -> None:
        for ch, val in (("r", self.r), ("g", self.g), ("b", self.b), ("a", self.a)):
            if not 0.0 <= val <= 1.0:
                raise ValueError(f"Color channel {ch} must be in [0, 1], got {val}")

    @classmethod
    def from_hex(cls, value: str, alpha: float = 1.0) -> Color:
        """Parse ``#rrggbb`` or ``#rgb``."""
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise ValueError(f"Expected a #rrggbb color, got {value!r}")
        r, g, b = (int(text[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
        return cls(r, g, b, alpha)

    def opaque(self) -> Color:
        return self if self.a == 1.0 else Color(self.r, self.g, self.b, 1.0)

    def to_hex(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(
            *(int(round(ch * 255)) for ch in (self.r, self.g, self.b))
        )


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)


def total_length(points: Iterable[Point]) -> float:
    """Length of the polyline through ``points``."""
    pts = list(points)
    return sum(a.distance_to(b) for a, b in zip(pts, pts[1:]))
