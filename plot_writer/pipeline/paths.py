"""Flattened paths: merging, refill splitting and seam randomisation.

A :class:`Path` is the plotter-ready form of a contour: an ordered list of
points in mm.  Paths are derived, never edited in place, except for
:meth:`Path.shift_start`, which rotates the seam of a closed path.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, Sequence

from plot_writer.configs.loader import PlotConfig
from plot_writer.geometry.flatten import flatten_contour
from plot_writer.geometry.primitives import Contour, Point, total_length

logger = logging.getLogger(__name__)


class Path:
    """Contiguous run of points plotted as one pen-down stroke.

    Parameters
    ----------
    points : Iterable[Point]
        Path vertices in mm.
    """

    __slots__ = ("points",)

    def __init__(self, points: Iterable[Point]):
        self.points: list[Point] = list(points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self.points == other.points

    def __repr__(self) -> str:
        return f"Path({self.points!r})"

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def length(self) -> float:
        return total_length(self.points)

    @property
    def closed(self) -> bool:
        return len(self.points) > 2 and self.points[0] == self.points[-1]

    def shift_start(self, offset: int | None = None, rng: random.Random | None = None) -> None:
        """Rotate a closed path so it starts ``offset`` points later.

        Open paths are left untouched.  When *offset* is ``None`` it is
        drawn from *rng* in ``[0, len(points) - 1)``.  The offset wraps
        modulo the number of distinct points.
        """
        if not self.closed:
            return
        open_size = len(self.points) - 1
        if offset is None:
            offset = (rng or random.Random()).randrange(0, open_size)
        shift = abs(offset) % open_size
        if shift == 0:
            return
        ring = self.points[:-1]
        shifted = ring[shift:] + ring[:shift]
        self.points = shifted + [shifted[0]]


def contour_to_path(
    contour: Contour,
    config: PlotConfig,
    rng: random.Random | None = None,
) -> Path:
    """Flatten *contour* and, when configured, randomise its seam."""
    path = Path(
        flatten_contour(
            contour,
            bezier_tolerance=config.bezier_tolerance,
            refill_distance=config.refill_distance,
            step_resolution=config.step_resolution,
        )
    )
    if config.randomize_start and path.closed:
        path.shift_start(rng=rng)
    return path


def merge_paths(paths: Sequence[Path], tolerance: float) -> list[Path]:
    """Join each path onto the previous one when they nearly touch.

    A path is appended to the previous merged path when its first point is
    within *tolerance* of the previous path's last point.  The joining
    point is kept once when both ends are identical.
    """
    merged: list[Path] = []
    for path in paths:
        if not path.points:
            continue
        if merged and merged[-1].end.distance_to(path.start) <= tolerance:
            points = path.points
            if merged[-1].end == points[0]:
                points = points[1:]
            merged[-1].points.extend(points)
        else:
            merged.append(Path(path.points))
    return merged


def split_into_strokes(path: Path, refill_distance: float) -> list[Path]:
    """Cut *path* into strokes no longer than *refill_distance*.

    The cut point ends one stroke and starts the next.  A single span
    longer than the refill distance is kept whole as its own stroke.
    Paths with fewer than two points yield nothing.
    """
    if len(path.points) < 2:
        return []

    strokes: list[Path] = []
    current = [path.points[0]]
    distance = 0.0
    last = path.points[0]
    for point in path.points[1:]:
        span = last.distance_to(point)
        if distance + span > refill_distance and len(current) > 1:
            strokes.append(Path(current))
            current = [last]
            distance = 0.0
        current.append(point)
        distance += span
        last = point
    strokes.append(Path(current))
    return strokes


def split_paths(paths: Iterable[Path], refill_distance: float) -> list[Path]:
    strokes: list[Path] = []
    for path in paths:
        strokes.extend(split_into_strokes(path, refill_distance))
    return strokes
