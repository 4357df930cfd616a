"""Job IR operations: the vocabulary between plot paths and command text.

Every plot program instruction is an immutable, slotted dataclass.
Operations use **semantic** names (``DrawPath``, not ``draw_path [...]``),
**millimetre** units and **plotter** coordinates (origin at the AxiDraw
home position, paper offset already applied).

Programs
--------
A *LayerProgram* is the ordered list of operations for one layer.  The
program writer renders each layer program to its own command file.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

LayerProgram = list["Operation"]
"""Operations of one layer, in emission order."""

# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Operation(ABC):
    """Base class for all plot operations."""

    pass


# ---------------------------------------------------------------------------
# Pen operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PenUp(Operation):
    """Raise the pen.  Emitted once at the start of every layer."""

    pass


@dataclass(frozen=True, slots=True)
class DrawPath(Operation):
    """Pen-down polyline; the pen is raised again at the end.

    Parameters
    ----------
    points : tuple[tuple[float, float], ...]
        Ordered vertices in mm.  Must contain >= 2 points.
    """

    points: tuple[tuple[float, float], ...]

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError(
                f"DrawPath requires >= 2 points, got {len(self.points)}"
            )


@dataclass(frozen=True, slots=True)
class GoHome(Operation):
    """Travel back to the home position (``go_home``)."""

    pass


# ---------------------------------------------------------------------------
# Tool servicing
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RunCommand(Operation):
    """Invoke a named subroutine (paint or wash well, option toggle).

    Parameters
    ----------
    name : str
        Command name as defined in the program header.
    """

    name: str

    def __post_init__(self) -> None:
        if not self.name or any(ch.isspace() for ch in self.name):
            raise ValueError(f"Command name must be a non-empty token, got {self.name!r}")


@dataclass(frozen=True, slots=True)
class Pause(Operation):
    """Stop for operator intervention (color change, manual refill)."""

    message: str


# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Comment(Operation):
    """Single-line comment; ignored by the plotter driver."""

    text: str

    def __post_init__(self) -> None:
        if "\n" in self.text:
            raise ValueError("Comment text must be a single line")
