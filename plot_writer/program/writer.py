"""Program writer -- Job IR operations to AxiDraw interactive command text.

One layer program renders to one text file laid out as::

    <option> <value>            (default options, ``units 2`` last)
    ::END_OPTIONS::
    <well command definitions>
    refill_options ...          (only when refill options are configured)
    default_options ...
    go_home moveto 0 0
    ::END_DEFINITIONS::
    <instructions>

Coordinates are written with a fixed number of decimals and no embedded
whitespace, e.g. ``draw_path [[0.0,0.0],[1.5,2.25]]``.
"""

from __future__ import annotations

import logging
from io import StringIO
from typing import TYPE_CHECKING, Iterable, Sequence, Union

from plot_writer.job_ir.operations import (
    Comment,
    DrawPath,
    GoHome,
    Operation,
    Pause,
    PenUp,
    RunCommand,
)

if TYPE_CHECKING:
    from plot_writer.configs.loader import PlotConfig
    from plot_writer.geometry.primitives import Point
    from plot_writer.wells import RefillData

logger = logging.getLogger(__name__)

END_OPTIONS = "::END_OPTIONS::"
END_DEFINITIONS = "::END_DEFINITIONS::"
HOME_COMMAND = "go_home"
HOME_BODY = "moveto 0 0"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def format_number(value: float, decimals: int = 3) -> str:
    """Round and print a coordinate; never prints ``-0.0``."""
    return repr(round(float(value), decimals) + 0.0)


def round_and_stringify(
    points: Iterable[Union["Point", Sequence[float]]],
    decimals: int = 3,
) -> str:
    """Render points as ``[[x,y],[x,y],...]`` with no whitespace.

    Accepts :class:`Point` objects or ``(x, y)`` pairs.  Stringifying
    already-rounded points gives the same text again.
    """
    parts = []
    for p in points:
        x, y = (p.x, p.y) if hasattr(p, "x") else (p[0], p[1])
        parts.append(f"[{format_number(x, decimals)},{format_number(y, decimals)}]")
    return "[" + ",".join(parts) + "]"


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class ProgramWriter:
    """Render layer programs to command text.

    Parameters
    ----------
    config : PlotConfig
        Supplies the AxiDraw options and coordinate precision.
    refill_data : RefillData
        Supplies the well command definitions.
    """

    def __init__(self, config: PlotConfig, refill_data: RefillData) -> None:
        self._cfg = config
        self._refill = refill_data

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, operations: list[Operation]) -> str:
        """Render one layer program, header included."""
        buf = StringIO()
        self._write_header(buf)
        for op in operations:
            self._generate_op(op, buf)
        return buf.getvalue()

    def generate_layers(self, programs: dict[str, list[Operation]]) -> dict[str, str]:
        """Render every layer program, keyed by layer name."""
        return {name: self.generate(ops) for name, ops in programs.items()}

    def util_definitions(self) -> list[str]:
        """Utility command definitions (option toggles and home)."""
        lines = []
        if self._cfg.has_refill_options:
            refill = " | ".join(f"{k} {v}" for k, v in self._cfg.refill_options.items())
            restore = " | ".join(
                f"{k} {self._cfg.default_options[k]}" for k in self._cfg.refill_options
            )
            lines.append(f"refill_options {refill}")
            lines.append(f"default_options {restore}")
        lines.append(f"{HOME_COMMAND} {HOME_BODY}")
        return lines

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _write_header(self, buf: StringIO) -> None:
        for key, value in self._cfg.default_options.items():
            buf.write(f"{key} {value}\n")
        buf.write(f"{END_OPTIONS}\n")
        for line in self._refill.definitions():
            buf.write(f"{line}\n")
        for line in self.util_definitions():
            buf.write(f"{line}\n")
        buf.write(f"{END_DEFINITIONS}\n")

    def _generate_op(self, op: Operation, buf: StringIO) -> None:
        if isinstance(op, PenUp):
            buf.write("penup\n")
        elif isinstance(op, DrawPath):
            buf.write(f"draw_path {round_and_stringify(op.points, self._cfg.decimals)}\n")
        elif isinstance(op, RunCommand):
            buf.write(f"{op.name}\n")
        elif isinstance(op, Pause):
            buf.write(f"pause {op.message}\n")
        elif isinstance(op, GoHome):
            buf.write(f"{HOME_COMMAND}\n")
        elif isinstance(op, Comment):
            buf.write(f"# {op.text}\n")
        else:
            logger.warning("Unsupported operation: %s", type(op).__name__)
