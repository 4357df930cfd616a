"""
Job Intermediate Representation module.

Defines every plot program instruction as an immutable dataclass.  This
vocabulary is the contract between the emitter and the command-text writer.

All coordinates are in millimeters, plotter-relative.
"""

from plot_writer.job_ir.operations import (
    Operation,
    PenUp,
    DrawPath,
    GoHome,
    RunCommand,
    Pause,
    Comment,
    LayerProgram,
)

__all__ = [
    "Operation",
    "PenUp",
    "DrawPath",
    "GoHome",
    "RunCommand",
    "Pause",
    "Comment",
    "LayerProgram",
]
