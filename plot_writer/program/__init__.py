"""
Plot program generation.

    builder: emitter state machine, merged paths -> Job IR per layer
    writer: Job IR -> AxiDraw interactive command text
"""

from plot_writer.program.writer import ProgramWriter, round_and_stringify
from plot_writer.program.builder import PlotProgramBuilder

__all__ = ["PlotProgramBuilder", "ProgramWriter", "round_and_stringify"]
