"""Plot program builder -- merged paths to Job IR operations per layer.

State machine over the ``(layer, color, weight)`` buckets in emission
order.  Per layer the pen starts up at the origin, holding black, with no
pen size chosen yet.

Pen tool:
    A new color emits ``Pause("Change Color to <name>")``; a new weight for
    the same color emits ``Pause("Change Pen Size to <mm>")``.  With a
    finite refill distance the drawn length is accumulated per layer and,
    once it exceeds the refill distance, the pen goes home and pauses for a
    manual refill before the next path.

Dipping tools (``Dip``, ``DipAndStir``):
    Paths are split into strokes no longer than the refill distance.  The
    nearest wash well is visited before a bucket's first stroke (when a
    wash is required) and the nearest paint well of the bucket color before
    every stroke.  A missing well is written as a comment and logged; the
    program is still produced.

Every layer ends with ``GoHome``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List

from plot_writer.configs.loader import DrawTool, PlotConfig
from plot_writer.geometry.primitives import BLACK, ORIGIN, Color, Point
from plot_writer.job_ir.operations import (
    Comment,
    DrawPath,
    GoHome,
    LayerProgram,
    Pause,
    PenUp,
    RunCommand,
)
from plot_writer.pipeline.paths import Path, split_paths
from plot_writer.utils.logging_config import pop_context, push_context

if TYPE_CHECKING:
    from plot_writer.wells import RefillData, WellCommand

logger = logging.getLogger(__name__)

PathLayers = Dict[str, Dict[Color, Dict[float, List[Path]]]]


class PlotProgramBuilder:
    """Build one operation list per layer.

    Parameters
    ----------
    config : PlotConfig
        Validated plot configuration.
    refill_data : RefillData
        Well commands for nearest-well lookup.
    """

    def __init__(self, config: PlotConfig, refill_data: RefillData) -> None:
        self._cfg = config
        self._refill = refill_data
        self._reset_state()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, path_layers: PathLayers) -> dict[str, LayerProgram]:
        """Build the programs of every layer, in layer order."""
        return {name: self.build_layer(name, colors) for name, colors in path_layers.items()}

    def build_layer(
        self, name: str, colors: Dict[Color, Dict[float, List[Path]]]
    ) -> LayerProgram:
        """Build the program of a single layer."""
        self._reset_state()
        ops: LayerProgram = [PenUp(), Comment(f"Layer: {name}")]

        push_context(layer=name)
        try:
            for color, weights in colors.items():
                for weight, paths in weights.items():
                    if not paths:
                        continue
                    self._tool_change(color, weight, ops)
                    if self._cfg.requires_dipping:
                        self._emit_dipped(color, paths, ops)
                    elif self._cfg.requires_manual_refills:
                        self._emit_with_refill_pauses(paths, ops)
                    else:
                        for path in paths:
                            self._emit_draw(path, ops)
        finally:
            pop_context(["layer"])

        ops.append(GoHome())
        logger.debug("Layer %s: %d operation(s)", name, len(ops))
        return ops

    # ------------------------------------------------------------------
    # Internal: state
    # ------------------------------------------------------------------

    def _reset_state(self) -> None:
        self._location: Point = ORIGIN
        self._color: Color = BLACK
        self._weight: float | None = None
        self._distance_since_refill = 0.0

    # ------------------------------------------------------------------
    # Internal: emission
    # ------------------------------------------------------------------

    def _tool_change(self, color: Color, weight: float, ops: LayerProgram) -> None:
        if self._cfg.tool_type is not DrawTool.PEN:
            return
        if color != self._color:
            if color not in self._cfg.palette:
                logger.warning(
                    "Color %s is not in the palette; pausing with its hex code",
                    color.to_hex(),
                )
            ops.append(Pause(f"Change Color to {self._cfg.palette_name(color)}"))
            self._color = color
        elif self._weight is not None and weight != self._weight:
            ops.append(Pause(f"Change Pen Size to {self._cfg.to_millimetres(weight)}"))
        self._weight = weight

    def _emit_draw(self, path: Path, ops: LayerProgram) -> None:
        if len(path) < 2:
            logger.debug("Skipping path with %d point(s)", len(path))
            return
        ops.append(DrawPath(tuple(p.as_tuple() for p in path.points)))
        self._location = path.end

    def _emit_well(self, command: WellCommand | None, target: str, ops: LayerProgram) -> None:
        if command is None:
            logger.warning("No well found for %s", target)
            ops.append(Comment(f"well not found for {target}"))
        else:
            ops.append(RunCommand(command.command_name))

    def _emit_dipped(self, color: Color, paths: List[Path], ops: LayerProgram) -> None:
        strokes = split_paths(paths, self._cfg.refill_distance)
        if not strokes:
            return
        if self._cfg.requires_wash:
            self._emit_well(self._refill.nearest_wash_well(self._location), "wash", ops)
        name = self._cfg.palette_name(color)
        for stroke in strokes:
            self._emit_well(self._refill.nearest_paint_well(color, self._location), name, ops)
            self._emit_draw(stroke, ops)

    def _emit_with_refill_pauses(self, paths: List[Path], ops: LayerProgram) -> None:
        for path in paths:
            if self._distance_since_refill > self._cfg.refill_distance:
                ops.append(GoHome())
                ops.append(Pause("refill pen"))
                self._distance_since_refill = 0.0
            self._distance_since_refill += path.length
            self._emit_draw(path, ops)
