"""Paint and wash wells: stir paths, named commands and nearest-well lookup.

Each well becomes a named AxiDraw command whose body moves the tool through
the well: a back-and-forth stir path for stirring tools and wash wells, a
single dip at the centre otherwise.  During emission the plot program calls
the command of the well nearest to the tool's current position.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from plot_writer.configs.loader import PlotConfig
from plot_writer.geometry.primitives import Color, Point, Rectangle, Segment
from plot_writer.program.writer import format_number, round_and_stringify

logger = logging.getLogger(__name__)

REFILL_OPTIONS_COMMAND = "refill_options"
DEFAULT_OPTIONS_COMMAND = "default_options"


@dataclass(frozen=True, slots=True)
class WellCommand:
    """Named plotter subroutine anchored at a well.

    Parameters
    ----------
    location : Point
        Anchor used for nearest-well lookup (the well centre).
    command_name : str
        Name the plot program calls.
    command : str
        Command body, parts joined by ``" | "``.
    """

    location: Point
    command_name: str
    command: str

    @property
    def definition(self) -> str:
        return f"{self.command_name} {self.command}"


def stir_path(well: Rectangle, strokes: int, padding: float) -> list[Point]:
    """Zigzag between the right and left inset edges, centre to centre.

    ``ceil(strokes / 2)`` evenly spaced points are taken on each inset edge
    (top to bottom) and visited alternately right, left.  A well too small
    for its padding collapses the inset edges onto the centre lines.
    """
    apexes = math.ceil(strokes / 2)
    b = well.offset_edges(-padding)
    x0, y0 = b.x, b.y
    x1, y1 = b.x + b.width, b.y + b.height
    right = Segment(Point(x1, y0), Point(x1, y1)).equidistant_positions(apexes)
    left = Segment(Point(x0, y0), Point(x0, y1)).equidistant_positions(apexes)
    path = [well.center]
    for r, l in zip(right, left):
        path.extend((r, l))
    path.append(well.center)
    return path


def _command_token(name: str) -> str:
    return name.replace(" ", "_").lstrip("#")


class RefillData:
    """Well geometry and commands for one plot job.

    Built once from a validated :class:`PlotConfig` and read-only
    afterwards.  Paint commands exist only for dipping tools and wash
    commands only when a wash is required.
    """

    def __init__(self, config: PlotConfig):
        self.config = config

        self.stir_paths: dict[Color, list[list[Point]]] = {
            color: [
                stir_path(w, config.paint_stir_strokes, config.well_padding)
                if config.requires_stir else [w.center]
                for w in wells
            ]
            for color, wells in config.paint_wells.items()
        }
        self.wash_paths: list[list[Point]] = (
            [stir_path(w, config.wash_stir_strokes, config.well_padding)
             for w in config.wash_wells]
            if config.requires_wash else []
        )

        self.refill_commands: dict[Color, list[WellCommand]] = {}
        if config.requires_dipping:
            for color, paths in self.stir_paths.items():
                token = _command_token(config.palette_name(color))
                self.refill_commands[color] = [
                    self._well_command(f"refill_{token}_w{i}", path)
                    for i, path in enumerate(paths)
                ]
        self.wash_commands: list[WellCommand] = [
            self._well_command(f"wash_w{i}", path)
            for i, path in enumerate(self.wash_paths)
        ]

        logger.debug(
            "Wells: %d paint command(s), %d wash command(s)",
            sum(len(c) for c in self.refill_commands.values()),
            len(self.wash_commands),
        )

    def _well_command(self, name: str, path: list[Point]) -> WellCommand:
        decimals = self.config.decimals
        parts: list[str] = []
        if self.config.has_refill_options:
            parts.append(REFILL_OPTIONS_COMMAND)
        if len(path) == 1:
            x, y = path[0].x, path[0].y
            parts.extend((
                f"moveto {format_number(x, decimals)} {format_number(y, decimals)}",
                "pendown",
                "penup",
            ))
        else:
            parts.append(f"draw_path {round_and_stringify(path, decimals)}")
        if self.config.has_refill_options:
            parts.append(DEFAULT_OPTIONS_COMMAND)
        return WellCommand(path[0], name, " | ".join(parts))

    # -- lookup ---------------------------------------------------------------

    @staticmethod
    def _nearest(commands: list[WellCommand], location: Point) -> WellCommand | None:
        best: WellCommand | None = None
        best_distance = math.inf
        for command in commands:
            distance = location.distance_to(command.location)
            if distance < best_distance:
                best, best_distance = command, distance
        return best

    def nearest_wash_well(self, location: Point) -> WellCommand | None:
        return self._nearest(self.wash_commands, location)

    def nearest_paint_well(self, color: Color, location: Point) -> WellCommand | None:
        return self._nearest(self.refill_commands.get(color.opaque(), []), location)

    def definitions(self) -> list[str]:
        """Command definition lines, paint wells first then wash wells."""
        commands = [c for cmds in self.refill_commands.values() for c in cmds]
        commands.extend(self.wash_commands)
        return [c.definition for c in commands]
