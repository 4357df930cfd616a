"""End-to-end plot data generation for one job.

    scene -> group -> (deduplicate) -> order -> flatten -> merge
          -> emit (consulting the wells) -> command text per layer

Everything here is in memory; files are written by
:mod:`plot_writer.output.file_set` once generation has finished.  Each call
owns its buckets, well data and random source, so independent jobs can run
in parallel.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from plot_writer.configs.loader import PlotConfig
from plot_writer.geometry.dedupe import deduplicate
from plot_writer.geometry.primitives import Contour
from plot_writer.job_ir.operations import LayerProgram
from plot_writer.pipeline.grouping import ContourLayers, group_contours, iter_buckets
from plot_writer.pipeline.ordering import order_contours, order_segments
from plot_writer.pipeline.paths import contour_to_path, merge_paths
from plot_writer.program.builder import PathLayers, PlotProgramBuilder
from plot_writer.program.writer import ProgramWriter
from plot_writer.scene import Node
from plot_writer.wells import RefillData

logger = logging.getLogger(__name__)


@dataclass
class PlotData:
    """Everything produced for one plot job.

    Attributes
    ----------
    contour_layers : ContourLayers
        Ordered contours per bucket, in mm.
    path_layers : PathLayers
        Merged paths per bucket, in mm.
    refill_data : RefillData
        Well geometry and commands.
    operations : dict[str, LayerProgram]
        Job IR per layer.
    programs : dict[str, str]
        Command text per layer.
    """

    contour_layers: ContourLayers
    path_layers: PathLayers
    refill_data: RefillData
    operations: dict[str, LayerProgram]
    programs: dict[str, str]


def order_contour_layers(contour_layers: ContourLayers, config: PlotConfig) -> None:
    """Order every bucket in place, removing duplicates first when enabled.

    With duplicate removal the bucket's contours are broken into single
    segments, deduplicated and ordered as loose segments; each survivor
    becomes a one-segment contour.  Merging rejoins touching segments.
    """
    for layer, color, weight, contours in iter_buckets(contour_layers):
        if not contours:
            continue
        if config.removes_duplicates:
            segments = [s for c in contours for s in c.segments]
            kept = deduplicate(segments, config.duplicate_tolerance)
            ordered = [Contour((s,)) for s in order_segments(kept)]
        else:
            ordered = order_contours(contours)
        contour_layers[layer][color][weight] = ordered


def build_path_layers(
    contour_layers: ContourLayers,
    config: PlotConfig,
    rng: random.Random | None = None,
) -> PathLayers:
    """Flatten ordered contours and merge touching paths, bucket by bucket.

    With duplicate removal every contour is a single open segment, so
    seams are randomised on the merged paths that close into rings.
    """
    rng = rng or random.Random(config.random_seed)
    shift_merged = config.randomize_start and config.removes_duplicates
    path_layers: PathLayers = {}
    for layer, colors in contour_layers.items():
        path_layers[layer] = {}
        for color, weights in colors.items():
            path_layers[layer][color] = {}
            for weight, contours in weights.items():
                paths = [contour_to_path(c, config, rng) for c in contours]
                merged = merge_paths(paths, config.path_tolerance)
                if shift_merged:
                    for path in merged:
                        path.shift_start(rng=rng)
                path_layers[layer][color][weight] = merged
    return path_layers


def generate_plot_data(
    root: Node,
    config: PlotConfig,
    rng: random.Random | None = None,
) -> PlotData:
    """Run the whole pipeline for one scene.

    Parameters
    ----------
    root : Node
        Scene tree in display units.
    config : PlotConfig
        Validated configuration.
    rng : random.Random, optional
        Source for seam randomisation.  Defaults to
        ``random.Random(config.random_seed)``.

    Returns
    -------
    PlotData
        Buckets, paths, well data, operations and command text.
    """
    contour_layers = group_contours(root, config)
    order_contour_layers(contour_layers, config)
    path_layers = build_path_layers(contour_layers, config, rng)

    refill_data = RefillData(config)
    operations = PlotProgramBuilder(config, refill_data).build(path_layers)
    programs = ProgramWriter(config, refill_data).generate_layers(operations)

    logger.info(
        "Generated %d layer program(s): %s",
        len(programs),
        ", ".join(
            f"{name}={sum(len(p) for _, _, _, p in iter_buckets({name: colors}))} path(s)"
            for name, colors in path_layers.items()
        ),
    )
    return PlotData(contour_layers, path_layers, refill_data, operations, programs)
