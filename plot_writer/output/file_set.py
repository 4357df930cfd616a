"""Write the file set of a plot job.

A file set is one directory holding:

    layer_<name>.txt   AxiDraw interactive command program per layer
    layout.svg         well and paper layout on the plotter bed
    plot.svg           preview of the plotted paths

All geometry is computed before the first file is written, and every file
is written atomically.
"""

from __future__ import annotations

import logging
import random
import re
from pathlib import Path
from typing import Union

from plot_writer.configs.loader import PlotConfig
from plot_writer.output.svg import layout_svg, plot_svg
from plot_writer.pipeline.job import PlotData, generate_plot_data
from plot_writer.scene import Node
from plot_writer.utils import fs

logger = logging.getLogger(__name__)

LAYOUT_FILENAME = "layout.svg"
PLOT_FILENAME = "plot.svg"

_UNSAFE_FILENAME_CHARS = re.compile(r"[\\/:]")


def layer_filename(layer: str) -> str:
    """``layer_<name>.txt``; path separators in the name become ``_``."""
    return f"layer_{_UNSAFE_FILENAME_CHARS.sub('_', layer)}.txt"


def write_file_set(
    plot_data: PlotData,
    config: PlotConfig,
    directory: Union[str, Path],
) -> list[Path]:
    """Write already generated plot data; returns the written paths."""
    out_dir = fs.ensure_dir(directory)

    layout = layout_svg(plot_data.refill_data, config)
    preview = plot_svg(plot_data.path_layers, config)

    written: list[Path] = []
    for layer, program in plot_data.programs.items():
        path = out_dir / layer_filename(layer)
        fs.atomic_write_text(path, program)
        written.append(path)
    for name, text in ((LAYOUT_FILENAME, layout), (PLOT_FILENAME, preview)):
        path = out_dir / name
        fs.atomic_write_text(path, text)
        written.append(path)

    logger.info("Wrote %d file(s) to %s", len(written), out_dir)
    return written


def save_file_set(
    root: Node,
    config: PlotConfig,
    directory: Union[str, Path],
    rng: random.Random | None = None,
) -> PlotData:
    """Generate the plot data for *root* and write its file set.

    Parameters
    ----------
    root : Node
        Scene tree.
    config : PlotConfig
        Validated configuration.
    directory : str | Path
        Output directory, created when missing.
    rng : random.Random, optional
        Seam randomisation source (see ``generate_plot_data``).

    Returns
    -------
    PlotData
        The generated data, for callers that want to inspect it.
    """
    plot_data = generate_plot_data(root, config, rng)
    write_file_set(plot_data, config, directory)
    return plot_data
