"""SVG previews and on-disk file sets of plot jobs."""

from plot_writer.output.file_set import save_file_set, write_file_set
from plot_writer.output.svg import layout_svg, plot_svg

__all__ = ["layout_svg", "plot_svg", "save_file_set", "write_file_set"]
