"""Plot configuration loading and validation."""

from plot_writer.configs.loader import (
    DEFAULT_OPTIONS,
    PAPER_SIZES,
    AxiDrawTravel,
    ConfigError,
    DrawTool,
    LayerPolicy,
    PaperSize,
    PlotConfig,
    load_config,
)

__all__ = [
    "DEFAULT_OPTIONS",
    "PAPER_SIZES",
    "AxiDrawTravel",
    "ConfigError",
    "DrawTool",
    "LayerPolicy",
    "PaperSize",
    "PlotConfig",
    "load_config",
]
