"""Plot configuration: typed, frozen settings for one plot job.

Loads ``plot.yaml`` (validated against ``plot_config.v1``) into a frozen
:class:`PlotConfig`.  Cross-field rules are enforced in
``PlotConfig.__post_init__`` so configs built in code fail the same way as
configs loaded from YAML: a ``ConfigError`` is raised before any geometry
is processed.

All lengths are in **mm** except ``border``, which is in display units
(it is applied before the display scale).

Usage::

    from plot_writer.configs.loader import load_config
    cfg = load_config()                    # default path
    cfg = load_config("/custom/plot.yaml") # explicit path
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from plot_writer.geometry.primitives import BLACK, ORIGIN, Color, Point, Rectangle
from plot_writer.utils.fs import load_yaml
from plot_writer.utils.validators import PlotConfigV1

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class DrawTool(enum.Enum):
    """Drawing tool kinds, named as in the config file."""

    PEN = "Pen"
    """A pen that may optionally need swapping out or refilling."""
    DIP = "Dip"
    """A tool requiring regular dipping in one or more wells."""
    DIP_AND_STIR = "DipAndStir"
    """A tool dipped in a well whose medium needs stirring."""


class LayerPolicy(enum.Enum):
    """How a group's layer tag applies during scene traversal.

    ``PERSIST`` keeps the most recently seen tag for every later node in
    document order, including siblings outside the tagged group.
    ``SCOPED`` applies a tag to the group's own subtree only.
    """

    PERSIST = "persist"
    SCOPED = "scoped"


class AxiDrawTravel(enum.Enum):
    """XY travel limits (mm) of specific AxiDraw models."""

    V3A3 = (430.0, 297.0)   # V3/A3 and SE/A3
    V3XLX = (595.0, 218.0)
    SEA1 = (864.0, 594.0)
    SEA2 = (594.0, 432.0)

    @property
    def x(self) -> float:
        return self.value[0]

    @property
    def y(self) -> float:
        return self.value[1]


# ---------------------------------------------------------------------------
# Paper sizes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PaperSize:
    """Paper dimensions in mm (portrait: ``width <= height`` for presets)."""

    width: float
    height: float
    name: str = "Custom"

    def aspect_ratio(self) -> float:
        return self.width / self.height

    def landscape(self) -> PaperSize:
        return PaperSize(self.height, self.width, self.name)

    @classmethod
    def named(cls, name: str) -> PaperSize:
        try:
            width, height = PAPER_SIZES[name]
        except KeyError:
            raise ConfigError(
                f"Unknown paper size '{name}'. Known: {sorted(PAPER_SIZES)}"
            ) from None
        return cls(width, height, name)


PAPER_SIZES: dict[str, tuple[float, float]] = {
    # ISO
    "A0": (841.0, 1189.0),
    "A1": (594.0, 841.0),
    "A2": (420.0, 594.0),
    "A3": (297.0, 420.0),
    "A4": (210.0, 297.0),
    "A5": (148.0, 210.0),
    "A6": (105.0, 148.0),
    "A7": (74.0, 105.0),
    # Imperial
    "QUARTER_IMPERIAL": (280.0, 380.0),
    "HALF_IMPERIAL": (380.0, 560.0),
    "IMPERIAL": (560.0, 760.0),
    "SMALL_SQUARE": (150.0, 150.0),
    "MEDIUM_SQUARE": (200.0, 200.0),
    "LARGE_SQUARE": (300.0, 300.0),
    # North American letter
    "LETTER": (215.9, 279.4),
    "LEGAL": (215.9, 355.6),
    "TABLOID": (279.4, 431.8),
    # North American art
    "ART_6x8": (152.0, 205.0),
    "ART_9x12": (229.0, 305.0),
    "ART_11x14": (279.0, 356.0),
    "ART_11x15": (279.0, 381.0),
    "ART_12x12": (305.0, 305.0),
    "ART_12x16": (305.0, 406.0),
    "ART_12x18": (305.0, 457.0),
    "ART_14x17": (356.0, 432.0),
    "ART_18x24": (457.0, 610.0),
    "ART_22x30": (559.0, 762.0),
}


# ---------------------------------------------------------------------------
# Plot config
# ---------------------------------------------------------------------------


DEFAULT_OPTIONS: dict[str, int] = {
    "model": 2,
    "penlift": 3,
    "pen_pos_up": 48,
    "pen_pos_down": 33,
    "accel": 50,
    "speed_pendown": 10,
    "speed_penup": 35,
}

# AxiDraw "units 2" selects millimetres; the only unit system supported.
UNITS_OPTION = ("units", 2)


@dataclass(frozen=True)
class PlotConfig:
    """All tunables of one plot job.

    Parameters
    ----------
    tool_type : DrawTool
        Drawing tool kind.
    display_scale : float
        Display units per mm of paper.
    border : Point
        Inset of the drawing within the paper, in display units.
    path_tolerance : float
        Maximum gap (mm) between consecutive paths that are joined.
    bezier_tolerance : float
        Flatness tolerance (mm) for the adaptive curve flattener.
    step_resolution : float | None
        When set, curves are flattened at this fixed step (mm) instead.
    refill_distance : float
        Stroke length (mm) before the tool needs reloading; ``inf`` disables.
    default_options : Mapping[str, int]
        AxiDraw options written before the plot.  ``units 2`` is forced.
    refill_options : Mapping[str, int]
        Options overriding the defaults while visiting a well.
    randomize_start : bool
        Rotate the seam of closed paths to a random point.
    random_seed : int | None
        Seed for the start randomisation; ``None`` is nondeterministic.
    duplicate_tolerance : float
        Tolerance for removing overlapping segments; ``inf`` disables.
    paper_size : PaperSize
        Paper dimensions (portrait).
    palette : Mapping[Color, str]
        Color -> name.  Keys are normalised to opaque.
    paper_offset : Point
        Paper position relative to the AxiDraw home position (mm).
    paint_wells : Mapping[Color, tuple[Rectangle, ...]]
        Paint wells per color.  Keys are normalised to opaque.
    wash_wells : tuple[Rectangle, ...]
        Wash wells.
    well_padding : float
        Inset (mm) between a well's sides and its stir path.
    paint_stir_strokes, wash_stir_strokes : int
        Strokes of the stir motion in paint and wash wells.
    axidraw_travel : AxiDrawTravel
        Plotter travel envelope, used for the layout preview.
    layer_policy : LayerPolicy
        Layer tag propagation rule for scene traversal.
    decimals : int
        Coordinate precision of ``draw_path`` instructions.
    """

    tool_type: DrawTool = DrawTool.PEN
    display_scale: float = 1.0
    border: Point = ORIGIN
    path_tolerance: float = 0.1524
    bezier_tolerance: float = 0.05
    step_resolution: float | None = None
    refill_distance: float = math.inf
    default_options: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_OPTIONS))
    refill_options: Mapping[str, int] = field(default_factory=dict)
    randomize_start: bool = True
    random_seed: int | None = None
    duplicate_tolerance: float = math.inf
    paper_size: PaperSize = field(default_factory=lambda: PaperSize.named("ART_9x12"))
    palette: Mapping[Color, str] = field(default_factory=lambda: {BLACK: "black"})
    paper_offset: Point = ORIGIN
    paint_wells: Mapping[Color, tuple[Rectangle, ...]] = field(default_factory=dict)
    wash_wells: tuple[Rectangle, ...] = ()
    well_padding: float = 6.0
    paint_stir_strokes: int = 4
    wash_stir_strokes: int = 4
    axidraw_travel: AxiDrawTravel = AxiDrawTravel.V3A3
    layer_policy: LayerPolicy = LayerPolicy.PERSIST
    decimals: int = 3

    def __post_init__(self) -> None:
        palette = {color.opaque(): name for color, name in self.palette.items()}
        wells = {
            color.opaque(): tuple(rects) for color, rects in self.paint_wells.items()
        }
        options = dict(self.default_options)
        options[UNITS_OPTION[0]] = UNITS_OPTION[1]

        object.__setattr__(self, "palette", palette)
        object.__setattr__(self, "paint_wells", wells)
        object.__setattr__(self, "wash_wells", tuple(self.wash_wells))
        object.__setattr__(self, "default_options", options)
        object.__setattr__(self, "refill_options", dict(self.refill_options))

        _validate_config(self)

    # -- derived flags ------------------------------------------------------

    @property
    def requires_manual_refills(self) -> bool:
        return self.refill_distance < math.inf

    @property
    def requires_wash(self) -> bool:
        return bool(self.wash_wells) and self.requires_dipping

    @property
    def requires_stir(self) -> bool:
        return self.tool_type is DrawTool.DIP_AND_STIR

    @property
    def requires_dipping(self) -> bool:
        return self.tool_type in (DrawTool.DIP, DrawTool.DIP_AND_STIR)

    @property
    def has_refill_options(self) -> bool:
        return bool(self.refill_options)

    @property
    def removes_duplicates(self) -> bool:
        return self.duplicate_tolerance < math.inf

    # -- helpers -------------------------------------------------------------

    def to_millimetres(self, value: float) -> float:
        """Convert a display-unit length to mm, rounded to 2 decimals."""
        return round(value / self.display_scale, 2)

    def palette_name(self, color: Color) -> str:
        """Palette name of *color*, or its hex code when not in the palette."""
        opaque = color.opaque()
        return self.palette.get(opaque, opaque.to_hex())


def _validate_config(cfg: PlotConfig) -> None:
    """Cross-field validation; raises ``ConfigError`` on the first failure."""
    if cfg.display_scale <= 0:
        raise ConfigError(f"display_scale must be > 0, got {cfg.display_scale}")
    if cfg.path_tolerance < 0:
        raise ConfigError(f"path_tolerance must be >= 0, got {cfg.path_tolerance}")
    if cfg.bezier_tolerance <= 0:
        raise ConfigError(f"bezier_tolerance must be > 0, got {cfg.bezier_tolerance}")
    if cfg.step_resolution is not None and cfg.step_resolution <= 0:
        raise ConfigError(f"step_resolution must be > 0, got {cfg.step_resolution}")
    if not cfg.refill_distance > 0:
        raise ConfigError(f"refill_distance must be > 0, got {cfg.refill_distance}")
    if not cfg.duplicate_tolerance > 0:
        raise ConfigError(
            f"duplicate_tolerance must be > 0, got {cfg.duplicate_tolerance}"
        )
    if cfg.well_padding < 0:
        raise ConfigError(f"well_padding must be >= 0, got {cfg.well_padding}")
    if cfg.paint_stir_strokes < 1 or cfg.wash_stir_strokes < 1:
        raise ConfigError(
            "Stir strokes must be >= 1, got "
            f"paint={cfg.paint_stir_strokes} wash={cfg.wash_stir_strokes}"
        )
    if cfg.decimals < 0:
        raise ConfigError(f"decimals must be >= 0, got {cfg.decimals}")
    if not cfg.palette:
        raise ConfigError("palette must contain at least one color")

    if cfg.requires_dipping:
        missing = [
            name for color, name in cfg.palette.items()
            if not cfg.paint_wells.get(color)
        ]
        if missing:
            raise ConfigError(
                "Each color in the palette must have an associated well; "
                f"missing for: {', '.join(missing)}"
            )

    orphans = [key for key in cfg.refill_options if key not in cfg.default_options]
    if orphans:
        raise ConfigError(
            "Each refill option should have a corresponding default value; "
            f"no default for: {', '.join(orphans)}"
        )


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def _rects(raw: Any) -> tuple[Rectangle, ...]:
    return tuple(Rectangle(*map(float, r)) for r in raw)


def load_config(path: str | Path | None = None, **overrides: Any) -> PlotConfig:
    """Load and validate plot configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``plot.yaml``.  ``None`` loads the default shipped
        alongside this module.
    **overrides
        ``PlotConfig`` fields applied on top of the file (e.g.
        ``random_seed`` from the command line).

    Returns
    -------
    PlotConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "plot.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading plot configuration from %s", path)

    data = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    try:
        model = PlotConfigV1(**data)
    except ValueError as e:
        # pydantic.ValidationError subclasses ValueError
        raise ConfigError(f"Invalid configuration {path}: {e}") from e

    raw = model.model_dump(exclude_unset=True)
    raw.pop("schema_version", None)
    kwargs: dict[str, Any] = {}

    try:
        for key, value in raw.items():
            if value is None:
                continue
            if key == "tool_type":
                kwargs[key] = DrawTool(value)
            elif key in ("border", "paper_offset"):
                kwargs[key] = Point(float(value[0]), float(value[1]))
            elif key == "paper_size":
                kwargs[key] = (
                    PaperSize.named(value) if isinstance(value, str)
                    else PaperSize(float(value[0]), float(value[1]))
                )
            elif key == "palette":
                kwargs[key] = {Color.from_hex(c): name for c, name in value.items()}
            elif key == "paint_wells":
                kwargs[key] = {Color.from_hex(c): _rects(r) for c, r in value.items()}
            elif key == "wash_wells":
                kwargs[key] = _rects(value)
            elif key == "axidraw_travel":
                kwargs[key] = AxiDrawTravel[value]
            elif key == "layer_policy":
                kwargs[key] = LayerPolicy(value)
            else:
                kwargs[key] = value
    except ValueError as e:
        raise ConfigError(f"Invalid value in {path}: {e}") from e

    kwargs.update(overrides)
    cfg = PlotConfig(**kwargs)
    logger.debug(
        "Plot config: tool=%s refill=%s palette=%d color(s)",
        cfg.tool_type.value, cfg.refill_distance, len(cfg.palette),
    )
    return cfg
