"""YAML schema validation for plot configs and scenes.

Provides pydantic models for the two input files:
    - Plot config schema (plot_config.v1): tool type, tolerances, AxiDraw
      options, palette, paint/wash wells, paper and plotter sizes
    - Scene schema (scene.v1): tree of groups (optional layer tag) and
      shapes (stroke color, stroke weight, contours)

These models check file *shape* (types, ranges, enumerations).  Cross-field
rules (each palette color has a well, refill options have defaults) live in
``plot_writer.configs.loader.PlotConfig`` so they also apply to configs
built in code.

Units:
    - Geometry: millimeters (mm) for config, display units for scenes
    - Color: ``#rrggbb`` hex strings, alpha in [0.0, 1.0]

Usage:
    from plot_writer.utils import validators

    cfg = validators.load_plot_config_file("plot.yaml")
    scene = validators.load_scene_file("scene.yaml")
"""

import math
import re
from pathlib import Path
from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

TOOL_TYPES = ("Pen", "Dip", "DipAndStir")
AXIDRAW_TRAVELS = ("V3A3", "V3XLX", "SEA1", "SEA2")
LAYER_POLICIES = ("persist", "scoped")


def _check_hex(v: str) -> str:
    if not HEX_COLOR.match(v.strip()):
        raise ValueError(f"Expected a '#rrggbb' color, got '{v}'")
    return v.strip()


# ============================================================================
# PLOT CONFIG SCHEMA V1
# ============================================================================

Rect = Tuple[float, float, float, float]
"""Well rectangle ``[x, y, width, height]`` in mm."""


def _check_rect(rect: Rect) -> Rect:
    if rect[2] <= 0 or rect[3] <= 0:
        raise ValueError(f"Well width and height must be > 0, got {rect}")
    return rect


class PlotConfigV1(BaseModel):
    """Plot configuration schema v1.

    Every field except ``schema`` is optional; omitted fields keep the
    ``PlotConfig`` defaults.  ``refill_distance`` and
    ``duplicate_tolerance`` accept ``null`` or ``.inf`` for "disabled".
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_version: str = Field("plot_config.v1", alias="schema", description="Schema version")
    tool_type: Optional[str] = Field(None, description="Pen, Dip or DipAndStir")
    display_scale: Optional[float] = Field(None, gt=0.0, description="Display units per mm")
    border: Optional[Tuple[float, float]] = Field(None, description="Inset border (display units)")
    path_tolerance: Optional[float] = Field(None, ge=0.0, description="Join tolerance (mm)")
    bezier_tolerance: Optional[float] = Field(None, gt=0.0, description="Flatness tolerance (mm)")
    step_resolution: Optional[float] = Field(None, gt=0.0, description="Fixed curve step (mm)")
    refill_distance: Optional[float] = Field(None, gt=0.0, description="Stroke length per refill (mm)")
    default_options: Optional[Dict[str, int]] = None
    refill_options: Optional[Dict[str, int]] = None
    randomize_start: Optional[bool] = None
    random_seed: Optional[int] = None
    duplicate_tolerance: Optional[float] = Field(None, gt=0.0, description="Dedupe tolerance (mm)")
    paper_size: Optional[Union[str, Tuple[float, float]]] = None
    paper_offset: Optional[Tuple[float, float]] = None
    palette: Optional[Dict[str, str]] = Field(None, description="Hex color -> color name")
    paint_wells: Optional[Dict[str, List[Rect]]] = Field(None, description="Hex color -> wells")
    wash_wells: Optional[List[Rect]] = None
    well_padding: Optional[float] = Field(None, ge=0.0)
    paint_stir_strokes: Optional[int] = Field(None, ge=1, le=100)
    wash_stir_strokes: Optional[int] = Field(None, ge=1, le=100)
    axidraw_travel: Optional[str] = None
    layer_policy: Optional[str] = None
    decimals: Optional[int] = Field(None, ge=0, le=10)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "plot_config.v1":
            raise ValueError(f"Expected schema 'plot_config.v1', got '{v}'")
        return v

    @field_validator('tool_type')
    @classmethod
    def validate_tool_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in TOOL_TYPES:
            raise ValueError(f"tool_type must be one of {list(TOOL_TYPES)}, got '{v}'")
        return v

    @field_validator('axidraw_travel')
    @classmethod
    def validate_travel(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in AXIDRAW_TRAVELS:
            raise ValueError(f"axidraw_travel must be one of {list(AXIDRAW_TRAVELS)}, got '{v}'")
        return v

    @field_validator('layer_policy')
    @classmethod
    def validate_layer_policy(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v.lower() not in LAYER_POLICIES:
            raise ValueError(f"layer_policy must be one of {list(LAYER_POLICIES)}, got '{v}'")
        return v if v is None else v.lower()

    @field_validator('palette')
    @classmethod
    def validate_palette(cls, v: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        if v is None:
            return v
        if not v:
            raise ValueError("palette must contain at least one color")
        return {_check_hex(color): name for color, name in v.items()}

    @field_validator('paint_wells')
    @classmethod
    def validate_paint_wells(
        cls, v: Optional[Dict[str, List[Rect]]]
    ) -> Optional[Dict[str, List[Rect]]]:
        if v is None:
            return v
        return {
            _check_hex(color): [_check_rect(r) for r in wells]
            for color, wells in v.items()
        }

    @field_validator('wash_wells')
    @classmethod
    def validate_wash_wells(cls, v: Optional[List[Rect]]) -> Optional[List[Rect]]:
        if v is None:
            return v
        return [_check_rect(r) for r in v]

    @field_validator('paper_size')
    @classmethod
    def validate_paper_size(cls, v):
        if isinstance(v, tuple) and (v[0] <= 0 or v[1] <= 0):
            raise ValueError(f"Custom paper size must be positive, got {v}")
        return v

    @field_validator('refill_distance', 'duplicate_tolerance')
    @classmethod
    def validate_not_nan(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and math.isnan(v):
            raise ValueError("Expected a number or .inf, got NaN")
        return v


# ============================================================================
# SCENE SCHEMA V1
# ============================================================================

Coord = Tuple[float, float]


class ContourV1(BaseModel):
    """One contour, given in exactly one of four forms.

    - ``points``: polyline vertices
    - ``segments``: each entry 2 (line), 3 (quadratic) or 4 (cubic) points
    - ``rect``: ``[x, y, width, height]``
    - ``circle``: ``[cx, cy, r]``
    """
    model_config = ConfigDict(extra="forbid")

    points: Optional[List[Coord]] = None
    segments: Optional[List[List[Coord]]] = None
    rect: Optional[Tuple[float, float, float, float]] = None
    circle: Optional[Tuple[float, float, float]] = None
    closed: bool = False

    @model_validator(mode='after')
    def validate_single_form(self) -> 'ContourV1':
        given = [
            name for name in ("points", "segments", "rect", "circle")
            if getattr(self, name) is not None
        ]
        if len(given) != 1:
            raise ValueError(
                f"Contour needs exactly one of points/segments/rect/circle, got {given or 'none'}"
            )
        if self.points is not None and len(self.points) < 1:
            raise ValueError("Contour 'points' must not be empty")
        if self.segments is not None:
            for i, seg in enumerate(self.segments):
                if len(seg) not in (2, 3, 4):
                    raise ValueError(
                        f"Segment {i} must have 2, 3 or 4 points, got {len(seg)}"
                    )
        if self.circle is not None and self.circle[2] <= 0:
            raise ValueError(f"Circle radius must be > 0, got {self.circle[2]}")
        return self


class ShapeNodeV1(BaseModel):
    """Leaf shape with stroke attributes."""
    model_config = ConfigDict(extra="forbid")

    type: Literal["shape"]
    stroke: Optional[str] = Field(None, description="Hex stroke color; black when omitted")
    alpha: float = Field(1.0, ge=0.0, le=1.0)
    stroke_weight: float = Field(1.0, ge=0.0)
    contours: List[ContourV1] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)

    @field_validator('stroke')
    @classmethod
    def validate_stroke(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _check_hex(v)


class GroupNodeV1(BaseModel):
    """Group node; ``layer`` tags the group with a plot layer."""
    model_config = ConfigDict(extra="forbid")

    type: Literal["group"]
    layer: Optional[str] = None
    children: List["SceneNodeV1"] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)

    @field_validator('layer')
    @classmethod
    def validate_layer(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Layer name must be non-empty")
        return v


SceneNodeV1 = Annotated[Union[GroupNodeV1, ShapeNodeV1], Field(discriminator="type")]

GroupNodeV1.model_rebuild()


class SceneV1(BaseModel):
    """Scene file schema v1: a list of top-level nodes."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_version: str = Field("scene.v1", alias="schema", description="Schema version")
    width: Optional[float] = Field(None, gt=0.0, description="Canvas width (display units)")
    height: Optional[float] = Field(None, gt=0.0, description="Canvas height (display units)")
    nodes: List[SceneNodeV1] = Field(default_factory=list)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "scene.v1":
            raise ValueError(f"Expected schema 'scene.v1', got '{v}'")
        return v


# ============================================================================
# LOADERS
# ============================================================================

def load_plot_config_file(path: Union[str, Path]) -> PlotConfigV1:
    """Load and validate a plot config YAML.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    data = fs.load_yaml(path)
    if data is None:
        raise ValueError(f"Empty plot config: {path}")
    try:
        return PlotConfigV1(**data)
    except Exception as e:
        raise ValueError(f"Plot config validation failed at {path}: {e}") from e


def load_scene_file(path: Union[str, Path]) -> SceneV1:
    """Load and validate a scene YAML.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    data = fs.load_yaml(path)
    if data is None:
        raise ValueError(f"Empty scene file: {path}")
    try:
        return SceneV1(**data)
    except Exception as e:
        raise ValueError(f"Scene validation failed at {path}: {e}") from e
