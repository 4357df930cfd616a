"""Scene tree: the drawing handed to the plot pipeline.

A scene is a tree of :class:`GroupNode` and :class:`ShapeNode`.  Groups may
carry a ``data-layer`` attribute naming the plot layer of the shapes that
follow them; shapes carry contours in display units plus their stroke
color and stroke weight.

Scenes are built in code or loaded from a ``scene.v1`` YAML file::

    schema: scene.v1
    nodes:
      - type: group
        layer: ink
        children:
          - type: shape
            stroke: "#ff0000"
            stroke_weight: 0.5
            contours:
              - points: [[0, 0], [10, 0], [10, 10]]
              - rect: [20, 20, 5, 5]
              - circle: [50, 50, 10]
              - segments: [[[0, 0], [5, 10], [10, 10], [15, 0]]]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping, Union

from plot_writer.geometry.primitives import Color, Contour, Point, Rectangle, Segment
from plot_writer.utils.validators import ContourV1, GroupNodeV1, SceneV1, load_scene_file

logger = logging.getLogger(__name__)

LAYER_ATTRIBUTE = "data-layer"

# Control-point distance for a quarter circle drawn as one cubic.
KAPPA = 0.5522847498307936


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShapeNode:
    """Leaf shape.

    ``stroke`` is ``None`` when unset; the grouper then plots it in black.
    """

    contours: tuple[Contour, ...]
    stroke: Color | None = None
    stroke_weight: float = 1.0
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GroupNode:
    """Group of nodes; ``attributes[LAYER_ATTRIBUTE]`` names a layer."""

    children: tuple[Node, ...] = ()
    attributes: Mapping[str, str] = field(default_factory=dict)

    @property
    def layer(self) -> str | None:
        return self.attributes.get(LAYER_ATTRIBUTE)


Node = Union[GroupNode, ShapeNode]


def iter_shapes(node: Node) -> Iterator[ShapeNode]:
    """All shapes below *node*, in document order."""
    if isinstance(node, ShapeNode):
        yield node
        return
    for child in node.children:
        yield from iter_shapes(child)


# ---------------------------------------------------------------------------
# Contour builders
# ---------------------------------------------------------------------------


def circle_contour(cx: float, cy: float, r: float) -> Contour:
    """Closed circle as four cubic segments, starting at the rightmost point."""
    k = KAPPA * r
    right = Point(cx + r, cy)
    bottom = Point(cx, cy + r)
    left = Point(cx - r, cy)
    top = Point(cx, cy - r)
    return Contour(
        (
            Segment(right, bottom, (Point(cx + r, cy + k), Point(cx + k, cy + r))),
            Segment(bottom, left, (Point(cx - k, cy + r), Point(cx - r, cy + k))),
            Segment(left, top, (Point(cx - r, cy - k), Point(cx - k, cy - r))),
            Segment(top, right, (Point(cx + k, cy - r), Point(cx + r, cy - k))),
        ),
        closed=True,
    )


def _segment_from_points(raw: list[tuple[float, float]]) -> Segment:
    pts = [Point(float(x), float(y)) for x, y in raw]
    if len(pts) == 2:
        return Segment(pts[0], pts[1])
    if len(pts) == 3:
        return Segment.quadratic(pts[0], pts[1], pts[2])
    return Segment(pts[0], pts[3], (pts[1], pts[2]))


def _build_contour(item: ContourV1) -> Contour:
    if item.points is not None:
        pts = [Point(float(x), float(y)) for x, y in item.points]
        if len(pts) == 1:
            # A single point plots as a dot: a zero-length curve.
            p = pts[0]
            return Contour((Segment(p, p, (p, p)),), closed=False)
        return Contour.from_points(pts, closed=item.closed)
    if item.rect is not None:
        return Rectangle(*item.rect).contour
    if item.circle is not None:
        return circle_contour(*item.circle)
    segments = tuple(_segment_from_points(s) for s in item.segments)
    return Contour(segments, closed=item.closed)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def _convert(node) -> Node:
    if isinstance(node, GroupNodeV1):
        attributes = dict(node.attributes)
        if node.layer is not None:
            attributes[LAYER_ATTRIBUTE] = node.layer
        return GroupNode(tuple(_convert(c) for c in node.children), attributes)

    stroke = None
    if node.stroke is not None:
        stroke = Color.from_hex(node.stroke, node.alpha)
    return ShapeNode(
        contours=tuple(_build_contour(c) for c in node.contours),
        stroke=stroke,
        stroke_weight=float(node.stroke_weight),
        attributes=dict(node.attributes),
    )


def scene_from_model(model: SceneV1) -> GroupNode:
    """Build the root group of a validated ``scene.v1`` model."""
    return GroupNode(tuple(_convert(n) for n in model.nodes))


def load_scene(path: str | Path) -> GroupNode:
    """Load a ``scene.v1`` YAML file into a scene tree.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the file fails schema validation or holds invalid geometry.
    """
    model = load_scene_file(path)
    root = scene_from_model(model)
    logger.info(
        "Loaded scene %s: %d shape(s)", path, sum(1 for _ in iter_shapes(root))
    )
    return root
