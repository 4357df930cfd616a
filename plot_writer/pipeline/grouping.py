"""Group scene contours by layer, stroke color and stroke weight.

The result is a nested, insertion-ordered mapping::

    {layer: {color: {weight: [Contour, ...]}}}

First-seen order at every level is the emission order of the plot program.
Colors are opaque (alpha dropped) and contours are transformed from display
units to plotter millimetres on the way in.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from plot_writer.configs.loader import LayerPolicy, PlotConfig
from plot_writer.geometry.primitives import BLACK, Color, Contour, Point
from plot_writer.scene import GroupNode, Node, ShapeNode

logger = logging.getLogger(__name__)

DEFAULT_LAYER_NAME = "default"

WeightBuckets = Dict[float, List[Contour]]
ColorBuckets = Dict[Color, WeightBuckets]
ContourLayers = Dict[str, ColorBuckets]


def effective_color(stroke: Color | None) -> Color:
    """Stroke color used for bucketing: black when unset, always opaque."""
    return (stroke or BLACK).opaque()


def transform_point(point: Point, config: PlotConfig) -> Point:
    """Display units -> plotter mm: ``paper_offset + (p + border) / scale``."""
    scale = config.display_scale
    return Point(
        config.paper_offset.x + (point.x + config.border.x) / scale,
        config.paper_offset.y + (point.y + config.border.y) / scale,
    )


def transform_contours(shape: ShapeNode, config: PlotConfig) -> list[Contour]:
    return [c.map_points(lambda p: transform_point(p, config)) for c in shape.contours]


def group_contours(root: Node, config: PlotConfig) -> ContourLayers:
    """Walk *root* in document order and bucket every shape's contours.

    Parameters
    ----------
    root : Node
        Scene tree.
    config : PlotConfig
        Supplies the coordinate transform and the layer policy.

    Returns
    -------
    ContourLayers
        Always contains the default layer, even when it stays empty.

    Notes
    -----
    Under ``LayerPolicy.PERSIST`` a group's layer tag stays current for
    every node visited after it, including later siblings of the tagged
    group.  Under ``LayerPolicy.SCOPED`` the tag applies to the group's own
    subtree only.
    """
    layers: ContourLayers = {DEFAULT_LAYER_NAME: {}}
    persist = config.layer_policy is LayerPolicy.PERSIST

    def bucket(layer: str, color: Color, weight: float) -> list[Contour]:
        return (
            layers.setdefault(layer, {})
            .setdefault(color, {})
            .setdefault(weight, [])
        )

    def visit(node: Node, layer: str) -> str:
        if isinstance(node, ShapeNode):
            color = effective_color(node.stroke)
            bucket(layer, color, node.stroke_weight).extend(
                transform_contours(node, config)
            )
            return layer

        current = node.layer if node.layer is not None else layer
        if node.layer is not None:
            layers.setdefault(current, {})
        for child in node.children:
            current = visit(child, current)
        return current if persist else layer

    visit(root, DEFAULT_LAYER_NAME)

    logger.debug(
        "Grouped contours into %d layer(s): %s",
        len(layers),
        ", ".join(
            f"{name}={sum(len(c) for w in colors.values() for c in w.values())}"
            for name, colors in layers.items()
        ),
    )
    return layers


def iter_buckets(layers: Dict[str, Dict[Color, Dict[float, list]]]):
    """Yield ``(layer, color, weight, items)`` in emission order."""
    for layer, colors in layers.items():
        for color, weights in colors.items():
            for weight, items in weights.items():
                yield layer, color, weight, items
