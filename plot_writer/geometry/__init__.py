"""Geometry primitives, curve flattening and duplicate removal."""

from plot_writer.geometry.primitives import (
    BLACK,
    ORIGIN,
    WHITE,
    Color,
    Contour,
    Point,
    Rectangle,
    Segment,
)

__all__ = [
    "BLACK",
    "ORIGIN",
    "WHITE",
    "Color",
    "Contour",
    "Point",
    "Rectangle",
    "Segment",
]
