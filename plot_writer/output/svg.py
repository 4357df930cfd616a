"""SVG previews of a plot job.

Two drawings, both in millimetre user units:

- **layout**: the plotter's travel envelope with the paint wells (filled
  with their color), wash wells (unfilled), paint stir paths (white), wash
  paths (black) and the paper outline at its offset.
- **plot**: the merged plotter paths on a landscape paper-sized canvas, one
  group per layer, stroked in the bucket color at the bucket weight.

Both are returned as strings; writing them is up to the caller.
"""

from __future__ import annotations

import re
from io import StringIO
from typing import Iterable, Sequence

import svgwrite

from plot_writer.configs.loader import PlotConfig
from plot_writer.geometry.primitives import Point
from plot_writer.program.builder import PathLayers
from plot_writer.wells import RefillData

LAYOUT_STROKE_WIDTH = 0.5


def _mm_drawing(width_mm: float, height_mm: float) -> svgwrite.Drawing:
    return svgwrite.Drawing(
        size=(f"{width_mm}mm", f"{height_mm}mm"),
        viewBox=f"0 0 {width_mm} {height_mm}",
    )


def _to_string(dwg: svgwrite.Drawing) -> str:
    s = StringIO()
    dwg.write(s, pretty=True)
    return s.getvalue()


def _svg_id(name: str) -> str:
    token = re.sub(r"[^A-Za-z0-9_.-]", "_", name)
    return f"layer_{token}"


def _add_polylines(
    dwg: svgwrite.Drawing,
    parent,
    paths: Iterable[Sequence[Point]],
    stroke: str,
    stroke_width: float,
    offset: Point = Point(0.0, 0.0),
) -> None:
    for path in paths:
        if len(path) < 2:
            continue
        parent.add(dwg.polyline(
            points=[(p.x - offset.x, p.y - offset.y) for p in path],
            stroke=stroke,
            fill="none",
            stroke_width=stroke_width,
            stroke_linecap="round",
            stroke_linejoin="round",
        ))


def layout_svg(refill_data: RefillData, config: PlotConfig) -> str:
    """Plot surface layout: wells, stir paths and paper, in plotter mm."""
    travel = config.axidraw_travel
    dwg = _mm_drawing(travel.x, travel.y)

    wells = dwg.g(id="wells", stroke="black", stroke_width=LAYOUT_STROKE_WIDTH)
    for color, rects in config.paint_wells.items():
        for rect in rects:
            wells.add(dwg.rect(
                insert=(rect.x, rect.y), size=(rect.width, rect.height),
                fill=color.to_hex(),
            ))
    for rect in config.wash_wells:
        wells.add(dwg.rect(
            insert=(rect.x, rect.y), size=(rect.width, rect.height), fill="none",
        ))
    dwg.add(wells)

    stir = dwg.g(id="stir_paths")
    for paths in refill_data.stir_paths.values():
        _add_polylines(dwg, stir, paths, "white", LAYOUT_STROKE_WIDTH)
    _add_polylines(dwg, stir, refill_data.wash_paths, "black", LAYOUT_STROKE_WIDTH)
    dwg.add(stir)

    paper = config.paper_size.landscape()
    dwg.add(dwg.rect(
        id="paper",
        insert=(config.paper_offset.x, config.paper_offset.y),
        size=(paper.width, paper.height),
        fill="none",
        stroke="black",
        stroke_width=LAYOUT_STROKE_WIDTH,
    ))
    return _to_string(dwg)


def plot_svg(path_layers: PathLayers, config: PlotConfig) -> str:
    """The plotted paths on landscape paper, relative to the paper corner."""
    paper = config.paper_size.landscape()
    dwg = _mm_drawing(paper.width, paper.height)

    for layer, colors in path_layers.items():
        group = dwg.g(id=_svg_id(layer))
        for color, weights in colors.items():
            for weight, paths in weights.items():
                _add_polylines(
                    dwg,
                    group,
                    (p.points for p in paths),
                    color.to_hex(),
                    weight / config.display_scale,
                    offset=config.paper_offset,
                )
        dwg.add(group)
    return _to_string(dwg)
