"""
Plot Writer Package.

Converts a layered vector scene into AxiDraw interactive command programs
(one per layer) plus SVG previews of the plot and of the paint/wash well
layout.

Subpackages:
    geometry: Points, segments, contours, flattening and de-duplication
    configs: Plot configuration loading and validation
    pipeline: Grouping, ordering, path merging/splitting and job assembly
    job_ir: Intermediate representation for plot program operations
    program: Emitter (operations per layer) and command-text writer
    output: SVG previews and the on-disk file set
    scripts: Command-line entry point
"""

__all__ = ["geometry", "configs", "pipeline", "job_ir", "program", "output", "scripts"]
