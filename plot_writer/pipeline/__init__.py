"""
Toolpath pipeline.

    grouping: scene -> (layer, color, weight) contour buckets
    ordering: nearest-neighbour travel minimisation
    paths: flattening to paths, merging and refill splitting
    job: end-to-end plot data generation
"""
