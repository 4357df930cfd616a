#!/usr/bin/env python3
"""
Plot Script.

Turn a scene file into an AxiDraw file set (one command program per layer,
a well layout preview and a plot preview).

Usage:
    python -m plot_writer.scripts.plot --scene scene.yaml
    python -m plot_writer.scripts.plot --scene scene.yaml --config plot.yaml --id portrait
    python -m plot_writer.scripts.plot --scene scene.yaml --seed 7 --dry-run

Files are written to ``<output>/<id>/``; ``--id`` defaults to the scene
file's stem.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from plot_writer.configs.loader import ConfigError, load_config
from plot_writer.output.file_set import write_file_set
from plot_writer.pipeline.job import generate_plot_data
from plot_writer.scene import load_scene
from plot_writer.utils.logging_config import push_context, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate AxiDraw plot programs from a scene",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        "-s",
        type=str,
        required=True,
        help="Scene file (scene.v1 YAML)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Plot configuration file (default: bundled plot.yaml)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="plots",
        help="Output root directory",
    )
    parser.add_argument(
        "--id",
        type=str,
        help="Job id, used as the output sub-directory",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for closed-path start randomisation",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the layer programs instead of writing files",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also log to this file (JSON lines)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level, args.log_file, json=bool(args.log_file))
    job_id = args.id or Path(args.scene).stem
    push_context(job=job_id)

    overrides = {}
    if args.seed is not None:
        overrides["random_seed"] = args.seed

    try:
        config = load_config(args.config, **overrides)
    except (ConfigError, FileNotFoundError) as e:
        logger.error("Error loading config: %s", e)
        return 1

    try:
        scene = load_scene(args.scene)
    except (ValueError, FileNotFoundError) as e:
        logger.error("Error loading scene: %s", e)
        return 1

    plot_data = generate_plot_data(scene, config)

    if args.dry_run:
        for layer, program in plot_data.programs.items():
            print(f"--- layer {layer} ---")
            print(program, end="")
        print("--- end ---")
        return 0

    out_dir = Path(args.output) / job_id
    written = write_file_set(plot_data, config, out_dir)
    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
