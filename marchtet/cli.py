"""Command-line entry point: point cloud in, triangle mesh out.

Usage::

    python -m marchtet points.txt mesh.ply
    python -m marchtet unused.txt mesh.stl --synthetic --grid-size 16 --seed 3
    python -m marchtet points.txt mesh.ply --voxel-size 0.5 --isovalue 0.8

The input file holds one ``x y z`` triple per line.  Each point gets a
uniform random density in ``[0, 2)``; ``--seed`` makes the run repeatable.
"""
from __future__ import annotations

import argparse
import logging
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .errors import MarchTetError
from .grid import ExtractionConfig, extract_isosurface
from .logging_config import setup_logging
from .mesh_io import save_mesh
from .pointcloud import add_random_density, generate_random_grid, load_points_txt

logger = logging.getLogger(__name__)


@contextmanager
def _timed(stage: str) -> Iterator[None]:
    start = time.perf_counter()
    yield
    logger.info("%s time: %.3f ms", stage, (time.perf_counter() - start) * 1e3)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marchtet",
        description="Extract an isosurface mesh from a point cloud with marching tetrahedra.",
    )
    parser.add_argument("input", help="text file of 'x y z' points (ignored with --synthetic)")
    parser.add_argument("output", help="output mesh path (.ply or .stl)")
    parser.add_argument("--synthetic", action="store_true",
                        help="sample a regular integer grid instead of reading INPUT")
    parser.add_argument("--grid-size", type=int, default=10,
                        help="points per axis of the synthetic grid (default: 10)")
    parser.add_argument("--isovalue", type=float, default=1.0,
                        help="density threshold of the surface (default: 1.0)")
    parser.add_argument("--voxel-size", type=float, default=None,
                        help="voxel edge length; estimated from INPUT when omitted")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the random densities")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser


def run(args: argparse.Namespace) -> int:
    with _timed("Point cloud generation"):
        if args.synthetic:
            points = generate_random_grid(args.grid_size)
        else:
            points = load_points_txt(args.input)
        cloud = add_random_density(points, seed=args.seed)
    logger.info("Number of points: %d", len(cloud))

    with _timed("Voxel size calculation"):
        if args.voxel_size is not None:
            d = args.voxel_size
            spacing = (d, d, d)
        elif args.synthetic:
            spacing = (1.0, 1.0, 1.0)
        else:
            spacing = None
        config = ExtractionConfig.for_points(cloud.points, spacing, args.isovalue)
    logger.info("Voxel size: %s", config.spacing)

    with _timed("Marching tetrahedra"):
        triangles = extract_isosurface(cloud, config)
    logger.info("Number of triangles: %d", len(triangles))

    with _timed("Mesh writing"):
        save_mesh(args.output, triangles)
    logger.info("Saved: %s", args.output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    try:
        return run(args)
    except (MarchTetError, OSError) as exc:
        logger.error("%s", exc)
        return 1
