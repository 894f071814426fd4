"""Render an extracted mesh to a PNG with matplotlib's 3-D axes.

Either loads a binary/ASCII STL written by ``python -m marchtet`` or runs
the extraction on a synthetic random grid first.

Usage::

    python scripts/preview_mesh.py mesh.stl                 # saves mesh.png
    python scripts/preview_mesh.py mesh.stl --out view.png
    python scripts/preview_mesh.py --synthetic --grid-size 12 --seed 0

Requirements: numpy, matplotlib
    pip install -e .[viz]
"""
from __future__ import annotations

import argparse
import os
import sys

# Ensure the repo root (parent of scripts/) is importable regardless of cwd
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from marchtet import (
    ExtractionConfig,
    add_random_density,
    extract_isosurface,
    generate_random_grid,
    load_stl,
)


_FACE_COLOR = np.array([1.0, 0.82, 0.2])   # warm gold
_VIEW_ELEV  = 20
_VIEW_AZIM  = 35


def _synthetic_triangles(grid_size: int, seed: int) -> np.ndarray:
    points = generate_random_grid(grid_size)
    cloud = add_random_density(points, seed=seed)
    config = ExtractionConfig.for_points(points, spacing=(1.0, 1.0, 1.0))
    triangles = extract_isosurface(cloud, config)
    return np.array(triangles, dtype=np.float64).reshape(-1, 3, 3)


def _shade(tris: np.ndarray) -> np.ndarray:
    """Flat ambient + diffuse shading from per-face normals."""
    e1    = tris[:, 1] - tris[:, 0]
    e2    = tris[:, 2] - tris[:, 0]
    norms = np.cross(e1, e2)
    nlen  = np.linalg.norm(norms, axis=1, keepdims=True)
    norms = norms / np.where(nlen > 0, nlen, 1.0)
    light = np.array([0.577, 0.577, 0.577])   # diagonal illumination
    # abs(): the soup has no consistent orientation across tetrahedra
    diffuse = np.clip(np.abs(norms @ light), 0.0, 1.0)
    shade = 0.3 + 0.7 * diffuse
    return np.outer(shade, _FACE_COLOR)


def render_mesh(tris: np.ndarray, out_path: str, title: str) -> None:
    fig = plt.figure(figsize=(6.0, 6.0), facecolor="#111111")
    ax = fig.add_subplot(1, 1, 1, projection="3d")
    ax.set_facecolor("#111111")
    ax.set_axis_off()
    ax.set_title(title, color="white", fontsize=9)

    if len(tris) == 0:
        ax.text2D(0.5, 0.5, "no surface", ha="center", va="center",
                  color="gray", transform=ax.transAxes)
    else:
        mesh = Poly3DCollection(tris, facecolors=_shade(tris), edgecolors="none")
        ax.add_collection3d(mesh)
        lo = tris.reshape(-1, 3).min(axis=0)
        hi = tris.reshape(-1, 3).max(axis=0)
        ax.set_xlim(lo[0], hi[0]); ax.set_ylim(lo[1], hi[1]); ax.set_zlim(lo[2], hi[2])
        ax.set_box_aspect(tuple(np.maximum(hi - lo, 1e-9)))
        ax.view_init(elev=_VIEW_ELEV, azim=_VIEW_AZIM)

    fig.savefig(out_path, dpi=180, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    print(f"Saved: {out_path}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a marchtet mesh to PNG.")
    parser.add_argument("mesh", nargs="?", help="STL file to render")
    parser.add_argument("--out", default=None, help="Output PNG path")
    parser.add_argument("--synthetic", action="store_true",
                        help="Extract from a random synthetic grid instead of reading MESH")
    parser.add_argument("--grid-size", type=int, default=10)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    if args.synthetic:
        tris = _synthetic_triangles(args.grid_size, args.seed)
        title = f"synthetic {args.grid_size}^3 grid, seed {args.seed}"
        out = args.out or "synthetic_mesh.png"
    elif args.mesh:
        tris = load_stl(args.mesh)
        title = os.path.basename(args.mesh)
        out = args.out or os.path.splitext(args.mesh)[0] + ".png"
    else:
        parser.error("give an STL path or --synthetic")

    render_mesh(tris, out, f"{title} ({len(tris)} triangles)")


if __name__ == "__main__":
    main()
