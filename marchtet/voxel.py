"""Voxel construction from a grid origin, a spacing and the point cloud."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .geometry import Point
from .pointcloud import PointCloud

__all__ = ["CORNER_OFFSETS", "DEFAULT_DENSITY", "Voxel", "build_voxel"]

# ---------------------------------------------------------------------------
# Corner convention v0..v7, as (x, y, z) multiples of (dx, dy, dz).
# Two squares at y and y + dy; the tetrahedron table depends on this order.
# ---------------------------------------------------------------------------
CORNER_OFFSETS: Tuple[Tuple[int, int, int], ...] = (
    (0, 0, 0),
    (1, 0, 0),
    (1, 0, 1),
    (0, 0, 1),
    (0, 1, 0),
    (1, 1, 0),
    (1, 1, 1),
    (0, 1, 1),
)

# Corners with no sample are treated as outside the surface.
DEFAULT_DENSITY = 1.0


@dataclass(frozen=True)
class Voxel:
    """Eight corner points and their index-aligned densities."""

    vertices: Tuple[Point, ...]
    densities: Tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.vertices) != 8 or len(self.densities) != 8:
            raise ValueError(
                f"a voxel needs 8 vertices and 8 densities, got "
                f"{len(self.vertices)} and {len(self.densities)}"
            )


def build_voxel(
    pointcloud: PointCloud,
    x: float,
    y: float,
    z: float,
    dx: float,
    dy: float,
    dz: float,
    default_density: float = DEFAULT_DENSITY,
) -> Voxel:
    """Build the voxel with origin ``(x, y, z)`` and edge lengths ``(dx, dy, dz)``.

    Each corner takes the density of the matching point in *pointcloud*, or
    *default_density* when the cloud has no sample there.
    """
    vertices = tuple(
        Point(x + ox * dx, y + oy * dy, z + oz * dz)
        for ox, oy, oz in CORNER_OFFSETS
    )
    densities = tuple(pointcloud.density_at(v, default_density) for v in vertices)
    return Voxel(vertices, densities)
