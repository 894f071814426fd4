"""Split a voxel into six tetrahedra."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .geometry import Point
from .voxel import Voxel

__all__ = ["TETRA_CORNERS", "Tetrahedron", "split_into_tetrahedra"]

# ---------------------------------------------------------------------------
# Voxel corner indices assigned to (p0, p1, p2, p3) of each tetrahedron.
#
#   1: v3 v4 v5 v7      4: v0 v1 v3 v5
#   2: v3 v5 v6 v7      5: v1 v2 v3 v5
#   3: v0 v3 v4 v5      6: v2 v3 v5 v6
#
# Every tetrahedron contains the v3-v5 diagonal.  The p0..p3 order fixes the
# triangle winding, so rows must not be permuted.
# ---------------------------------------------------------------------------
TETRA_CORNERS: Tuple[Tuple[int, int, int, int], ...] = (
    (3, 7, 4, 5),
    (3, 7, 5, 6),
    (3, 5, 4, 0),
    (5, 1, 0, 3),
    (5, 1, 3, 2),
    (3, 5, 2, 6),
)


@dataclass(frozen=True)
class Tetrahedron:
    """Four corner points ``p0..p3`` and their index-aligned densities."""

    vertices: Tuple[Point, Point, Point, Point]
    densities: Tuple[float, float, float, float]

    def __post_init__(self) -> None:
        if len(self.vertices) != 4 or len(self.densities) != 4:
            raise ValueError(
                f"a tetrahedron needs 4 vertices and 4 densities, got "
                f"{len(self.vertices)} and {len(self.densities)}"
            )


def split_into_tetrahedra(voxel: Voxel) -> Tuple[Tetrahedron, ...]:
    """Return the six tetrahedra of *voxel*, in :data:`TETRA_CORNERS` order."""
    verts, dens = voxel.vertices, voxel.densities
    return tuple(
        Tetrahedron(
            (verts[a], verts[b], verts[c], verts[d]),
            (dens[a], dens[b], dens[c], dens[d]),
        )
        for a, b, c, d in TETRA_CORNERS
    )
