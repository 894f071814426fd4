"""Triangle emission for a classified tetrahedron."""

from __future__ import annotations

from typing import Dict, Tuple

from .classify import EDGES, EdgeCode
from .errors import TableConsistencyError
from .geometry import Point, Triangle, interpolate
from .tetrahedra import Tetrahedron

__all__ = ["TRIANGLE_TABLE", "emit_triangles"]

# Edge positions within an EdgeCode.
_E01, _E02, _E03, _E12, _E23, _E31 = range(6)

# ---------------------------------------------------------------------------
# Edge code -> triangles, each triangle given as three edge positions.
# Vertex order is the winding of the output mesh.
# ---------------------------------------------------------------------------
TRIANGLE_TABLE: Dict[EdgeCode, Tuple[Tuple[int, int, int], ...]] = {
    (0, 0, 0, 0, 0, 0): (),
    (0, 0, 1, 0, 1, 1): ((_E03, _E23, _E31),),
    (0, 1, 0, 1, 1, 0): ((_E02, _E12, _E23),),
    (0, 1, 1, 1, 0, 1): ((_E02, _E03, _E31), (_E02, _E31, _E12)),
    (1, 0, 0, 1, 0, 1): ((_E01, _E12, _E31),),
    (1, 0, 1, 1, 1, 0): ((_E01, _E03, _E23), (_E01, _E12, _E23)),
    (1, 1, 0, 0, 1, 1): ((_E01, _E02, _E31), (_E02, _E23, _E31)),
    (1, 1, 1, 0, 0, 0): ((_E01, _E02, _E03),),
}


def emit_triangles(
    tetra: Tetrahedron,
    code: EdgeCode,
    isovalue: float,
) -> Tuple[Triangle, ...]:
    """Build the zero, one or two triangles that *code* prescribes for *tetra*.

    Only edges flagged in *code* are interpolated.  Those edges join a corner
    below the isovalue to one that is not, so their densities always differ.

    Raises
    ------
    TableConsistencyError
        If *code* is not a key of :data:`TRIANGLE_TABLE`.
    """
    faces = TRIANGLE_TABLE.get(tuple(code))
    if faces is None:
        raise TableConsistencyError(f"edge code {code!r} has no triangulation")
    if not faces:
        return ()

    verts, dens = tetra.vertices, tetra.densities
    crossings: Dict[int, Point] = {}
    for edge, active in enumerate(code):
        if active:
            i, j = EDGES[edge]
            crossings[edge] = interpolate(verts[i], verts[j], dens[i], dens[j], isovalue)

    return tuple(Triangle(crossings[a], crossings[b], crossings[c]) for a, b, c in faces)
