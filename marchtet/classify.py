"""Per-tetrahedron sign-pattern classification.

Each corner of a tetrahedron is either *below* the isovalue (inside the
surface) or not.  The four booleans form a 4-bit pattern, ``p0`` in the most
significant bit, and the pattern selects a 6-bit edge-activity code: one bit
per tetrahedron edge, set when the surface crosses that edge.

Edges are ordered ``01, 02, 03, 12, 23, 31``::

                  + p0
                 /|\\
                / | \\
               /  |  \\
              /   |   \\
             +----|----+ p1
          p3  \\   |   /
               \\  |  /
                \\ | /
                 \\|/
                  + p2

A pattern and its bitwise complement describe the same surface with inside
and outside swapped, so they share a code.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from .tetrahedra import Tetrahedron

__all__ = ["EDGES", "EdgeCode", "EDGE_CODES", "NO_EDGES", "sign_pattern", "classify"]

EdgeCode = Tuple[int, int, int, int, int, int]

#: Corner pairs for each bit of an :data:`EdgeCode`.
EDGES: Tuple[Tuple[int, int], ...] = ((0, 1), (0, 2), (0, 3), (1, 2), (2, 3), (3, 1))

NO_EDGES: EdgeCode = (0, 0, 0, 0, 0, 0)

# ---------------------------------------------------------------------------
# Indexed by the 4-bit pattern p0 p1 p2 p3.
# ---------------------------------------------------------------------------
EDGE_CODES: Tuple[EdgeCode, ...] = (
    (0, 0, 0, 0, 0, 0),  # 0000
    (0, 0, 1, 0, 1, 1),  # 0001  p3 alone
    (0, 1, 0, 1, 1, 0),  # 0010  p2 alone
    (0, 1, 1, 1, 0, 1),  # 0011  quad
    (1, 0, 0, 1, 0, 1),  # 0100  p1 alone
    (1, 0, 1, 1, 1, 0),  # 0101  quad
    (1, 1, 0, 0, 1, 1),  # 0110  quad
    (1, 1, 1, 0, 0, 0),  # 0111  p0 alone
    (1, 1, 1, 0, 0, 0),  # 1000  p0 alone
    (1, 1, 0, 0, 1, 1),  # 1001  quad
    (1, 0, 1, 1, 1, 0),  # 1010  quad
    (1, 0, 0, 1, 0, 1),  # 1011  p1 alone
    (0, 1, 1, 1, 0, 1),  # 1100  quad
    (0, 1, 0, 1, 1, 0),  # 1101  p2 alone
    (0, 0, 1, 0, 1, 1),  # 1110  p3 alone
    (0, 0, 0, 0, 0, 0),  # 1111
)


def sign_pattern(densities: Sequence[float], isovalue: float) -> int:
    """Pack ``density < isovalue`` for four corners into a 4-bit integer."""
    if len(densities) != 4:
        raise ValueError(f"expected 4 corner densities, got {len(densities)}")
    pattern = 0
    for density in densities:
        pattern = (pattern << 1) | int(density < isovalue)
    return pattern


def classify(tetra: Tetrahedron, isovalue: float) -> EdgeCode:
    """Return the edge-activity code of *tetra* at *isovalue*."""
    return EDGE_CODES[sign_pattern(tetra.densities, isovalue)]
