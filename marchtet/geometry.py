"""Geometry primitives: points, triangles and edge interpolation."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from .errors import DegenerateEdgeError

__all__ = ["Point", "Triangle", "BoundingBox", "interpolate", "tetrahedron_volume"]


# ===========================================================================
# Value types
# ===========================================================================

class Point(NamedTuple):
    """A 3D coordinate.  Equality is exact, with no tolerance."""

    x: float
    y: float
    z: float


class Triangle(NamedTuple):
    """Three mesh vertices, in winding order."""

    a: Point
    b: Point
    c: Point


class BoundingBox(NamedTuple):
    """Axis-aligned box given by its ``minimum`` and ``maximum`` corners."""

    minimum: Point
    maximum: Point

    @property
    def extent(self) -> Point:
        lo, hi = self
        return Point(hi.x - lo.x, hi.y - lo.y, hi.z - lo.z)


# ===========================================================================
# Interpolation
# ===========================================================================

def interpolate(
    a: Point,
    b: Point,
    density_a: float,
    density_b: float,
    isovalue: float,
) -> Point:
    """Locate the isovalue crossing on the segment *a* → *b*.

    Computes ``mu = (isovalue - density_a) / (density_b - density_a)`` and
    returns ``a + mu * (b - a)`` per coordinate.  The endpoints are returned
    unchanged when the isovalue equals one of the densities.

    Parameters
    ----------
    a, b:
        Segment endpoints.
    density_a, density_b:
        Scalar densities sampled at *a* and *b*.
    isovalue:
        Density threshold of the surface.

    Raises
    ------
    DegenerateEdgeError
        If ``density_a == density_b``.  Edges picked by the classifier always
        straddle the isovalue, so this only fires on misuse.
    """
    if density_a == density_b:
        raise DegenerateEdgeError(
            f"cannot interpolate between equal densities ({density_a!r})"
        )
    if isovalue == density_a:
        return a
    if isovalue == density_b:
        return b

    mu = (isovalue - density_a) / (density_b - density_a)
    return Point(
        a.x + mu * (b.x - a.x),
        a.y + mu * (b.y - a.y),
        a.z + mu * (b.z - a.z),
    )


def tetrahedron_volume(p0: Point, p1: Point, p2: Point, p3: Point) -> float:
    """Unsigned volume of the tetrahedron ``p0 p1 p2 p3`` (``|det| / 6``)."""
    origin = np.asarray(p0, dtype=np.float64)
    edges = np.array([p1, p2, p3], dtype=np.float64) - origin
    return abs(float(np.linalg.det(edges))) / 6.0
