"""Grid traversal: march every voxel of the bounding box and collect triangles."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from .classify import classify
from .errors import ConfigurationError
from .geometry import BoundingBox, Point, Triangle
from .pointcloud import PointCloud, bounding_box, estimate_voxel_size
from .tetrahedra import split_into_tetrahedra
from .triangulate import emit_triangles
from .voxel import DEFAULT_DENSITY, build_voxel

__all__ = [
    "ExtractionConfig",
    "grid_origins",
    "march_voxel",
    "extract_isosurface",
    "triangles_to_arrays",
]

logger = logging.getLogger(__name__)

_Spacing = Tuple[float, float, float]

# Slack, in steps, when counting steps up to the box maximum.  Matches the
# lattice tolerance of PointCloud so a maximum rounded on export still gets
# its last row of voxels.
_STEP_EPS = 1e-3


# ===========================================================================
# Configuration
# ===========================================================================

@dataclass(frozen=True)
class ExtractionConfig:
    """Everything the extraction needs besides the point cloud.

    Parameters
    ----------
    bounds:
        Box to traverse.  Voxel origins run from ``minimum - spacing`` up to
        ``maximum`` on each axis.
    spacing:
        Voxel edge lengths ``(dx, dy, dz)``, all strictly positive.
    isovalue:
        Density threshold; a corner is inside when ``density < isovalue``.
    default_density:
        Density given to voxel corners with no matching sample.
    """

    bounds: BoundingBox
    spacing: _Spacing = (1.0, 1.0, 1.0)
    isovalue: float = 1.0
    default_density: float = DEFAULT_DENSITY

    def __post_init__(self) -> None:
        if len(self.spacing) != 3:
            raise ConfigurationError(f"spacing needs 3 components, got {self.spacing!r}")
        for axis, d in zip("xyz", self.spacing):
            if not (d > 0.0 and math.isfinite(d)):
                raise ConfigurationError(f"spacing along {axis} must be positive, got {d!r}")
        lo, hi = self.bounds
        for axis, a, b in zip("xyz", lo, hi):
            if a > b:
                raise ConfigurationError(f"bounds inverted along {axis}: {a} > {b}")

    @classmethod
    def for_points(
        cls,
        points: npt.ArrayLike,
        spacing: Optional[_Spacing] = None,
        isovalue: float = 1.0,
    ) -> "ExtractionConfig":
        """Fit the bounds to *points*; estimate *spacing* from them when omitted."""
        pts = np.asarray(points, dtype=np.float64)
        bbox = bounding_box(pts)
        if spacing is None:
            spacing = estimate_voxel_size(bbox, len(pts))
        sx, sy, sz = spacing
        return cls(bbox, (float(sx), float(sy), float(sz)), isovalue)


# ===========================================================================
# Traversal
# ===========================================================================

def _axis_origins(lo: float, hi: float, d: float) -> List[float]:
    start = lo - d
    count = int(math.floor((hi - start) / d + _STEP_EPS)) + 1
    return [start + i * d for i in range(count)]


def grid_origins(config: ExtractionConfig) -> Iterator[Point]:
    """Yield voxel origins with z outermost, then y, then x.

    Origins are ``start + i * d`` rather than a running sum, so long axes do
    not drift.
    """
    (x0, y0, z0), (x1, y1, z1) = config.bounds
    dx, dy, dz = config.spacing
    xs = _axis_origins(x0, x1, dx)
    ys = _axis_origins(y0, y1, dy)
    zs = _axis_origins(z0, z1, dz)
    for z in zs:
        for y in ys:
            for x in xs:
                yield Point(x, y, z)


def march_voxel(
    pointcloud: PointCloud,
    x: float,
    y: float,
    z: float,
    config: ExtractionConfig,
) -> List[Triangle]:
    """Triangles for the single voxel at origin ``(x, y, z)``.

    Ordered by tetrahedron, then by triangle within the tetrahedron.
    """
    dx, dy, dz = config.spacing
    voxel = build_voxel(pointcloud, x, y, z, dx, dy, dz, config.default_density)

    triangles: List[Triangle] = []
    for tetra in split_into_tetrahedra(voxel):
        code = classify(tetra, config.isovalue)
        triangles.extend(emit_triangles(tetra, code, config.isovalue))
    return triangles


def extract_isosurface(pointcloud: PointCloud, config: ExtractionConfig) -> List[Triangle]:
    """Run marching tetrahedra over the whole grid described by *config*.

    Returns
    -------
    list of Triangle
        Grouped by voxel in :func:`grid_origins` order.  The result depends
        only on the inputs, so repeated calls return equal lists.

    Notes
    -----
    Corner lookup goes through :meth:`PointCloud.on_grid` keyed on the box
    minimum and the spacing, so a sample matches the corner on its lattice
    node however its coordinates were rounded on the way in.
    """
    cloud = pointcloud.on_grid(config.bounds.minimum, config.spacing)
    triangles: List[Triangle] = []
    n_voxels = 0
    for origin in grid_origins(config):
        triangles.extend(march_voxel(cloud, origin.x, origin.y, origin.z, config))
        n_voxels += 1

    logger.debug("Marched %d voxels at isovalue %g", n_voxels, config.isovalue)
    logger.info("Extracted %d triangles", len(triangles))
    return triangles


# ===========================================================================
# Array conversion
# ===========================================================================

def triangles_to_arrays(
    triangles: Sequence[Triangle],
) -> Tuple[npt.NDArray[np.float64], npt.NDArray[np.int64]]:
    """Flatten a triangle list into ``(vertices, faces)`` arrays.

    Vertices are not shared: triangle ``i`` owns vertices ``3i, 3i+1, 3i+2``.

    Returns
    -------
    vertices:
        ``(3N, 3)`` float64 coordinates.
    faces:
        ``(N, 3)`` int64 vertex indices.
    """
    n = len(triangles)
    vertices = np.array(triangles, dtype=np.float64).reshape(3 * n, 3)
    faces = np.arange(3 * n, dtype=np.int64).reshape(n, 3)
    return vertices, faces
