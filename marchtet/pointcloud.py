"""Point cloud sources and the coordinate index used for voxel corner lookup.

Points are sampled either on a synthetic integer lattice or read from a
plain-text file with one ``x y z`` triple per line.  Densities are attached
afterwards by :func:`add_random_density`.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

import numpy as np
import numpy.typing as npt

from .errors import PointCloudError
from .geometry import BoundingBox, Point

__all__ = [
    "PointCloud",
    "generate_random_grid",
    "load_points_txt",
    "add_random_density",
    "bounding_box",
    "estimate_voxel_size",
]

logger = logging.getLogger(__name__)

_Array = npt.NDArray[np.floating]
_Key = Tuple[float, float, float]
_Spacing = Tuple[float, float, float]

# Largest distance from a lattice node, in steps, that still counts as on it.
_LATTICE_TOL = 1e-3


# ===========================================================================
# Point cloud
# ===========================================================================

class PointCloud:
    """Points with index-aligned scalar densities.

    Lookup is by coordinate, under one of two keyings:

    * free (default): coordinates rounded to *decimals* places.  Good for
      ad-hoc queries on clean data; samples closer than the rounding step
      share a key.
    * lattice: with *origin* and *spacing* given, each coordinate maps to the
      nearest node index ``round((c - origin) / spacing)``.  A sample more
      than a small fraction of a step off every node is not indexed.  The
      tolerance scales with the spacing, so text exported at any precision
      still lands on its node.  :func:`~marchtet.grid.extract_isosurface`
      always looks corners up this way, via :meth:`on_grid`.

    When two samples share a key the first one wins.

    Parameters
    ----------
    points:
        ``(N, 3)`` coordinates.
    densities:
        ``(N,)`` densities; ``densities[i]`` belongs to ``points[i]``.
    decimals:
        Rounding applied to coordinates before indexing in free mode.
    origin, spacing:
        Lattice node ``(0, 0, 0)`` and step per axis.  Give both or neither.
    """

    def __init__(
        self,
        points: _Array,
        densities: _Array,
        decimals: int = 6,
        *,
        origin: Optional[Iterable[float]] = None,
        spacing: Optional[Iterable[float]] = None,
    ) -> None:
        pts = np.array(points, dtype=np.float64)
        dens = np.array(densities, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise PointCloudError(f"points must have shape (N, 3), got {pts.shape}")
        if dens.shape != (len(pts),):
            raise PointCloudError(
                f"expected {len(pts)} densities, got array of shape {dens.shape}"
            )
        if (origin is None) != (spacing is None):
            raise PointCloudError("lattice keying needs both origin and spacing")

        pts.setflags(write=False)
        dens.setflags(write=False)
        self._points = pts
        self._densities = dens
        self._decimals = decimals
        self._origin: Optional[_Key] = None
        self._spacing: Optional[_Key] = None
        if origin is not None and spacing is not None:
            ox, oy, oz = (float(c) for c in origin)
            sx, sy, sz = (float(d) for d in spacing)
            if not min(sx, sy, sz) > 0.0:
                raise PointCloudError(f"lattice spacing must be positive, got {(sx, sy, sz)}")
            self._origin = (ox, oy, oz)
            self._spacing = (sx, sy, sz)

        self._index: Dict[_Key, float] = {}
        skipped = 0
        for xyz, density in zip(pts.tolist(), dens.tolist()):
            key = self._key(xyz)
            if key is None:
                skipped += 1
                continue
            self._index.setdefault(key, density)
        if skipped:
            logger.debug("%d of %d points lie off the lattice and are not indexed",
                         skipped, len(pts))

    def _key(self, xyz: Iterable[float]) -> Optional[_Key]:
        if self._origin is None or self._spacing is None:
            x, y, z = (round(float(c), self._decimals) for c in xyz)
            return (x, y, z)

        nodes = []
        for c, o, d in zip(xyz, self._origin, self._spacing):
            q = (float(c) - o) / d
            if not math.isfinite(q):
                return None
            k = round(q)
            if abs(q - k) > _LATTICE_TOL:
                return None
            nodes.append(k)
        i, j, k = nodes
        return (i, j, k)

    def on_grid(self, origin: Iterable[float], spacing: Iterable[float]) -> "PointCloud":
        """Same samples, keyed by lattice node on the grid *origin* + ``n * spacing``.

        Returns ``self`` when already keyed on that grid.
        """
        o = tuple(float(c) for c in origin)
        d = tuple(float(c) for c in spacing)
        if self._origin == o and self._spacing == d:
            return self
        return PointCloud(self._points, self._densities, self._decimals,
                          origin=o, spacing=d)

    @property
    def points(self) -> _Array:
        return self._points

    @property
    def densities(self) -> _Array:
        return self._densities

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, point: Iterable[float]) -> bool:
        key = self._key(point)
        return key is not None and key in self._index

    def density_at(self, point: Iterable[float], default: float = 1.0) -> float:
        """Density of the sample at *point*, or *default* when none matches."""
        key = self._key(point)
        if key is None:
            return default
        return self._index.get(key, default)


# ===========================================================================
# Sources
# ===========================================================================

def generate_random_grid(size: int = 10) -> _Array:
    """Return the integer lattice ``{0, ..., size-1}^3`` as ``(size**3, 3)`` points.

    Points are ordered z-major, then y, then x.
    """
    if size < 1:
        raise PointCloudError(f"grid size must be positive, got {size}")
    axis = np.arange(size, dtype=np.float64)
    Z, Y, X = np.meshgrid(axis, axis, axis, indexing="ij")
    return np.stack([X, Y, Z], axis=-1).reshape(-1, 3)


def load_points_txt(path: Union[str, Path]) -> _Array:
    """Parse a text file of ``x y z`` lines into an ``(N, 3)`` float64 array.

    Blank lines and lines starting with ``#`` are skipped.  Extra columns
    after the third are ignored.

    Raises
    ------
    OSError
        If *path* cannot be read.
    PointCloudError
        On a line with fewer than three numeric fields, or if the file holds
        no points at all.
    """
    path = Path(path)
    text = path.read_text()

    coords: list[list[float]] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) < 3:
            raise PointCloudError(f"{path}:{lineno}: expected 'x y z', got {line!r}")
        try:
            coords.append([float(parts[0]), float(parts[1]), float(parts[2])])
        except ValueError as exc:
            raise PointCloudError(f"{path}:{lineno}: {exc}") from exc

    if not coords:
        raise PointCloudError(f"{path}: no points found")

    logger.debug("Read %d points from %s", len(coords), path)
    return np.array(coords, dtype=np.float64)


def add_random_density(
    points: _Array,
    rng: Optional[np.random.Generator] = None,
    *,
    low: float = 0.0,
    high: float = 2.0,
    seed: Optional[int] = None,
) -> PointCloud:
    """Attach uniform random densities in ``[low, high)`` to *points*.

    Pass either a ready :class:`numpy.random.Generator` or a *seed*; with
    neither the generator is seeded from OS entropy.
    """
    if rng is None:
        rng = np.random.default_rng(seed)
    pts = np.asarray(points, dtype=np.float64)
    densities = rng.uniform(low, high, size=len(pts))
    return PointCloud(pts, densities)


# ===========================================================================
# Extent and spacing
# ===========================================================================

def bounding_box(points: _Array) -> BoundingBox:
    """Scan *points* for the per-axis minimum and maximum."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.size == 0:
        raise PointCloudError("cannot compute the bounding box of an empty point set")
    lo, hi = pts.min(axis=0).tolist(), pts.max(axis=0).tolist()
    return BoundingBox(Point(*lo), Point(*hi))


def estimate_voxel_size(bbox: BoundingBox, n_points: int) -> _Spacing:
    """Derive voxel spacing from the point count and the box extent.

    Assumes the points are spread roughly evenly, about ``cbrt(n_points)``
    samples per axis, so each axis is split into ``round(cbrt(n)) - 1``
    intervals.  A flat axis gets spacing ``1.0``.
    """
    per_axis = max(int(round(n_points ** (1.0 / 3.0))) - 1, 1)
    sx, sy, sz = (
        extent / per_axis if extent > 0.0 else 1.0 for extent in bbox.extent
    )
    spacing = (sx, sy, sz)
    logger.debug("Estimated voxel spacing %s from %d points", spacing, n_points)
    return spacing
