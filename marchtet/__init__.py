"""
marchtet: Marching Tetrahedra Surface Reconstruction
====================================================

Turns a sparse 3D point cloud with per-point densities into a triangle mesh
of the isosurface ``density == isovalue``.

Pipeline
--------
- Point cloud: :func:`load_points_txt` or :func:`generate_random_grid`,
  then :func:`add_random_density`
- Grid: :class:`ExtractionConfig` (bounds, voxel spacing, isovalue)
- Per voxel: :func:`build_voxel` → :func:`split_into_tetrahedra` →
  :func:`classify` → :func:`emit_triangles`
- Whole grid: :func:`extract_isosurface`
- Output: :func:`save_mesh` (``.ply`` / ``.stl``)

A point is inside the surface when its density is below the isovalue.
Voxel corners with no sample get density ``1.0``.

Quick start
-----------

::

    from marchtet import (
        ExtractionConfig, add_random_density, extract_isosurface,
        generate_random_grid, save_mesh,
    )

    points = generate_random_grid(10)
    cloud = add_random_density(points, seed=0)
    config = ExtractionConfig.for_points(points, spacing=(1.0, 1.0, 1.0))
    triangles = extract_isosurface(cloud, config)
    save_mesh("surface.ply", triangles)
"""

from .errors import (
    MarchTetError,
    PointCloudError,
    ConfigurationError,
    TableConsistencyError,
    DegenerateEdgeError,
    MeshFormatError,
)
from .geometry import Point, Triangle, BoundingBox, interpolate, tetrahedron_volume
from .pointcloud import (
    PointCloud,
    generate_random_grid,
    load_points_txt,
    add_random_density,
    bounding_box,
    estimate_voxel_size,
)
from .voxel import Voxel, build_voxel
from .tetrahedra import Tetrahedron, split_into_tetrahedra
from .classify import classify, sign_pattern
from .triangulate import emit_triangles
from .grid import (
    ExtractionConfig,
    grid_origins,
    march_voxel,
    extract_isosurface,
    triangles_to_arrays,
)
from .mesh_io import write_ply, write_stl, load_stl, save_mesh

__version__ = "0.1.0"

__all__ = [
    # Errors
    "MarchTetError",
    "PointCloudError",
    "ConfigurationError",
    "TableConsistencyError",
    "DegenerateEdgeError",
    "MeshFormatError",

    # Geometry
    "Point",
    "Triangle",
    "BoundingBox",
    "interpolate",
    "tetrahedron_volume",

    # Point cloud
    "PointCloud",
    "generate_random_grid",
    "load_points_txt",
    "add_random_density",
    "bounding_box",
    "estimate_voxel_size",

    # Marching tetrahedra
    "Voxel",
    "build_voxel",
    "Tetrahedron",
    "split_into_tetrahedra",
    "classify",
    "sign_pattern",
    "emit_triangles",

    # Grid driver
    "ExtractionConfig",
    "grid_origins",
    "march_voxel",
    "extract_isosurface",
    "triangles_to_arrays",

    # Mesh output
    "write_ply",
    "write_stl",
    "load_stl",
    "save_mesh",
]
