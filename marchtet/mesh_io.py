"""Triangle-list serialization: PLY and STL writers, STL reader.

Triangles are written as an unwelded soup, three vertices per face, in
extraction order.  Normals are not computed; STL facet normals are zero.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Sequence, Union

import numpy as np

from .errors import MeshFormatError
from .geometry import Triangle
from .grid import triangles_to_arrays

__all__ = ["write_ply", "write_stl", "load_stl", "save_mesh"]

logger = logging.getLogger(__name__)

_PathLike = Union[str, Path]

# Binary STL record: 12 bytes normal + 36 bytes vertices + 2 bytes attribute.
_STL_RECORD = np.dtype([
    ("normal", "<f4", (3,)),
    ("vertices", "<f4", (3, 3)),
    ("attr", "<u2"),
])
_STL_HEADER = b"marchtet binary STL".ljust(80, b"\x00")


# ---------------------------------------------------------------------------
# PLY
# ---------------------------------------------------------------------------

def _ply_header(n_vertices: int, n_faces: int, fmt: str) -> str:
    return "\n".join([
        "ply",
        f"format {fmt} 1.0",
        "comment generated by marchtet",
        f"element vertex {n_vertices}",
        "property float x",
        "property float y",
        "property float z",
        f"element face {n_faces}",
        "property list uchar int vertex_indices",
        "end_header",
    ]) + "\n"


def write_ply(path: _PathLike, triangles: Sequence[Triangle], *, binary: bool = False) -> None:
    """Write *triangles* to a PLY file (ASCII unless *binary*)."""
    vertices, faces = triangles_to_arrays(triangles)
    path = Path(path)

    if binary:
        face_records = np.empty(len(faces), dtype=[("n", "u1"), ("idx", "<i4", (3,))])
        face_records["n"] = 3
        face_records["idx"] = faces
        with path.open("wb") as fh:
            fh.write(_ply_header(len(vertices), len(faces), "binary_little_endian").encode("ascii"))
            fh.write(vertices.astype("<f4").tobytes())
            fh.write(face_records.tobytes())
    else:
        with path.open("w") as fh:
            fh.write(_ply_header(len(vertices), len(faces), "ascii"))
            for x, y, z in vertices:
                fh.write(f"{x:.6f} {y:.6f} {z:.6f}\n")
            for a, b, c in faces:
                fh.write(f"3 {a} {b} {c}\n")

    logger.debug("Wrote %d faces to %s", len(faces), path)


# ---------------------------------------------------------------------------
# STL
# ---------------------------------------------------------------------------

def write_stl(path: _PathLike, triangles: Sequence[Triangle], *, binary: bool = True) -> None:
    """Write *triangles* to a binary (default) or ASCII STL file."""
    tris = np.array(triangles, dtype=np.float64).reshape(-1, 3, 3)
    path = Path(path)

    if binary:
        records = np.zeros(len(tris), dtype=_STL_RECORD)
        records["vertices"] = tris
        with path.open("wb") as fh:
            fh.write(_STL_HEADER)
            fh.write(struct.pack("<I", len(tris)))
            fh.write(records.tobytes())
    else:
        lines = ["solid marchtet"]
        for tri in tris:
            lines.append("  facet normal 0 0 0")
            lines.append("    outer loop")
            for x, y, z in tri:
                lines.append(f"      vertex {x:.6e} {y:.6e} {z:.6e}")
            lines.append("    endloop")
            lines.append("  endfacet")
        lines.append("endsolid marchtet")
        path.write_text("\n".join(lines) + "\n")

    logger.debug("Wrote %d facets to %s", len(tris), path)


def load_stl(path: _PathLike) -> np.ndarray:
    """Read an STL file and return its triangles as a ``(F, 3, 3)`` float64 array.

    A file is treated as binary when its size is exactly ``84 + 50 * F`` for
    the facet count ``F`` stored at offset 80, which also covers binary files
    whose header happens to start with ``solid``.

    Raises
    ------
    MeshFormatError
        On an ASCII ``vertex`` line without three numbers, or when the vertex
        count is not a multiple of three.
    """
    raw = Path(path).read_bytes()
    if len(raw) >= 84:
        count = struct.unpack_from("<I", raw, 80)[0]
        if len(raw) == 84 + 50 * count:
            if count == 0:
                return np.zeros((0, 3, 3), dtype=np.float64)
            records = np.frombuffer(raw, dtype=_STL_RECORD, count=count, offset=84)
            return records["vertices"].astype(np.float64)

    verts: list[list[float]] = []
    for lineno, line in enumerate(raw.decode("ascii", errors="replace").splitlines(), start=1):
        line = line.strip()
        if not line.startswith("vertex"):
            continue
        parts = line.split()
        if len(parts) < 4:
            raise MeshFormatError(f"{path}:{lineno}: expected 'vertex x y z', got {line!r}")
        try:
            verts.append([float(parts[1]), float(parts[2]), float(parts[3])])
        except ValueError as exc:
            raise MeshFormatError(f"{path}:{lineno}: {exc}") from exc

    if len(verts) % 3:
        raise MeshFormatError(f"{path}: {len(verts)} vertices do not form whole facets")
    return np.array(verts, dtype=np.float64).reshape(-1, 3, 3)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def save_mesh(path: _PathLike, triangles: Sequence[Triangle]) -> None:
    """Write *triangles* in the format named by the suffix of *path*.

    ``.ply`` gives ASCII PLY and ``.stl`` gives binary STL.  Parent directories
    are created as needed.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".ply", ".stl"):
        raise MeshFormatError(f"unsupported mesh format {path.suffix!r} (use .ply or .stl)")

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".ply":
        write_ply(path, triangles)
    else:
        write_stl(path, triangles)
