"""Exception hierarchy for marchtet.

Every error raised deliberately by the library derives from
:class:`MarchTetError`, and also from the closest builtin so callers that
already catch ``ValueError`` or ``ZeroDivisionError`` keep working.
"""

from __future__ import annotations

__all__ = [
    "MarchTetError",
    "PointCloudError",
    "ConfigurationError",
    "TableConsistencyError",
    "DegenerateEdgeError",
    "MeshFormatError",
]


class MarchTetError(Exception):
    """Base class for all marchtet errors."""


class PointCloudError(MarchTetError, ValueError):
    """Point cloud input is malformed, empty or misaligned."""


class ConfigurationError(MarchTetError, ValueError):
    """Extraction parameters are invalid (non-positive spacing, inverted bounds)."""


class TableConsistencyError(MarchTetError, RuntimeError):
    """The classifier and triangulator lookup tables disagree.

    Raised for an edge-activity code that no triangulation entry covers.
    It is never recoverable.
    """


class DegenerateEdgeError(MarchTetError, ZeroDivisionError):
    """Interpolation requested along an edge whose two densities are equal."""


class MeshFormatError(MarchTetError, ValueError):
    """Mesh path has a suffix no writer handles, or an STL file is malformed."""
