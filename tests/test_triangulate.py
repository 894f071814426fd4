"""Tests for triangle emission."""

import numpy as np
import numpy.testing as npt
import pytest

from marchtet import Point, TableConsistencyError, Tetrahedron, Triangle, classify, emit_triangles
from marchtet.classify import EDGE_CODES, EDGES
from marchtet.triangulate import TRIANGLE_TABLE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_P = (Point(0.0, 0.0, 0.0), Point(2.0, 0.0, 0.0), Point(0.0, 2.0, 0.0), Point(0.0, 0.0, 2.0))


def _mid(i: int, j: int) -> Point:
    a, b = _P[i], _P[j]
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2, (a.z + b.z) / 2)


def _tetra(densities) -> Tetrahedron:
    return Tetrahedron(_P, tuple(float(d) for d in densities))  # type: ignore[arg-type]


def _tetra_for(pattern: int) -> Tetrahedron:
    return _tetra([0.0 if (pattern >> (3 - i)) & 1 else 2.0 for i in range(4)])


p01, p02, p03 = _mid(0, 1), _mid(0, 2), _mid(0, 3)
p12, p23, p31 = _mid(1, 2), _mid(2, 3), _mid(3, 1)


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

class TestTriangleTable:
    def test_every_classifier_code_has_an_entry(self):
        assert set(EDGE_CODES) == set(TRIANGLE_TABLE)

    def test_triangles_only_use_active_edges(self):
        for code, faces in TRIANGLE_TABLE.items():
            used = {edge for face in faces for edge in face}
            assert used == {e for e, bit in enumerate(code) if bit}

    def test_triangle_count_follows_active_edges(self):
        for code, faces in TRIANGLE_TABLE.items():
            assert len(faces) == {0: 0, 3: 1, 4: 2}[sum(code)]


# ---------------------------------------------------------------------------
# emit_triangles
# ---------------------------------------------------------------------------

class TestEmitTriangles:
    @pytest.mark.parametrize("code,expected", [
        ((0, 0, 1, 0, 1, 1), [(p03, p23, p31)]),
        ((0, 1, 0, 1, 1, 0), [(p02, p12, p23)]),
        ((0, 1, 1, 1, 0, 1), [(p02, p03, p31), (p02, p31, p12)]),
        ((1, 0, 0, 1, 0, 1), [(p01, p12, p31)]),
        ((1, 0, 1, 1, 1, 0), [(p01, p03, p23), (p01, p12, p23)]),
        ((1, 1, 0, 0, 1, 1), [(p01, p02, p31), (p02, p23, p31)]),
        ((1, 1, 1, 0, 0, 0), [(p01, p02, p03)]),
    ])
    def test_vertex_order(self, code, expected):
        pattern = EDGE_CODES.index(code)
        tris = emit_triangles(_tetra_for(pattern), code, 1.0)
        assert [tuple(t) for t in tris] == expected

    def test_no_edges_gives_nothing(self):
        assert emit_triangles(_tetra([2, 2, 2, 2]), (0, 0, 0, 0, 0, 0), 1.0) == ()

    def test_single_below_corner_scenario(self):
        tetra = _tetra([0, 2, 2, 2])
        code = classify(tetra, 1.0)
        assert code == (1, 1, 1, 0, 0, 0)
        assert emit_triangles(tetra, code, 1.0) == (Triangle(p01, p02, p03),)

    def test_interpolates_along_edges(self):
        tetra = _tetra([0.5, 2.0, 2.0, 2.0])
        (tri,) = emit_triangles(tetra, classify(tetra, 1.0), 1.0)
        # mu = (1 - 0.5) / (2 - 0.5) = 1/3 along each edge from p0
        npt.assert_allclose(tri, [[2 / 3, 0, 0], [0, 2 / 3, 0], [0, 0, 2 / 3]])

    @pytest.mark.parametrize("pattern", range(16))
    def test_vertices_lie_on_crossing_edges(self, pattern):
        tetra = _tetra_for(pattern)
        tris = emit_triangles(tetra, classify(tetra, 1.0), 1.0)
        mids = {_mid(i, j) for e, (i, j) in enumerate(EDGES) if EDGE_CODES[pattern][e]}
        for tri in tris:
            assert set(tri) <= mids

    def test_inactive_equal_density_edges_are_not_interpolated(self):
        # edges 12, 23, 31 join equal densities; only 01, 02, 03 are touched
        tetra = _tetra([0.0, 5.0, 5.0, 5.0])
        assert len(emit_triangles(tetra, classify(tetra, 1.0), 1.0)) == 1

    def test_triangles_are_not_degenerate(self):
        for pattern in range(1, 15):
            tetra = _tetra_for(pattern)
            for a, b, c in emit_triangles(tetra, classify(tetra, 1.0), 1.0):
                n = np.cross(np.subtract(b, a), np.subtract(c, a))
                assert np.linalg.norm(n) > 0

    @pytest.mark.parametrize("code", [(1, 1, 1, 1, 1, 1), (0, 0, 0, 0, 0, 1), (1, 0, 0, 0, 0, 0)])
    def test_unknown_code_is_fatal(self, code):
        with pytest.raises(TableConsistencyError):
            emit_triangles(_tetra([0, 2, 2, 2]), code, 1.0)

    def test_accepts_list_code(self):
        tris = emit_triangles(_tetra([0, 2, 2, 2]), [1, 1, 1, 0, 0, 0], 1.0)
        assert len(tris) == 1
