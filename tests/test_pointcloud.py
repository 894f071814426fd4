"""Tests for point cloud sources, lookup and extent helpers."""

import numpy as np
import numpy.testing as npt
import pytest

from marchtet import (
    BoundingBox,
    Point,
    PointCloud,
    PointCloudError,
    add_random_density,
    bounding_box,
    estimate_voxel_size,
    generate_random_grid,
    load_points_txt,
)


# ===========================================================================
# PointCloud
# ===========================================================================

class TestPointCloud:
    def test_lookup_by_index(self):
        cloud = PointCloud([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [0.1, 0.2, 0.3])
        assert cloud.density_at(Point(1.0, 0.0, 0.0)) == 0.2
        assert cloud.density_at((0, 1, 0)) == 0.3

    def test_missing_point_uses_default(self):
        cloud = PointCloud([[0, 0, 0]], [0.5])
        assert cloud.density_at(Point(9, 9, 9)) == 1.0
        assert cloud.density_at(Point(9, 9, 9), default=3.0) == 3.0

    def test_lookup_tolerates_float_round_off(self):
        cloud = PointCloud([[0.3, 0.6, 0.9]], [0.25])
        assert cloud.density_at(Point(0.1 + 0.2, 0.3 + 0.3, 0.45 * 2)) == 0.25

    def test_negative_zero_matches(self):
        cloud = PointCloud([[0.0, 0.0, 0.0]], [0.5])
        assert Point(-0.0, 0.0, -0.0) in cloud

    def test_first_duplicate_wins(self):
        cloud = PointCloud([[1, 1, 1], [1, 1, 1]], [0.1, 0.9])
        assert cloud.density_at(Point(1, 1, 1)) == 0.1

    def test_len_and_arrays(self):
        cloud = PointCloud([[0, 0, 0], [1, 2, 3]], [0.0, 1.0])
        assert len(cloud) == 2
        assert cloud.points.shape == (2, 3)
        npt.assert_array_equal(cloud.densities, [0.0, 1.0])

    def test_read_only(self):
        cloud = PointCloud([[0, 0, 0]], [0.0])
        with pytest.raises(ValueError):
            cloud.densities[0] = 5.0

    def test_rejects_bad_shape(self):
        with pytest.raises(PointCloudError):
            PointCloud([[0, 0], [1, 1]], [0.0, 1.0])

    def test_rejects_misaligned_densities(self):
        with pytest.raises(PointCloudError):
            PointCloud([[0, 0, 0], [1, 1, 1]], [0.0])


class TestLatticeKeying:
    def test_corner_across_rounding_boundary(self):
        # 0.0000015 + 0.000001 == 2.4999999999999998e-06, which rounds away
        # from the stored 2.5e-06 at six decimals
        cloud = PointCloud([[0.0000025, 0, 0]], [0.25])
        corner = Point(0.0000015 + 0.000001, 0.0, 0.0)
        on_grid = cloud.on_grid((0.0000015, 0.0, 0.0), (0.000001, 1.0, 1.0))
        assert on_grid.density_at(corner) == 0.25

    def test_close_samples_stay_distinct(self):
        cloud = PointCloud([[0, 0, 0], [1e-7, 0, 0]], [0.1, 0.9])
        on_grid = cloud.on_grid((0, 0, 0), (1e-7, 1, 1))
        assert on_grid.density_at((0, 0, 0)) == 0.1
        assert on_grid.density_at((1e-7, 0, 0)) == 0.9

    def test_seven_decimal_export_hits_every_node(self):
        lo, d = 0.1234567, 0.0137
        pts = np.array([[float(f"{lo + i * d:.7f}"), 0.0, 0.0] for i in range(50)])
        cloud = PointCloud(pts, np.arange(50, dtype=float)).on_grid((lo, 0, 0), (d, 1, 1))
        for i in range(50):
            assert cloud.density_at((lo - d + (i + 1) * d, 0.0, 0.0)) == float(i)

    def test_off_lattice_points_not_indexed(self):
        cloud = PointCloud([[0.5, 0, 0], [1, 0, 0]], [0.0, 0.3]).on_grid((0, 0, 0), (1, 1, 1))
        assert Point(0.0, 0, 0) not in cloud
        assert Point(1.0, 0, 0) in cloud
        assert cloud.density_at((0.5, 0, 0), default=7.0) == 7.0

    def test_non_finite_query_uses_default(self):
        cloud = PointCloud([[0, 0, 0]], [0.2]).on_grid((0, 0, 0), (1, 1, 1))
        assert cloud.density_at((float("nan"), 0, 0)) == 1.0

    def test_on_same_grid_returns_self(self):
        cloud = PointCloud([[0, 0, 0]], [0.2]).on_grid((0, 0, 0), (1, 1, 1))
        assert cloud.on_grid((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)) is cloud

    def test_needs_origin_and_spacing_together(self):
        with pytest.raises(PointCloudError):
            PointCloud([[0, 0, 0]], [0.2], origin=(0, 0, 0))

    def test_rejects_non_positive_spacing(self):
        with pytest.raises(PointCloudError):
            PointCloud([[0, 0, 0]], [0.2], origin=(0, 0, 0), spacing=(1, 0, 1))


# ===========================================================================
# Sources
# ===========================================================================

class TestGenerateRandomGrid:
    def test_shape(self):
        assert generate_random_grid(4).shape == (64, 3)

    def test_integer_lattice(self):
        pts = generate_random_grid(3)
        npt.assert_array_equal(np.unique(pts), [0.0, 1.0, 2.0])
        assert len({tuple(p) for p in pts}) == 27

    def test_x_fastest(self):
        pts = generate_random_grid(3)
        npt.assert_array_equal(pts[:4], [[0, 0, 0], [1, 0, 0], [2, 0, 0], [0, 1, 0]])

    def test_rejects_zero(self):
        with pytest.raises(PointCloudError):
            generate_random_grid(0)


class TestLoadPointsTxt:
    def test_parses_lines(self, tmp_path):
        f = tmp_path / "pts.txt"
        f.write_text("0 0 0\n1.5 -2 3e-1\n")
        npt.assert_allclose(load_points_txt(f), [[0, 0, 0], [1.5, -2, 0.3]])

    def test_skips_blank_and_comment_lines(self, tmp_path):
        f = tmp_path / "pts.txt"
        f.write_text("# header\n\n  1 2 3  \n\n# trailing\n")
        npt.assert_allclose(load_points_txt(str(f)), [[1, 2, 3]])

    def test_extra_columns_ignored(self, tmp_path):
        f = tmp_path / "pts.txt"
        f.write_text("1 2 3 255 0 0\n")
        npt.assert_allclose(load_points_txt(f), [[1, 2, 3]])

    def test_short_line_names_line_number(self, tmp_path):
        f = tmp_path / "pts.txt"
        f.write_text("0 0 0\n1 2\n")
        with pytest.raises(PointCloudError, match=":2:"):
            load_points_txt(f)

    def test_non_numeric(self, tmp_path):
        f = tmp_path / "pts.txt"
        f.write_text("0 0 zero\n")
        with pytest.raises(PointCloudError):
            load_points_txt(f)

    def test_empty_file(self, tmp_path):
        f = tmp_path / "pts.txt"
        f.write_text("# nothing\n")
        with pytest.raises(PointCloudError):
            load_points_txt(f)

    def test_missing_file_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            load_points_txt(tmp_path / "absent.txt")


class TestAddRandomDensity:
    def test_range(self):
        cloud = add_random_density(generate_random_grid(5), seed=1)
        assert len(cloud) == 125
        assert cloud.densities.min() >= 0.0
        assert cloud.densities.max() < 2.0

    def test_seed_repeatable(self):
        pts = generate_random_grid(3)
        a = add_random_density(pts, seed=5)
        b = add_random_density(pts, seed=5)
        npt.assert_array_equal(a.densities, b.densities)

    def test_explicit_generator_and_bounds(self):
        rng = np.random.default_rng(0)
        cloud = add_random_density(generate_random_grid(2), rng, low=10.0, high=11.0)
        assert ((cloud.densities >= 10.0) & (cloud.densities < 11.0)).all()

    def test_points_unchanged(self):
        pts = generate_random_grid(2)
        npt.assert_array_equal(add_random_density(pts, seed=0).points, pts)


# ===========================================================================
# Extent and spacing
# ===========================================================================

class TestBoundingBox:
    def test_scan(self):
        box = bounding_box(np.array([[1, -2, 3], [-1, 5, 0], [0, 0, 7]], dtype=float))
        assert box == BoundingBox(Point(-1, -2, 0), Point(1, 5, 7))

    def test_returns_python_floats(self):
        box = bounding_box(generate_random_grid(2))
        assert all(type(c) is float for c in box.minimum)

    def test_empty(self):
        with pytest.raises(PointCloudError):
            bounding_box(np.zeros((0, 3)))


class TestEstimateVoxelSize:
    def test_regular_lattice_recovers_step(self):
        pts = generate_random_grid(10) * 0.5
        npt.assert_allclose(estimate_voxel_size(bounding_box(pts), len(pts)), (0.5, 0.5, 0.5))

    def test_anisotropic_extent(self):
        box = BoundingBox(Point(0, 0, 0), Point(8, 4, 2))
        npt.assert_allclose(estimate_voxel_size(box, 125), (2.0, 1.0, 0.5))

    def test_flat_axis_gets_unit_spacing(self):
        box = BoundingBox(Point(0, 0, 0), Point(3, 3, 0))
        assert estimate_voxel_size(box, 64)[2] == 1.0

    def test_single_point(self):
        box = BoundingBox(Point(1, 1, 1), Point(1, 1, 1))
        assert estimate_voxel_size(box, 1) == (1.0, 1.0, 1.0)
