"""Tests for xyzview.utils.geometry: boundary detection and elevation inversion."""

import math

import numpy as np
import pytest

from xyzview.utils.geometry import convex_hull_2d, identify_boundary_points, invert_elevation
from xyzview.utils.points import Color, Point

HORIZONTAL_CORNERS = {(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)}


def _xy(points, indices):
    return {(points[i].x, points[i].y) for i in indices}


class TestConvexHull2D:
    def test_square_with_center(self):
        xy = np.array([[0, 0], [1, 0], [1, 1], [0, 1], [0.5, 0.5]], dtype=float)
        assert convex_hull_2d(xy) == [0, 1, 2, 3]  # counter-clockwise

    def test_collinear_edge_point_dropped(self):
        xy = np.array([[0, 0], [2, 0], [2, 2], [0, 2], [1, 0]], dtype=float)
        assert sorted(convex_hull_2d(xy)) == [0, 1, 2, 3]

    def test_collinear_only_keeps_endpoints(self):
        xy = np.array([[1, 0], [0, 0], [3, 0], [2, 0]], dtype=float)
        assert sorted(convex_hull_2d(xy)) == [1, 2]

    def test_fewer_than_three(self):
        assert convex_hull_2d(np.array([[0, 0], [1, 1]], dtype=float)) == [0, 1]
        assert convex_hull_2d(np.zeros((0, 2))) == []

    def test_single_representative_per_position(self):
        xy = np.array([[0, 0], [0, 0], [1, 0], [0, 1]], dtype=float)
        hull = convex_hull_2d(xy)
        assert len(hull) == 3
        assert {tuple(xy[i]) for i in hull} == {(0, 0), (1, 0), (0, 1)}


class TestHorizontalBoundary:
    def test_empty(self):
        assert identify_boundary_points([]) == set()

    def test_fewer_than_three_all_boundary(self):
        pts = [Point(0, 0, 0), Point(1, 1, 1)]
        assert identify_boundary_points(pts) == {0, 1}
        assert identify_boundary_points(pts[:1], "volumetric") == {0}

    def test_cube_fixture_four_horizontal_corners(self, cube_fixture):
        boundary = identify_boundary_points(cube_fixture)
        assert len(boundary) == 4
        assert boundary <= set(range(8))
        assert _xy(cube_fixture, boundary) == HORIZONTAL_CORNERS

    def test_cube_fixture_include_stacked(self, cube_fixture):
        boundary = identify_boundary_points(cube_fixture, include_stacked=True)
        assert boundary == set(range(8))

    def test_default_one_index_per_stacked_position(self, cube_fixture):
        boundary = identify_boundary_points(cube_fixture)
        positions = [(cube_fixture[i].x, cube_fixture[i].y) for i in boundary]
        assert len(positions) == len(set(positions)) == 4

    def test_z_is_ignored(self):
        pts = [Point(0, 0, 100), Point(4, 0, -50), Point(4, 4, 0), Point(0, 4, 7), Point(2, 2, 1000)]
        assert identify_boundary_points(pts, "horizontal") == {0, 1, 2, 3}

    def test_convex_polygon_vertices_roundtrip(self):
        rng = np.random.default_rng(3)
        angles = rng.permutation(np.linspace(0, 2 * math.pi, 9)[:-1])
        pts = [Point(5 * math.cos(a), 5 * math.sin(a), 0.0) for a in angles]
        assert identify_boundary_points(pts) == set(range(8))

    def test_grid_has_four_horizontal_corners(self):
        pts = [Point(x, y, z) for x in range(6) for y in range(6) for z in range(3)]
        boundary = identify_boundary_points(pts)
        assert len(boundary) == 4
        assert _xy(pts, boundary) == {(0, 0), (5, 0), (5, 5), (0, 5)}

    def test_deterministic(self, random_cloud):
        assert identify_boundary_points(random_cloud) == identify_boundary_points(random_cloud)

    def test_unknown_mode(self, cube_fixture):
        with pytest.raises(ValueError, match="Unknown boundary mode"):
            identify_boundary_points(cube_fixture, "spherical")


class TestVolumetricBoundary:
    def test_cube_fixture_eight_corners(self, cube_fixture):
        assert identify_boundary_points(cube_fixture, "volumetric") == set(range(8))

    def test_unit_cube_excludes_center(self, unit_cube_with_center):
        assert identify_boundary_points(unit_cube_with_center, "volumetric") == set(range(8))

    def test_full_grid_only_corners(self):
        pts = [Point(x, y, z) for x in range(5) for y in range(5) for z in range(5)]
        boundary = identify_boundary_points(pts, "volumetric")
        corners = {(x, y, z) for x in (0, 4) for y in (0, 4) for z in (0, 4)}
        assert {(pts[i].x, pts[i].y, pts[i].z) for i in boundary} == corners

    def test_three_points_all_boundary(self):
        pts = [Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 5)]
        assert identify_boundary_points(pts, "volumetric") == {0, 1, 2}

    def test_axis_aligned_plane(self):
        pts = [Point(x, y, 2.0) for x in range(4) for y in range(4)]
        boundary = identify_boundary_points(pts, "volumetric")
        assert {(pts[i].x, pts[i].y) for i in boundary} == {(0, 0), (3, 0), (3, 3), (0, 3)}

    def test_tilted_plane_corners_included(self):
        pts = [Point(x, y, 0.5 * x + 0.25 * y) for x in range(5) for y in range(5)]
        boundary = identify_boundary_points(pts, "volumetric")
        corners = {0, 4, 20, 24}
        assert corners <= boundary
        assert 12 not in boundary  # center of the grid

    def test_collinear(self):
        pts = [Point(t, 2 * t, 3 * t) for t in (2.0, 0.0, 3.0, 1.0)]
        assert identify_boundary_points(pts, "volumetric") == {1, 2}

    def test_coincident(self):
        pts = [Point(1, 1, 1)] * 5
        assert identify_boundary_points(pts, "volumetric") == set(range(5))

    @pytest.mark.parametrize("mode", ["horizontal", "volumetric"])
    def test_indices_in_range(self, random_cloud, mode):
        boundary = identify_boundary_points(random_cloud, mode)
        assert 0 < len(boundary) <= len(random_cloud)
        assert all(0 <= i < len(random_cloud) for i in boundary)


class TestInvertElevation:
    def test_negates_z_only(self):
        pts = [Point(1, 2, 3, Color(1, 2, 3)), Point(-1, 0, -4)]
        inv = invert_elevation(pts)
        assert inv == [Point(1, 2, -3, Color(1, 2, 3)), Point(-1, 0, 4)]

    def test_self_inverse(self, random_cloud):
        assert invert_elevation(invert_elevation(random_cloud)) == random_cloud

    def test_input_untouched(self):
        pts = [Point(0, 0, 1)]
        invert_elevation(pts)
        assert pts == [Point(0, 0, 1)]

    def test_empty(self):
        assert invert_elevation([]) == []
