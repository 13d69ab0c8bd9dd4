"""
Tests for the projected (Sunday) polygon area.
"""

import logging
import math

import numpy as np
import pytest

from polyvf.area import dominant_axis, polygon_area, projected_area
from polyvf.errors import DegenerateGeometryError, InvalidInputError
from polyvf.geometry import close_polygon, polygon_normal, rectangle, regular_polygon


UNIT_SQUARES = {
    # dropped axis: (vertices counter-clockwise about +axis, unit normal)
    "z": (rectangle((0, 0, 0), (1, 0, 0), (0, 1, 0)), (0.0, 0.0, 1.0)),
    "x": (rectangle((0, 0, 0), (0, 1, 0), (0, 0, 1)), (1.0, 0.0, 0.0)),
    "y": (rectangle((0, 0, 0), (0, 0, 1), (1, 0, 0)), (0.0, 1.0, 0.0)),
}


class TestProjectedArea:

    @pytest.mark.parametrize("axis", ["x", "y", "z"])
    def test_unit_square_every_dropped_axis(self, axis):
        verts, normal = UNIT_SQUARES[axis]
        assert projected_area(close_polygon(verts), normal) == pytest.approx(1.0, rel=1e-14)

    def test_sign_follows_winding(self):
        verts, normal = UNIT_SQUARES["z"]
        reversed_verts = verts[::-1]
        assert projected_area(close_polygon(reversed_verts), normal) == pytest.approx(-1.0)
        assert projected_area(close_polygon(verts), -np.asarray(normal)) == pytest.approx(-1.0)

    def test_offset_square_plane(self):
        # square in the plane z = 5, shifted in x-y; area must not depend on position
        verts = rectangle((3.0, -2.0, 5.0), (2.0, 0.0, 0.0), (0.0, 0.5, 0.0))
        assert projected_area(close_polygon(verts), (0, 0, 1)) == pytest.approx(1.0)

    def test_triangle(self):
        tri = np.array([[0.0, 0.0, 0.0], [4.0, 0.0, 0.0], [0.0, 3.0, 0.0]])
        assert projected_area(close_polygon(tri), (0, 0, 1)) == pytest.approx(6.0)

    def test_tilted_rectangle(self):
        # 2 x 3 rectangle in a plane tilted 30 degrees about x
        c, s = math.cos(math.radians(30)), math.sin(math.radians(30))
        verts = rectangle((1.0, 1.0, 1.0), (2.0, 0.0, 0.0), (0.0, 3.0 * c, 3.0 * s))
        normal = polygon_normal(verts)
        assert dominant_axis(normal) == 2
        assert abs(projected_area(close_polygon(verts), normal)) == pytest.approx(6.0, rel=1e-13)

    def test_non_convex_l_shape(self):
        L = np.array([[0, 0, 0], [2, 0, 0], [2, 1, 0], [1, 1, 0], [1, 2, 0], [0, 2, 0]], float)
        assert projected_area(close_polygon(L), (0, 0, 1)) == pytest.approx(3.0)

    @pytest.mark.parametrize("sides", [3, 6, 119])
    def test_regular_polygon_closed_form(self, sides):
        r = 1.5
        verts = regular_polygon((0.2, -0.4, 1.0), (1.0, 2.0, 2.0), r, sides)
        exact = 0.5 * sides * r * r * math.sin(2 * math.pi / sides)
        area = projected_area(close_polygon(verts), polygon_normal(verts))
        assert area == pytest.approx(exact, rel=1e-12)

    def test_tied_normal_components_do_not_divide_by_zero(self):
        # plane x = y: normal (1, -1, 0)/sqrt(2) has equal x and y magnitudes and zero z
        n = np.array([1.0, -1.0, 0.0]) / math.sqrt(2.0)
        verts = rectangle((0, 0, 0), (1 / math.sqrt(2), 1 / math.sqrt(2), 0), (0, 0, 1))
        assert dominant_axis(n) == 0
        area = projected_area(close_polygon(verts), polygon_normal(verts))
        assert abs(area) == pytest.approx(1.0, rel=1e-13)


class TestDominantAxis:

    @pytest.mark.parametrize("normal, expected", [
        ((1, 0, 0), 0), ((0, -1, 0), 1), ((0, 0, 1), 2),
        ((0.5, 0.7, -0.2), 1), ((0.1, 0.2, -0.9), 2),
        ((1, 1, 1), 0), ((0, 1, 1), 1),
    ])
    def test_selection(self, normal, expected):
        assert dominant_axis(normal) == expected


class TestPolygonArea:

    def test_open_list_input(self):
        assert polygon_area([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]]) == pytest.approx(1.0)

    def test_magnitude_independent_of_winding(self):
        sq = [[0, 0, 0], [0, 1, 0], [1, 1, 0], [1, 0, 0]]
        assert polygon_area(sq) == pytest.approx(1.0)

    def test_degenerate_polygon(self):
        with pytest.raises(DegenerateGeometryError):
            polygon_area([[0, 0, 0], [1, 1, 1], [2, 2, 2], [3, 3, 3]])

    def test_too_few_vertices(self):
        with pytest.raises(InvalidInputError, match="at least 3 vertices"):
            polygon_area([[0, 0, 0], [1, 0, 0]])


def test_projected_area_logs_dropped_axis(caplog):
    verts, normal = UNIT_SQUARES["x"]
    with caplog.at_level(logging.DEBUG, logger="polyvf.area"):
        projected_area(close_polygon(verts), normal)
    assert any("dropped axis 0" in r.getMessage() for r in caplog.records)
