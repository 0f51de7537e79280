import math

import pytest

from py_mortarcalc.elevation import estimate_elevation, estimate_elevation_linear
from py_mortarcalc.exceptions import InvalidGeometryError
from py_mortarcalc.geometry import Point2D, ScreenGeometry
from tests.fixtures_and_helpers import row_for_elevation


class TestEstimateElevation:

    def test_center_is_level(self, qhd_geometry):
        assert estimate_elevation(qhd_geometry, Point2D(1280, 719)) == pytest.approx(0.0)

    def test_top_row_is_max_elevation(self, qhd_geometry):
        assert estimate_elevation(qhd_geometry, Point2D(0, 0)) == pytest.approx(qhd_geometry.max_elevation_deg)

    def test_below_center_is_negative(self, qhd_geometry):
        assert estimate_elevation(qhd_geometry, Point2D(0, 1000)) < 0

    @pytest.mark.parametrize("d", [1, 37.5, 200, 719])
    def test_antisymmetric_about_center(self, qhd_geometry, d):
        cy = qhd_geometry.center_y
        above = estimate_elevation(qhd_geometry, Point2D(100, cy - d))
        below = estimate_elevation(qhd_geometry, Point2D(100, cy + d))
        assert above == pytest.approx(-below)

    def test_column_does_not_matter(self, qhd_geometry):
        assert estimate_elevation(qhd_geometry, Point2D(0, 300)) == estimate_elevation(qhd_geometry, Point2D(2559, 300))

    @pytest.mark.parametrize("angle", [-20, -3, 5, 10, 25])
    def test_tangent_mapping(self, qhd_geometry, angle):
        y = row_for_elevation(qhd_geometry, angle)
        assert estimate_elevation(qhd_geometry, Point2D(0, y)) == pytest.approx(angle)

    def test_zero_center_row(self):
        geometry = ScreenGeometry.from_resolution(4, 2)
        assert geometry.center_y == 0
        with pytest.raises(InvalidGeometryError):
            estimate_elevation(geometry, Point2D(0, 0))


class TestLinearEstimate:

    def test_deprecated(self, qhd_geometry):
        with pytest.warns(DeprecationWarning):
            estimate_elevation_linear(qhd_geometry, Point2D(0, 0))

    def test_differs_from_tangent_off_center(self, qhd_geometry):
        point = Point2D(0, 360)
        with pytest.warns(DeprecationWarning):
            linear = estimate_elevation_linear(qhd_geometry, point)
        expected = (719 - 360) * qhd_geometry.max_elevation_deg / 719
        assert linear == pytest.approx(expected)
        assert not math.isclose(linear, estimate_elevation(qhd_geometry, point), rel_tol=1e-3)
