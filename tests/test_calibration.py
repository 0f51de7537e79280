import pytest

from py_mortarcalc.calibration import Calibration, compute_scale, measure_distance
from py_mortarcalc.exceptions import DegenerateCalibrationError
from py_mortarcalc.geometry import Point2D


class TestComputeScale:

    def test_hundred_pixels(self):
        assert compute_scale(Point2D(1000, 719), Point2D(1100, 719)) == pytest.approx(1.0)

    def test_diagonal_segment(self):
        assert compute_scale(Point2D(0, 0), Point2D(30, 40)) == pytest.approx(2.0)

    def test_reference_distance(self):
        assert compute_scale(Point2D(0, 0), Point2D(50, 0), reference_meters=200) == pytest.approx(4.0)

    @pytest.mark.parametrize("dx, dy", [(0, 0), (13.5, -7), (-1000, 250), (0.25, 0.75)])
    def test_translation_invariance(self, dx, dy):
        p1, p2 = Point2D(412, 88), Point2D(517.5, 140)
        expected = compute_scale(p1, p2)
        assert compute_scale(p1.translated(dx, dy), p2.translated(dx, dy)) == pytest.approx(expected)

    def test_coincident_points(self):
        p = Point2D(640, 360)
        with pytest.raises(DegenerateCalibrationError) as excinfo:
            compute_scale(p, p)
        assert excinfo.value.distance_px == 0
        assert excinfo.value.point1 == p


class TestCalibration:

    def test_initially_invalid(self):
        calibration = Calibration()
        assert not calibration.valid

    def test_calibrate_marks_valid(self):
        calibration = Calibration()
        scale = calibration.calibrate(Point2D(0, 0), Point2D(200, 0))
        assert scale == pytest.approx(0.5)
        assert calibration.valid
        assert calibration.scale_factor == pytest.approx(0.5)

    def test_degenerate_keeps_invalid(self):
        calibration = Calibration()
        with pytest.raises(DegenerateCalibrationError):
            calibration.calibrate(Point2D(5, 5), Point2D(5, 5))
        assert not calibration.valid

    def test_degenerate_keeps_previous_scale(self):
        calibration = Calibration()
        calibration.calibrate(Point2D(0, 0), Point2D(100, 0))
        with pytest.raises(DegenerateCalibrationError):
            calibration.calibrate(Point2D(5, 5), Point2D(5, 5))
        assert calibration.valid
        assert calibration.scale_factor == pytest.approx(1.0)

    def test_invalidate(self):
        calibration = Calibration()
        calibration.calibrate(Point2D(0, 0), Point2D(100, 0))
        calibration.invalidate()
        assert not calibration.valid
        assert calibration.scale_factor == 0


class TestMeasureDistance:

    def test_scaled_distance(self):
        calibration = Calibration()
        calibration.calibrate(Point2D(1000, 719), Point2D(1100, 719))
        assert measure_distance(Point2D(0, 719), Point2D(250, 719), calibration) == pytest.approx(250)

    def test_requires_valid_calibration(self):
        with pytest.raises(ValueError):
            measure_distance(Point2D(0, 0), Point2D(10, 0), Calibration())
