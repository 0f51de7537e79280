import pytest

from py_mortarcalc.exceptions import (DegenerateCalibrationError, InvalidGeometryError, MortarCalcError,
                                      UnitAliasError, UnitConversionError, UnitTypeError)
from py_mortarcalc.geometry import Point2D


def test_hierarchy():
    assert issubclass(InvalidGeometryError, MortarCalcError)
    assert issubclass(DegenerateCalibrationError, MortarCalcError)
    assert issubclass(MortarCalcError, ValueError)
    assert issubclass(UnitConversionError, UnitTypeError)
    assert issubclass(UnitTypeError, TypeError)
    assert issubclass(UnitAliasError, ValueError)


def test_invalid_geometry_message_and_attrs():
    err = InvalidGeometryError(0, 1080)
    assert err.width_px == 0
    assert err.height_px == 1080
    assert "0x1080" in str(err)

    err2 = InvalidGeometryError(4, 2, note="Screen center row is zero")
    assert str(err2).endswith("Screen center row is zero")


def test_degenerate_calibration_message_and_attrs():
    p = Point2D(10, 20)
    err = DegenerateCalibrationError(p, p, 0.0)
    assert err.point1 == err.point2 == p
    assert err.distance_px == 0.0
    assert "(10, 20)" in str(err)


def test_caught_as_measurement_error():
    with pytest.raises(MortarCalcError):
        raise InvalidGeometryError(-1, -1)
