"""Pixel to meter scale calibration.

The player clicks both ends of a segment of known length on the in-game map grid
(100 m by default); the ratio of that length to the pixel distance between the clicks
is the scale factor used for every later distance measurement.
"""
from __future__ import annotations

from dataclasses import dataclass

from py_mortarcalc.exceptions import DegenerateCalibrationError
from py_mortarcalc.geometry import Point2D
from py_mortarcalc.logger import logger

__all__ = (
    'DEFAULT_REFERENCE_DISTANCE',
    'MIN_CALIBRATION_PIXELS',
    'Calibration',
    'compute_scale',
    'measure_distance',
)

DEFAULT_REFERENCE_DISTANCE: float = 100.0
MIN_CALIBRATION_PIXELS: float = 1e-9


def compute_scale(point1: Point2D, point2: Point2D,
                  reference_meters: float = DEFAULT_REFERENCE_DISTANCE) -> float:
    """Meters per pixel for a reference segment of `reference_meters` between two clicks.

    Args:
        point1: First end of the reference segment.
        point2: Second end of the reference segment.
        reference_meters: Real length of the segment.

    Returns:
        Scale factor in meters per pixel.

    Raises:
        DegenerateCalibrationError: If the two clicks coincide.
    """
    distance_px = point1.distance_to(point2)
    if distance_px < MIN_CALIBRATION_PIXELS:
        raise DegenerateCalibrationError(point1, point2, distance_px)
    return reference_meters / distance_px


@dataclass
class Calibration:
    """Current pixel scale.

    `scale_factor` is meaningful only while `valid` is True; both fields change together.
    """

    scale_factor: float = 0.0
    valid: bool = False

    def calibrate(self, point1: Point2D, point2: Point2D,
                  reference_meters: float = DEFAULT_REFERENCE_DISTANCE) -> float:
        """Set the scale from a reference segment.

        On DegenerateCalibrationError the previous scale and validity are kept.
        """
        scale = compute_scale(point1, point2, reference_meters)
        self.scale_factor = scale
        self.valid = True
        logger.debug(f"Scale set to {scale:.6f} m/px ({reference_meters} m reference)")
        return scale

    def invalidate(self) -> None:
        self.scale_factor = 0.0
        self.valid = False


def measure_distance(point1: Point2D, point2: Point2D, calibration: Calibration) -> float:
    """Ground distance in meters between two map clicks.

    Raises:
        ValueError: If the calibration is not valid.
    """
    if not calibration.valid:
        raise ValueError("Scale is not calibrated")
    return point1.distance_to(point2) * calibration.scale_factor
