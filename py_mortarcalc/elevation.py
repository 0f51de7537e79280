"""Elevation angle of a screen click relative to the line of sight."""
import math

from deprecated import deprecated

from py_mortarcalc.exceptions import InvalidGeometryError
from py_mortarcalc.geometry import Point2D, ScreenGeometry

__all__ = ('estimate_elevation', 'estimate_elevation_linear')


def _require_center(geometry: ScreenGeometry) -> None:
    if geometry.center_y == 0:
        raise InvalidGeometryError(geometry.width_px, geometry.height_px, "Screen center row is zero")


def estimate_elevation(geometry: ScreenGeometry, point: Point2D) -> float:
    """Elevation of the clicked pixel row in degrees, positive above the screen center.

    Screen-space vertical offset is proportional to the tangent of the angle under a
    perspective projection, so the offset is scaled in tangent space and mapped back
    through arctan.

    Args:
        geometry: Screen geometry the click was made on.
        point: The clicked pixel.

    Returns:
        Elevation angle in degrees.

    Raises:
        InvalidGeometryError: If the screen center row is zero.
    """
    _require_center(geometry)
    delta_y = geometry.center_y - point.y
    tan_per_pixel = math.tan(math.radians(geometry.max_elevation_deg)) / geometry.center_y
    return math.degrees(math.atan(delta_y * tan_per_pixel))


@deprecated("Linear interpolation drifts away from the screen center, use `estimate_elevation`")
def estimate_elevation_linear(geometry: ScreenGeometry, point: Point2D) -> float:
    """Elevation by linear interpolation between the center row and the top edge."""
    _require_center(geometry)
    delta_y = geometry.center_y - point.y
    return delta_y * geometry.max_elevation_deg / geometry.center_y
