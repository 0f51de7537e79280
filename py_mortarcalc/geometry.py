"""Screen geometry: angular reference constants derived from the screen resolution.

The game uses a fixed horizontal field of view (Hor+), so the vertical field of view
follows from the aspect ratio:

    tan(vertical_fov / 2) = tan(horizontal_fov / 2) * height / width

The top edge of the screen is therefore `vertical_fov / 2` above the line of sight.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import NamedTuple

from py_mortarcalc.exceptions import InvalidGeometryError

__all__ = (
    'DEFAULT_HORIZONTAL_FOV',
    'Point2D',
    'ScreenGeometry',
)

DEFAULT_HORIZONTAL_FOV: float = 80.0


class Point2D(NamedTuple):
    """Pixel coordinates in screen space."""

    x: float
    y: float

    def distance_to(self, other: Point2D) -> float:
        """Euclidean distance to `other` in pixels."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def translated(self, dx: float, dy: float) -> Point2D:
        return Point2D(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class ScreenGeometry:
    """Screen resolution with its derived angular constants.

    Attributes:
        width_px: Screen width in pixels.
        height_px: Screen height in pixels.
        horizontal_fov_deg: Horizontal field of view of the game camera.
        max_elevation_deg: Elevation of the top screen edge above the line of sight.
        center_y: Pixel row of the line of sight.
    """

    width_px: float
    height_px: float
    horizontal_fov_deg: float = DEFAULT_HORIZONTAL_FOV
    max_elevation_deg: float = field(init=False)
    center_y: float = field(init=False)

    def __post_init__(self) -> None:
        if self.width_px <= 0 or self.height_px <= 0:
            raise InvalidGeometryError(self.width_px, self.height_px, "Resolution must be positive")
        half_h_fov = math.radians(self.horizontal_fov_deg) / 2
        vertical_fov = 2 * math.atan(math.tan(half_h_fov) * self.height_px / self.width_px)
        object.__setattr__(self, 'max_elevation_deg', math.degrees(vertical_fov) / 2)
        object.__setattr__(self, 'center_y', self.height_px / 2 - 1)

    @classmethod
    def from_resolution(cls, width_px: float, height_px: float,
                        horizontal_fov_deg: float = DEFAULT_HORIZONTAL_FOV) -> ScreenGeometry:
        """Build the geometry for a resolution.

        Raises:
            InvalidGeometryError: If either dimension is not positive.
        """
        return cls(width_px, height_px, horizontal_fov_deg)

    @property
    def vertical_fov_deg(self) -> float:
        return 2 * self.max_elevation_deg
