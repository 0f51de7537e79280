"""py_mortarcalc exception types.

Exception Hierarchy
-------------------

Exception (built-in Python)
├── TypeError
│   └── UnitTypeError
│       └── UnitConversionError
└── ValueError
    ├── UnitAliasError
    └── MortarCalcError
        ├── InvalidGeometryError
        └── DegenerateCalibrationError

Exception Types
---------------

Unit-Related Exceptions:

- UnitTypeError: Raised when invalid unit types are passed to unit conversion functions.

- UnitConversionError: Raised when converting between incompatible unit types.

- UnitAliasError: Raised when unit alias parsing fails.

Measurement-Related Exceptions:

- MortarCalcError: Base class for measurement errors. Not raised directly.

- InvalidGeometryError: Raised for a non-positive screen resolution or a degenerate
  screen center. Contains:
  - width_px, height_px: The offending resolution (either may be None)

- DegenerateCalibrationError: Raised when the two calibration clicks coincide. Contains:
  - point1, point2: The calibration clicks
  - distance_px: The pixel distance between them

Both measurement errors are recoverable: a measurement session reports them and keeps
its previous calibration and geometry.  An unreachable target is not an error;
the solver returns a `NoSolution` value for it.
"""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from py_mortarcalc.geometry import Point2D

__all__ = (
    'UnitTypeError',
    'UnitConversionError',
    'UnitAliasError',
    'MortarCalcError',
    'InvalidGeometryError',
    'DegenerateCalibrationError',
)


class UnitTypeError(TypeError):
    """Unit type error."""


class UnitConversionError(UnitTypeError):
    """Unit conversion error."""


class UnitAliasError(ValueError):
    """Unit alias error."""


class MortarCalcError(ValueError):
    """Measurement error."""


class InvalidGeometryError(MortarCalcError):
    """Exception for unusable screen geometry.

    Contains:
    - Screen width in pixels
    - Screen height in pixels
    """

    def __init__(self,
                 width_px: Optional[float] = None,
                 height_px: Optional[float] = None,
                 note: str = ""):
        """
        Parameters:
        - width_px: The screen width
        - height_px: The screen height
        - note: Additional reason
        """
        self.width_px = width_px
        self.height_px = height_px
        msg = f"Invalid screen geometry {width_px}x{height_px}"
        if note:
            msg += f". {note}"
        super().__init__(msg)


class DegenerateCalibrationError(MortarCalcError):
    """Exception for a zero-length calibration segment.

    Contains:
    - Both calibration points
    - Pixel distance between them
    """

    def __init__(self, point1: Point2D, point2: Point2D, distance_px: float):
        self.point1 = point1
        self.point2 = point2
        self.distance_px: float = distance_px
        super().__init__(f'Calibration points ({point1.x}, {point1.y}) and ({point2.x}, {point2.y}) '
                         f'are {distance_px} px apart, scale cannot be set')
