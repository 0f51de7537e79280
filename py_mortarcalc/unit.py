"""Display units for measurement results.

Measurements travel through the calculator as plain floats in degrees and meters.
The status texts of a session convert them into the units the user prefers, which
are picked by name or alias in `.pymc.toml` under `[pymc.preferred_units]`.

A dimension stores its value in a raw unit (radians for Angular, meters for Distance);
`<<` converts to another unit of the same dimension and `>>` gives the bare number.

Examples:
    >>> d = Distance.Meter(250)
    >>> d << Distance.Yard
    <Distance: 273.4yd (250.0)>
    >>> d >> Distance.Foot
    820.2099737532808
    >>> print(Angular.Degree(12.3456))
    12.35°
"""

from __future__ import annotations
from dataclasses import dataclass, fields, MISSING
from enum import IntEnum
from math import pi
import re
from typing import NamedTuple, Union, Optional, Tuple, Final, Mapping, Type

from typing_extensions import Self, TypeAlias, override

from py_mortarcalc.exceptions import UnitTypeError, UnitConversionError, UnitAliasError
from py_mortarcalc.logger import logger

Number: TypeAlias = Union[float, int]


class Unit(IntEnum):
    """Supported units; angular members are below 10, distance members from 10.

    Calling a member builds a measurement:

    Examples:
        >>> Unit.Degree(10)
        <Angular: 10.0° (0.1745)>
    """

    Radian = 0
    Degree = 1
    MOA = 2
    Mil = 3
    MRad = 4
    Thousandth = 5

    Inch = 10
    Foot = 11
    Yard = 12
    Meter = 17
    Kilometer = 18

    @property
    def symbol(self) -> str:
        return UnitPropsDict[self].symbol

    def __repr__(self) -> str:
        return UnitPropsDict[self].name

    def __call__(self, value: Union[Number, GenericDimension]) -> GenericDimension:
        if isinstance(value, GenericDimension):
            return value << self
        return dimension_of(self)(value, self)

    @staticmethod
    def _parse_unit(alias: str) -> Optional[Unit]:
        """Unit for a member name or alias, ignoring case, blanks and a plural `s`."""
        if not isinstance(alias, str):
            raise TypeError(f"String expected, got {type(alias)=}, {alias=}")
        key = re.sub(r"\s+", "", alias).lower()
        candidates = (key, key[:-1]) if key.endswith('s') else (key,)
        for candidate in candidates:
            for names, unit in UnitAliases.items():
                if candidate in names:
                    return unit
        return None

    @staticmethod
    def from_alias(alias: str) -> Unit:
        """Resolve `alias` to a Unit.

        Raises:
            UnitAliasError: If nothing matches.
        """
        if (unit := Unit._parse_unit(alias)) is None:
            raise UnitAliasError(f"Unsupported unit {alias=}")
        return unit


class UnitProps(NamedTuple):
    """How a unit is printed: `name`, decimal places, and suffix."""

    name: str
    accuracy: int
    symbol: str


UnitPropsDict: Mapping[Unit, UnitProps] = {
    Unit.Radian: UnitProps('radian', 6, 'rad'),
    Unit.Degree: UnitProps('degree', 2, '°'),
    Unit.MOA: UnitProps('MOA', 2, 'MOA'),
    Unit.Mil: UnitProps('mil', 1, 'mil'),
    Unit.MRad: UnitProps('mrad', 2, 'mrad'),
    Unit.Thousandth: UnitProps('thousandth', 2, 'ths'),

    Unit.Inch: UnitProps("inch", 1, "inch"),
    Unit.Foot: UnitProps("foot", 1, "ft"),
    Unit.Yard: UnitProps("yard", 1, "yd"),
    Unit.Meter: UnitProps("meter", 1, "m"),
    Unit.Kilometer: UnitProps("kilometer", 3, "km"),
}

UnitAliasesType: TypeAlias = Mapping[Tuple[str, ...], Unit]

# lowercase only, matched against normalized input
UnitAliases: UnitAliasesType = {
    ('radian', 'rad'): Unit.Radian,
    ('degree', 'deg'): Unit.Degree,
    ('moa',): Unit.MOA,
    ('mil',): Unit.Mil,
    ('mrad',): Unit.MRad,
    ('thousandth', 'ths'): Unit.Thousandth,

    ('inch', 'in'): Unit.Inch,
    ('foot', 'feet', 'ft'): Unit.Foot,
    ('yard', 'yd'): Unit.Yard,
    ('meter', 'm'): Unit.Meter,
    ('kilometer', 'km'): Unit.Kilometer,
}


class GenericDimension:
    """A value of one physical dimension, kept in the dimension's raw unit."""

    __slots__ = ('_value', '_defined_units')
    _conversion_factors: Mapping[Unit, float] = {}

    def __init__(self, value: Number, units: Unit):
        self._value: float = self.to_raw(value, units)
        self._defined_units: Unit = units

    def __str__(self) -> str:
        props = UnitPropsDict[self._defined_units]
        return f'{round(self.unit_value, props.accuracy)}{props.symbol}'

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}: {self} ({round(self._value, 4)})>'

    def __float__(self) -> float:
        return float(self._value)

    @classmethod
    def _validate_unit_type(cls, units: Unit) -> None:
        if not isinstance(units, Unit):
            raise UnitTypeError(f"{Unit.__name__} expected, got {type(units).__name__} ({units})")
        if units not in cls._conversion_factors:
            raise UnitConversionError(f'{cls.__name__}: unit {units} is not supported')

    @classmethod
    def supports(cls, units: Unit) -> bool:
        return units in cls._conversion_factors

    @classmethod
    def from_raw(cls, raw_value: float, units: Unit) -> float:
        cls._validate_unit_type(units)
        return raw_value / cls._conversion_factors[units]

    @classmethod
    def to_raw(cls, value: Number, units: Unit) -> float:
        cls._validate_unit_type(units)
        return value * cls._conversion_factors[units]

    @property
    def units(self) -> Unit:
        return self._defined_units

    @property
    def unit_value(self) -> float:
        return self.get_in(self._defined_units)

    def get_in(self, units: Unit) -> float:
        """Number in `units`.

        Raises:
            UnitConversionError: If `units` belong to another dimension.
        """
        return self.from_raw(self._value, units)

    def convert(self, units: Unit) -> Self:
        """Same measurement expressed in `units`.

        Raises:
            UnitConversionError: If `units` belong to another dimension.
        """
        return self.__class__(self.get_in(units), units)

    __rshift__ = get_in
    __lshift__ = convert


class Angular(GenericDimension):
    """Angle; raw value is radians wrapped to (-π, π]."""

    _conversion_factors = {
        Unit.Radian: 1.,
        Unit.Degree: pi / 180,
        Unit.MOA: pi / (60 * 180),
        Unit.Mil: pi / 3_200,
        Unit.MRad: 1. / 1_000,
        Unit.Thousandth: pi / 3_000,
    }

    @override
    @classmethod
    def to_raw(cls, value: Number, units: Unit) -> float:
        wrapped = (super().to_raw(value, units) + pi) % (2 * pi) - pi
        return pi if wrapped == -pi else wrapped

    Radian: Final[Unit] = Unit.Radian
    Degree: Final[Unit] = Unit.Degree
    MOA: Final[Unit] = Unit.MOA
    Mil: Final[Unit] = Unit.Mil
    MRad: Final[Unit] = Unit.MRad
    Thousandth: Final[Unit] = Unit.Thousandth


class Distance(GenericDimension):
    """Length; raw value is meters."""

    _conversion_factors = {
        Unit.Inch: 0.0254,
        Unit.Foot: 0.3048,
        Unit.Yard: 0.9144,
        Unit.Meter: 1.,
        Unit.Kilometer: 1_000.,
    }

    Inch: Final[Unit] = Unit.Inch
    Foot: Final[Unit] = Unit.Foot
    Feet: Final[Unit] = Unit.Foot
    Yard: Final[Unit] = Unit.Yard
    Meter: Final[Unit] = Unit.Meter
    Kilometer: Final[Unit] = Unit.Kilometer


def dimension_of(units: Unit) -> Type[GenericDimension]:
    """Dimension class measuring in `units`."""
    return Angular if units < Unit.Inch else Distance


@dataclass
class PreferredUnits:
    """Units of the session status texts.

    Attributes:
        angular: Elevation angle.
        distance: Horizontal distance.
        dial: Weapon range dial.

    Examples:
        >>> PreferredUnits.set(distance='yard')
        >>> PreferredUnits.restore_defaults()
    """

    angular: Unit = Unit.Degree
    distance: Unit = Unit.Meter
    dial: Unit = Unit.Meter

    @classmethod
    def restore_defaults(cls) -> None:
        for f in fields(cls):
            if f.default is not MISSING:
                setattr(cls, f.name, f.default)

    @classmethod
    def set(cls, **kwargs: Union[Unit, str]) -> None:
        """Set preferred units from Unit members or aliases.

        Unknown attributes, unknown aliases and units of the wrong dimension are
        logged as warnings and leave the current preference untouched.
        """
        for attribute, value in kwargs.items():
            dimension = _PREFERRED_DIMENSIONS.get(attribute)
            if dimension is None:
                logger.warning(f"{attribute=} not found in preferred_units")
                continue
            try:
                units = value if isinstance(value, Unit) else Unit.from_alias(value)
                dimension._validate_unit_type(units)
            except UnitTypeError as exc:
                logger.warning(f"{value=} rejected for preferred_units.{attribute}: {exc}")
            except (UnitAliasError, TypeError):
                logger.warning(f"{value=} not a member of Unit")
            else:
                setattr(cls, attribute, units)


_PREFERRED_DIMENSIONS: Mapping[str, Type[GenericDimension]] = {
    'angular': Angular,
    'distance': Distance,
    'dial': Distance,
}


__all__ = (
    'Unit',
    'GenericDimension',
    'UnitProps',
    'UnitAliases',
    'UnitPropsDict',
    'Distance',
    'Angular',
    'PreferredUnits',
    'dimension_of',
    'UnitAliasError',
    'UnitTypeError',
    'UnitConversionError',
)
