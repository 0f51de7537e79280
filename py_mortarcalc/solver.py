"""Closed-form range dial solver.

The weapon dial setting selects a fixed maximum-range arc.  For a target seen at
elevation `beta` and horizontal distance `L`, with maximum range `M`, the dial value is

    R = (L + tan(beta) * (M - sqrt(delta))) / (tan(beta)^2 + 1)
    delta = M^2 - 2*L*M*tan(beta) - L^2

A negative `delta` means the target lies outside the weapon envelope; the solver then
returns a `NoSolution` value instead of a number.

Examples:
    >>> solve(0.0, 250.0)
    FiringSolution(elevation_deg=0.0, horizontal_distance_m=250.0, dial_m=250.0)
    >>> bool(solve(25.0, 690.0))
    False
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from typing_extensions import Union

from py_mortarcalc.config import get_config
from py_mortarcalc.logger import logger

__all__ = (
    'DEFAULT_MAX_RANGE',
    'LEVEL_ELEVATION_TOLERANCE',
    'FiringSolution',
    'NoSolution',
    'SolverResult',
    'solve',
    'envelope_limit',
    'MortarSolver',
)

DEFAULT_MAX_RANGE: float = 700.0
LEVEL_ELEVATION_TOLERANCE: float = 0.001  # degrees


@dataclass(frozen=True)
class FiringSolution:
    """Dial setting for a reachable target.

    Attributes:
        elevation_deg: Target elevation the solution was computed for.
        horizontal_distance_m: Target horizontal distance.
        dial_m: Distance to set on the weapon dial.
    """

    elevation_deg: float
    horizontal_distance_m: float
    dial_m: float

    def __bool__(self) -> bool:
        return True

    def __float__(self) -> float:
        return self.dial_m


@dataclass(frozen=True)
class NoSolution:
    """Target outside the weapon envelope.

    Attributes:
        elevation_deg: Target elevation.
        horizontal_distance_m: Target horizontal distance.
        delta: The negative discriminant.
    """

    elevation_deg: float
    horizontal_distance_m: float
    delta: float

    def __bool__(self) -> bool:
        return False


SolverResult = Union[FiringSolution, NoSolution]


def solve(elevation_deg: float, horizontal_distance_m: float,
          max_range_m: float = DEFAULT_MAX_RANGE) -> SolverResult:
    """Dial setting for a target at `elevation_deg` and `horizontal_distance_m`.

    Args:
        elevation_deg: Target elevation in degrees; negative below the firer.
        horizontal_distance_m: Horizontal distance to target in meters.
        max_range_m: Maximum range of the weapon.

    Returns:
        FiringSolution, or NoSolution if the target is out of the weapon envelope.
    """
    if abs(elevation_deg) < LEVEL_ELEVATION_TOLERANCE:
        return FiringSolution(elevation_deg, horizontal_distance_m, float(horizontal_distance_m))

    tan_beta = math.tan(math.radians(elevation_deg))
    m = max_range_m
    ll = horizontal_distance_m
    delta = m * m - 2 * ll * m * tan_beta - ll * ll
    if delta < 0:
        logger.debug(f"No solution for {elevation_deg:.3f} deg at {ll:.1f} m, {delta=:.1f}")
        return NoSolution(elevation_deg, horizontal_distance_m, delta)

    intermediate = m - math.sqrt(delta)
    dial = (ll + tan_beta * intermediate) / (tan_beta * tan_beta + 1)
    return FiringSolution(elevation_deg, horizontal_distance_m, dial)


def envelope_limit(elevation_deg: float, max_range_m: float = DEFAULT_MAX_RANGE) -> float:
    """Largest horizontal distance reachable at `elevation_deg` (the root where delta == 0)."""
    tan_beta = math.tan(math.radians(elevation_deg))
    return max_range_m * (math.sqrt(tan_beta * tan_beta + 1) - tan_beta)


@dataclass
class MortarSolver:
    """Solver bound to one weapon's maximum range."""

    max_range_m: float = DEFAULT_MAX_RANGE

    @classmethod
    def from_config(cls) -> MortarSolver:
        return cls(get_config().max_range_m)

    def solve(self, elevation_deg: float, horizontal_distance_m: float) -> SolverResult:
        return solve(elevation_deg, horizontal_distance_m, self.max_range_m)

    def envelope_limit(self, elevation_deg: float) -> float:
        return envelope_limit(elevation_deg, self.max_range_m)
