"""Screen-click measurement and range dial solver for indirect-fire weapons."""

import importlib.metadata

__version__ = importlib.metadata.version("py_mortarcalc")

# Standard library imports
import importlib.resources
import os
import sys

# Third-party imports
from typing_extensions import Dict, Optional

# Local imports
from .config import MortarConfig, basic_config as _set_config, get_config
from .logger import logger as log
from .unit import Unit, PreferredUnits

if sys.version_info[:2] < (3, 11):
    import tomli as tomllib
else:
    import tomllib


def _load_config(filepath: Optional[str] = None, suppress_warnings: bool = False) -> None:
    """Load configuration from a .pymc.toml file.

    Args:
        filepath: Path to configuration file. If None, searches for .pymc.toml or pymc.toml
        suppress_warnings: If True, suppress warning messages
    """
    def find_pymc_toml(start_dir: str = os.getcwd()) -> Optional[str]:
        """Search for .pymc.toml or pymc.toml from `start_dir` up to the filesystem root."""
        current_dir = os.path.abspath(start_dir)
        while True:
            pymc_paths = [
                os.path.join(current_dir, '.pymc.toml'),
                os.path.join(current_dir, 'pymc.toml'),
            ]
            for pymc_path in pymc_paths:
                if os.path.exists(pymc_path):
                    return os.path.abspath(pymc_path)

            parent_dir = os.path.dirname(current_dir)
            if parent_dir == current_dir:
                return None
            current_dir = parent_dir

    if filepath is None:
        if (filepath := find_pymc_toml()) is None:
            filepath = find_pymc_toml(os.path.dirname(__file__))

    if filepath is not None:
        log.debug(f"Found {os.path.basename(filepath)} at {os.path.dirname(filepath)}")

        with open(filepath, "rb") as fp:
            _config = tomllib.load(fp)

            if _pymc := _config.get('pymc'):
                values = {key: value for key, value in _pymc.items() if key in MortarConfig._fields}
                for key in _pymc:
                    if key not in MortarConfig._fields and key != 'preferred_units' and not suppress_warnings:
                        log.warning(f"Unknown config key `pymc.{key}`")
                if values:
                    _set_config(get_config()._replace(**values))
                if preferred_units := _pymc.get('preferred_units'):
                    PreferredUnits.set(**preferred_units)
                else:
                    if not suppress_warnings:
                        log.warning("Config has no `pymc.preferred_units` section")
            else:
                if not suppress_warnings:
                    log.warning("Config has no `pymc` section")

    log.debug("Calculator config and PreferredUnits load success")


def _basic_config(filename: Optional[str] = None,
                  preferred_units: Optional[Dict[str, Unit]] = None,
                  suppress_warnings: bool = False) -> None:
    """Load preferred units from file or Mapping.

    Raises:
        ValueError: If both filename and preferred_units are provided
    """
    if filename and preferred_units:
        raise ValueError("Can't use preferred_units and config file at same time")
    if not filename and preferred_units:
        PreferredUnits.set(**preferred_units)
    else:
        _load_config(filename, suppress_warnings)


def _resolve_resource_path(path: str) -> str:
    return str(importlib.resources.files('py_mortarcalc').joinpath(path))


def _load_imperial_units() -> None:
    """Load imperial unit preferences."""
    _basic_config(_resolve_resource_path('assets/.pymc-imperial.toml'), suppress_warnings=True)


def _load_metric_units() -> None:
    """Load metric unit preferences."""
    _basic_config(_resolve_resource_path('assets/.pymc-metrics.toml'), suppress_warnings=True)


loadImperialUnits = _load_imperial_units
loadMetricUnits = _load_metric_units

basicConfig = _basic_config

basicConfig()


from .calibration import Calibration, compute_scale, measure_distance
from .config import basic_config, reset_config
from .elevation import estimate_elevation, estimate_elevation_linear
from .exceptions import (UnitTypeError, UnitConversionError, UnitAliasError,
                         MortarCalcError, InvalidGeometryError, DegenerateCalibrationError)
from .geometry import Point2D, ScreenGeometry
from .logger import logger, enable_file_logging, disable_file_logging
from .session import (MeasurementState, MeasurementSession, Start, QuickMeasure, PointCaptured, Reset,
                      ResizeGeometry, PromptDismissed, ToggleListening, ShowPrompt, ClosePrompt,
                      DisplaySink, transition, run_events)
from .solver import FiringSolution, NoSolution, MortarSolver, solve, envelope_limit
from .unit import Angular, Distance, GenericDimension, UnitProps, UnitPropsDict, UnitAliases

# DRY: build __all__ from global symbols
_SKIP_GLOBALS = {
    "__name__", "__doc__", "__package__", "__loader__", "__spec__",
    "__file__", "__cached__", "__builtins__",
    "tomllib", "sys", "os", "importlib", "log", "Dict", "Optional",
    "_load_config", "_basic_config", "_resolve_resource_path",
    "_load_imperial_units", "_load_metric_units", "_set_config",
}
__all__ = [
    name for name in globals()
    if not name.startswith("_") and name not in _SKIP_GLOBALS
]
__all__.extend(["basicConfig", "loadImperialUnits", "loadMetricUnits"])
