"""Global configuration of the py_mortarcalc library"""
from typing import NamedTuple

__all__ = ('MortarConfig', 'basic_config', 'get_config', 'reset_config')


class MortarConfig(NamedTuple):
    horizontal_fov_deg: float = 80.0
    max_range_m: float = 700.0
    reference_distance_m: float = 100.0
    result_auto_close_ms: int = 3000
    screen_width_px: int = 2560
    screen_height_px: int = 1440


_PYMC_CONFIG = MortarConfig()


def basic_config(config: MortarConfig):
    global _PYMC_CONFIG
    _PYMC_CONFIG = config


def get_config() -> MortarConfig:
    return _PYMC_CONFIG


def reset_config():
    basic_config(MortarConfig())
