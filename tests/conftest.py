import logging

import pytest

from py_mortarcalc.config import reset_config
from py_mortarcalc.geometry import ScreenGeometry
from py_mortarcalc.logger import logger
from py_mortarcalc.unit import PreferredUnits

logger.setLevel(logging.DEBUG)


@pytest.fixture(autouse=True)
def restore_globals():
    yield
    PreferredUnits.restore_defaults()
    reset_config()


@pytest.fixture
def qhd_geometry() -> ScreenGeometry:
    return ScreenGeometry.from_resolution(2560, 1440, 80)
