"""Package logger of py_mortarcalc.

Console output is on from import at INFO level: completed measurements, listening
toggles, and warnings for rejected clicks, resolutions and config entries.
State transitions and solver internals go out at DEBUG, which is mostly useful
with a log file attached:

    ```python
    from py_mortarcalc.logger import enable_file_logging, disable_file_logging

    enable_file_logging("mortar_debug.log")
    ...  # replay a session
    disable_file_logging()
    ```
"""
import logging
from typing import Optional

__all__ = ('logger',
           'enable_file_logging',
           'disable_file_logging',
)

CONSOLE_FORMAT = "%(levelname)s:%(name)s:%(message)s"
FILE_FORMAT = "%(asctime)s:%(levelname)s:%(module)s:%(message)s"

console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
console_handler.setLevel(logging.DEBUG)  # filtered by the logger level

logger: logging.Logger = logging.getLogger('py_mortarcalc')
logger.addHandler(console_handler)
logger.setLevel(logging.INFO)

# attached by enable_file_logging
file_handler: Optional[logging.FileHandler] = None


def enable_file_logging(filename: str = "debug.log") -> None:
    """Append records to `filename`, DEBUG ones too once the logger level lets them through.

    Calling it again moves logging to the new file.
    """
    global file_handler
    disable_file_logging()
    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(file_handler)


def disable_file_logging() -> None:
    """Detach and close the log file, if one is attached."""
    global file_handler
    if file_handler is None:
        return
    logger.removeHandler(file_handler)
    file_handler.close()
    file_handler = None
