"""
Logging setup for the ZR# toolchain.

Every module logs through logging.getLogger(__name__) under the "zrlang"
hierarchy. configure_logging() installs a single stderr handler on that
hierarchy with the level picked by the driver (ERROR unless asked
otherwise). TRACE sits below DEBUG and is used for per-token output.

Author: xwest
"""

import logging
import sys
from typing import Optional, TextIO, Union

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(filename)s:%(lineno)d:%(funcName)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

ROOT_LOGGER = "zrlang"


def parse_level(level: Union[str, int]) -> int:
    """Map a level name (error, warn, info, debug, trace) or number to a logging level."""
    if isinstance(level, int):
        return level
    try:
        return LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level '{level}', expected one of: {', '.join(LEVELS)}")


def configure_logging(level: Union[str, int] = "error",
                      stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the zrlang logger hierarchy.

    Calling it again replaces the previous handler, so the CLI and tests can
    reconfigure freely.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_zrlang_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._zrlang_handler = True

    logger.addHandler(handler)
    logger.setLevel(parse_level(level))
    logger.propagate = False
    return logger
