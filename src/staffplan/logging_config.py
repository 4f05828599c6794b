"""Logging helpers for staffplan.

The library is silent by default (a ``NullHandler`` sits on the ``staffplan``
logger). Applications opt in explicitly:

    import staffplan
    staffplan.enable_console_logging(level="DEBUG")

Environment variables read by :func:`configure_from_env`:
    STAFFPLAN_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Literal

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "set_level",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "staffplan"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _get_library_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _remove_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def enable_console_logging(
    level: LogLevel = "INFO",
    fmt: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATE_FORMAT,
) -> logging.Handler:
    """Attach a stderr handler to the staffplan logger and return it."""
    logger = _get_library_logger()
    _remove_handlers(logger)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def set_level(level: LogLevel) -> None:
    _get_library_logger().setLevel(level)


def disable_logging() -> None:
    """Detach all non-null handlers and silence the library logger."""
    logger = _get_library_logger()
    _remove_handlers(logger)
    logger.setLevel(logging.CRITICAL + 1)


def configure_from_env() -> None:
    level = os.environ.get("STAFFPLAN_LOGGING")
    if not level:
        return
    level = level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"Unsupported STAFFPLAN_LOGGING level: {level}")
    enable_console_logging(level=level)  # type: ignore[arg-type]


_get_library_logger().addHandler(logging.NullHandler())
