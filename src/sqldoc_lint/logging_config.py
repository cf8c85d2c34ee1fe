"""Logging setup shared by the CLI and library modules."""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_PACKAGE_LOGGER = "sqldoc_lint"


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name``."""
    return logging.getLogger(name)


def configure_logging(verbosity: int = 0) -> None:
    """Attach a stderr handler to the package logger.

    A verbosity of ``-1`` only shows errors, ``0`` warnings, ``1`` info and
    ``2`` or more debug output.
    """
    if verbosity < 0:
        level = logging.ERROR
    elif verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
