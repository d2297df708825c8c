"""Minimal logging utilities for mamd.

Provides a simple get_logger function that wraps the standard library logging,
plus the console setup used by the command line entry point.

Example:
    >>> from mamd.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Building site")
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(message)s"
DEBUG_LOG_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "mamd." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'mamd.mymodule'
    """
    if not (name == "mamd" or name.startswith("mamd.")):
        name = f"mamd.{name}"
    return logging.getLogger(name)


def configure_logging(verbosity: int = 0, stream: TextIO | None = None) -> logging.Handler:
    """Attach a console handler to the ``mamd`` logger.

    Args:
        verbosity: -1 for errors only, 0 for progress, 1+ for debug output
        stream: Target stream (defaults to stderr)

    Returns:
        The installed handler (so callers can remove it again)
    """
    if verbosity < 0:
        level = logging.ERROR
    elif verbosity == 0:
        level = logging.INFO
    else:
        level = logging.DEBUG

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT if verbosity > 0 else LOG_FORMAT))

    root = logging.getLogger("mamd")
    root.setLevel(level)
    root.addHandler(handler)
    return handler
