#!/usr/bin/env python3
"""
Logging helpers for schemagen.

Usage:
    from schemagen.core.log import get_logger, setup_logging

    setup_logging("DEBUG")          # once, at an entry point (the CLI does this)
    logger = get_logger(__name__)   # in any module
"""
from __future__ import annotations

import logging
import sys
from typing import Final, Optional, TextIO, Union

# --- Constants --- #

ROOT_LOGGER_NAME: Final[str] = "schemagen"
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Library code stays silent unless the application configures logging
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


# --- Public API --- #

def get_logger(name: str) -> logging.Logger:
    """Return a logger under the `schemagen` hierarchy."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: Union[str, int, None] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach a single stream handler to the `schemagen` logger.

    Args:
        level: Level name or number; defaults to DEFAULT_LOG_LEVEL.
        stream: Output stream; defaults to stderr.

    Returns:
        The configured `schemagen` root logger. Calling again replaces the
        handler rather than stacking a second one.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(resolve_level(level))

    for handler in list(root.handlers):
        if getattr(handler, "_schemagen_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler._schemagen_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root


def resolve_level(level: Union[str, int, None]) -> int:
    """
    Convert a level name/number to a logging level.

    Raises:
        ValueError: for unknown level names.
    """
    if level is None:
        level = DEFAULT_LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved
