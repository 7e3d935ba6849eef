"""Logging setup for the `gridstyles-py` command line."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

PACKAGE_LOGGER = "gridstyles_py"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

_HANDLER: logging.Handler | None = None


def resolve_level(level: int | str | None) -> int:
    """Map a level name or number to a logging level; unknown names mean INFO."""
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: int | str | None = None, *, stream: TextIO | None = None
) -> logging.Logger:
    """Attach one stderr handler to the package logger and set its level.

    Repeated calls only adjust the level, so the CLI can raise verbosity after
    the style config turns on debug logging.
    """
    global _HANDLER
    logger = logging.getLogger(PACKAGE_LOGGER)
    resolved = resolve_level(level)
    if _HANDLER is None:
        _HANDLER = logging.StreamHandler(stream if stream is not None else sys.stderr)
        _HANDLER.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(_HANDLER)
    _HANDLER.setLevel(resolved)
    logger.setLevel(resolved)
    return logger


__all__ = ["configure_logging", "resolve_level"]
