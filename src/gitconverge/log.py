"""Logging setup."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def level_for_verbosity(verbosity: int) -> int:
    """Map a count of ``-v`` flags to a logging level."""
    return VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)


def setup_logging(level: int | str = logging.WARNING) -> None:
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
