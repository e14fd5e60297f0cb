"""Log sink setup for the command line. Library code only emits records."""

from __future__ import annotations

import sys

from loguru import logger

_FORMAT = "<level>{level: <8}</level> {message}"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Replace loguru's default sink with a `stderr` sink: `DEBUG` when verbose,
    `ERROR` when quiet, `WARNING` otherwise.
    """
    level = "DEBUG" if verbose else "ERROR" if quiet else "WARNING"
    logger.remove()
    logger.add(sys.stderr, level=level, format=_FORMAT, colorize=None)
