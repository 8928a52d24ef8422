"""Log verbosity for the branchflow CLI.

Modules log through ``logging.getLogger(__name__)``; the CLI maps its
repeatable ``-v`` flag onto the root level once at startup. Logs go to
stderr so they never mix with the rendered workflow output.
"""

from __future__ import annotations

import logging
import sys

# -v count -> root level; anything past the last entry stays at DEBUG
_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def level_for(verbosity: int) -> int:
    """Root log level for a ``-v`` count (negative counts are treated as 0)."""
    return _LEVELS[min(max(verbosity, 0), len(_LEVELS) - 1)]


def configure_logging(verbosity: int) -> int:
    """Configure the root logger for *verbosity* and return the chosen level."""
    level = level_for(verbosity)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
    )
    return level
