"""Logging setup for the Harmonic Finder CLI and tools.

Every ``harmonic_finder`` logger gets its own level from MODULE_LOG_LEVELS
and writes through one shared stdout handler.
"""

import logging
import sys
from typing import Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

MODULE_LOG_LEVELS: Dict[str, int] = {
    "harmonic_finder": logging.INFO,
    "harmonic_finder.note_utils": logging.INFO,
    # Music theory and fretboard computation
    "harmonic_finder.theory": logging.INFO,
    "harmonic_finder.fretboard": logging.INFO,
    # External collaborators
    "harmonic_finder.services": logging.INFO,  # DEBUG shows cache keys and payloads
    "harmonic_finder.core": logging.INFO,
    "harmonic_finder.cli": logging.WARNING,
    "harmonic_finder.logger": logging.WARNING,
    # Root logger
    "": logging.ERROR,
}

_console_handler: Optional[logging.Handler] = None


def _shared_handler() -> logging.Handler:
    global _console_handler
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return _console_handler


def setup_logging(level: Optional[str] = None) -> None:
    """Apply the per-module levels and attach the shared handler.

    Args:
        level: Level name such as "DEBUG"; when given it replaces the level of
            every harmonic_finder logger (the root logger keeps its own)
    """
    levels = dict(MODULE_LOG_LEVELS)
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            levels.update({name: numeric_level for name in levels if name})
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    handler = _shared_handler()
    for name, module_level in levels.items():
        logger = logging.getLogger(name)
        logger.setLevel(module_level)
        for existing in list(logger.handlers):
            logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("harmonic_finder").debug("Logging configuration complete")
