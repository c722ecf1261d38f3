"""Module loggers for Harmonic Finder, created on first use."""
import logging
from typing import Dict

_logger_cache: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, e.g. 'harmonic_finder.theory.chords'.

    Levels and handlers are set by ``logging_config.setup_logging``; until it
    runs, records follow the standard library defaults.
    """
    logger = _logger_cache.get(name)
    if logger is None:
        logger = _logger_cache[name] = logging.getLogger(name)
    return logger
