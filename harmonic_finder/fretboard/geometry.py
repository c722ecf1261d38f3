"""Horizontal placement of frets and markers on a drawn fretboard.

Positions are fractions of the board width in [0, 1], with the nut at 0 and
the last fret at 1. Fret spacing follows the equal-tempered rule that each
fret shortens the vibrating length by a factor of 2 ** (1 / 12), the same
model the harmonic search uses.
"""

from typing import List

import numpy as np

from ..note_types import FretboardMarker

DEFAULT_FRET_COUNT = 24
INLAY_FRETS = (3, 5, 7, 9, 12, 15, 17, 19, 21, 24)
DOUBLE_INLAY_FRETS = (12, 24)


def fret_to_position(fret: float, fret_count: int = DEFAULT_FRET_COUNT) -> float:
    """Position of a (possibly fractional) fret wire."""
    denominator = 1 - np.power(2.0, -fret_count / 12)
    return float((1 - np.power(2.0, -fret / 12)) / denominator)


def fret_positions(fret_count: int = DEFAULT_FRET_COUNT) -> List[float]:
    """Positions of the nut and every fret wire up to fret_count."""
    frets = np.arange(fret_count + 1, dtype=float)
    denominator = 1 - np.power(2.0, -fret_count / 12)
    return [float(p) for p in (1 - np.power(2.0, -frets / 12)) / denominator]


def fretted_marker_position(fret: int, fret_count: int = DEFAULT_FRET_COUNT) -> float:
    """Fretted notes sit midway between their two wires; open strings at the nut."""
    if fret <= 0:
        return fret_to_position(0, fret_count)
    return (fret_to_position(fret - 1, fret_count) + fret_to_position(fret, fret_count)) / 2


def harmonic_marker_position(fret: float, fret_count: int = DEFAULT_FRET_COUNT) -> float:
    """Harmonic markers sit exactly on their node."""
    return fret_to_position(fret, fret_count)


def marker_position(marker: FretboardMarker, fret_count: int = DEFAULT_FRET_COUNT) -> float:
    if marker.partial is not None:
        return harmonic_marker_position(marker.fret, fret_count)
    return fretted_marker_position(int(marker.fret), fret_count)


def inlay_positions(fret_count: int = DEFAULT_FRET_COUNT) -> List[float]:
    """Centre of every inlay dot that fits on the board."""
    return [fretted_marker_position(f, fret_count) for f in INLAY_FRETS if f <= fret_count]
