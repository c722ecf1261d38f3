"""Tunings, natural harmonics and fretboard markers."""

# Import the public helpers for easier access
from .geometry import fret_to_position
from .harmonics import HARMONIC_POINTS, compute_harmonics_for_string
from .markers import build_fretboard_harmonics, build_fretboard_markers, build_fretboard_notes
from .tunings import build_tuning, parse_custom_tuning, preset_tuning

__all__ = [
    "HARMONIC_POINTS",
    "build_fretboard_harmonics",
    "build_fretboard_markers",
    "build_fretboard_notes",
    "build_tuning",
    "compute_harmonics_for_string",
    "fret_to_position",
    "parse_custom_tuning",
    "preset_tuning",
]
