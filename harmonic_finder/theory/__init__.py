"""Keys, scales, chords and degree labels."""

# Import the public helpers for easier access
from .chords import chord_from_tones, parse_chord_locally
from .degrees import CHORD_DEGREES, chord_degree, key_degree, marker_text
from .keys import ALL_KEYS, find_key, is_pitch_class_in_key, key_from_tones, key_set_from_root

__all__ = [
    "ALL_KEYS",
    "CHORD_DEGREES",
    "chord_degree",
    "chord_from_tones",
    "find_key",
    "is_pitch_class_in_key",
    "key_degree",
    "key_from_tones",
    "key_set_from_root",
    "marker_text",
    "parse_chord_locally",
]
