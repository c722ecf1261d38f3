"""Utility functions for working with note names, pitch classes and MIDI pitches."""

import re
from typing import Iterable, List, Optional

from .logger import get_logger
from .note_types import ParsedNote, PitchClass

# Get logger for this module
logger = get_logger(__name__)

# Compile regex to split a note token into its parts
# This pattern matches:
# - Note letter (A-G, case insensitive)
# - Optional single accidental (# or b)
# - Optional octave number, which may be negative
NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)(-?[0-9]+)?$")

# Both spellings of every enharmonic pair, plus the theoretical ones
NOTE_TO_PITCH_CLASS = {
    "C": 0,
    "B#": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "Fb": 4,
    "E#": 5,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
    "Cb": 11,
}

SHARP_NOTES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
FLAT_NOTES = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]


def normalize_pitch_class(value: int) -> PitchClass:
    """Reduce any integer pitch to 0-11."""
    return int(round(value)) % 12


def parse_note(text: str) -> Optional[ParsedNote]:
    """Parse a note token such as 'C#', 'bb' or 'E2'.

    Args:
        text: The note to parse. Surrounding whitespace is ignored.

    Returns:
        ParsedNote, or None if the token is not a single-accidental note name
        (double accidentals, solfege and empty strings are rejected)

    Examples:
        >>> parse_note('Db3')  # ParsedNote(name='Db', pitch_class=1, octave=3)
        >>> parse_note('H')  # None
    """
    if not text or not isinstance(text, str):
        return None

    match = NOTE_PATTERN.match(text.strip())
    if not match:
        logger.debug(f"Invalid note token: '{text}'")
        return None

    letter, accidental, octave_part = match.groups()
    name = f"{letter.upper()}{accidental}"
    pitch_class = NOTE_TO_PITCH_CLASS.get(name)
    if pitch_class is None:
        return None

    octave = int(octave_part) if octave_part is not None else None
    return ParsedNote(name=name, pitch_class=pitch_class, octave=octave)


def pitch_class_to_name(pitch_class: int, prefer_sharps: bool = True) -> str:
    """Spell a pitch class with the sharp or the flat name table."""
    index = normalize_pitch_class(pitch_class)
    return SHARP_NOTES[index] if prefer_sharps else FLAT_NOTES[index]


def absolute_pitch_to_note(pitch: int, prefer_sharps: bool = True) -> ParsedNote:
    """Convert a MIDI note number to a note with octave.

    Note:
        - Middle C (60) is C4
        - Octave numbers change between B and C (e.g., 59 is B3, 60 is C4)
    """
    pitch = int(round(pitch))
    octave = (pitch // 12) - 1
    pitch_class = pitch % 12
    return ParsedNote(
        name=pitch_class_to_name(pitch_class, prefer_sharps),
        pitch_class=pitch_class,
        octave=octave,
    )


def to_absolute_pitch(pitch_class: PitchClass, octave: int = 4) -> int:
    """Convert a pitch class and octave to a MIDI note number (C4 = 60)."""
    return (octave + 1) * 12 + pitch_class


def unique_pitch_classes(values: Iterable[int]) -> List[PitchClass]:
    """Normalize and deduplicate pitch classes, keeping the first occurrence."""
    seen: List[PitchClass] = []
    for value in values:
        pc = normalize_pitch_class(value)
        if pc not in seen:
            seen.append(pc)
    return seen


def note_label(note: ParsedNote) -> str:
    """Display label for a note: name plus octave when known (e.g. 'E2')."""
    return str(note)
