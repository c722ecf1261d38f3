"""Chord parsing: a local chord-symbol grammar and structured tone lists."""

import re
from typing import Iterable, List, Optional, Tuple

from ..logger import get_logger
from ..note_types import ParsedChord, PitchClass
from ..note_utils import parse_note, unique_pitch_classes
from .degrees import build_degree_map

logger = get_logger(__name__)

ROOT_PATTERN = re.compile(r"^([A-Ga-g][#b]?)(.*)$")

# Semitone intervals of each quality token
QUALITY_MAP = {
    "": [0, 4, 7],
    "maj": [0, 4, 7],
    "M": [0, 4, 7],
    "+": [0, 4, 8],
    "aug": [0, 4, 8],
    "m": [0, 3, 7],
    "min": [0, 3, 7],
    "-": [0, 3, 7],
    "dim": [0, 3, 6],
    "o": [0, 3, 6],
    "sus2": [0, 2, 7],
    "sus4": [0, 5, 7],
}

# Longest first, so 'maj' is tried before 'm'
QUALITY_TOKENS = sorted(QUALITY_MAP, key=len, reverse=True)

# Everything that may follow the quality token
EXTENSIONS_PATTERN = re.compile(
    r"^(?:maj7|Maj7|M7|Δ|7|9|11|13|b9|b13|b5|dim5|#5|\+5|add|[()\s,])*$"
)

MAJOR_SEVENTH_PATTERN = re.compile(r"maj7|Maj7|M7|Δ")
BARE_SEVENTH_PATTERN = re.compile(r"(^|[^a-zA-Z])7")

MAJOR_SEVENTH = 11
MINOR_SEVENTH = 10
PERFECT_FIFTH = 7
DIMINISHED_FIFTH = 6
AUGMENTED_FIFTH = 8


def _add_interval(intervals: List[int], interval: int) -> None:
    if interval not in intervals:
        intervals.append(interval)


def _replace_fifth(intervals: List[int], interval: int) -> None:
    if PERFECT_FIFTH in intervals:
        intervals[intervals.index(PERFECT_FIFTH)] = interval


def _split_quality(text: str) -> Optional[Tuple[str, str]]:
    """Split the text after the root into a quality token and its extensions."""
    for token in QUALITY_TOKENS:
        if text.startswith(token) and EXTENSIONS_PATTERN.match(text[len(token):]):
            return token, text[len(token):]
    return None


def parse_chord_locally(text: str) -> Optional[ParsedChord]:
    """Parse a common chord symbol without calling the resolution service.

    The grammar is a best-effort approximation: a root, one quality token and
    any number of 7/9/11/13, b9/b13, b5/#5 extensions. Extensions add to the
    chord rather than replacing each other, so 'C7b9' contains both the 9 and
    the b9.

    Returns:
        ParsedChord with source 'local', or None if the symbol is not understood

    Examples:
        >>> parse_chord_locally('Cmaj7').pitch_classes  # (0, 4, 7, 11)
        >>> parse_chord_locally('F#m7b5').pitch_classes  # (6, 9, 0, 4)
    """
    if not text or not isinstance(text, str):
        return None

    trimmed = text.strip()
    match = ROOT_PATTERN.match(trimmed)
    if not match:
        return None

    root = parse_note(match.group(1))
    if root is None:
        return None

    quality_raw = match.group(2).strip()
    split = _split_quality(quality_raw)
    if split is None:
        logger.debug(f"Unrecognized chord symbol: '{trimmed}'")
        return None
    quality, remainder = split

    intervals = list(QUALITY_MAP[quality])

    has_major_seventh = bool(MAJOR_SEVENTH_PATTERN.search(quality_raw))
    has_seventh = bool(BARE_SEVENTH_PATTERN.search(remainder)) and not has_major_seventh

    if has_major_seventh:
        _add_interval(intervals, MAJOR_SEVENTH)
    elif has_seventh:
        _add_interval(intervals, MINOR_SEVENTH)

    if "9" in remainder:
        _add_interval(intervals, 14)
    if "11" in remainder:
        _add_interval(intervals, 17)
    if "13" in remainder:
        _add_interval(intervals, 21)
    if "b9" in remainder:
        _add_interval(intervals, 13)
    if "b13" in remainder:
        _add_interval(intervals, 20)
    if "b5" in remainder or "dim5" in remainder:
        _replace_fifth(intervals, DIMINISHED_FIFTH)
    if "#5" in remainder or "+5" in remainder:
        _replace_fifth(intervals, AUGMENTED_FIFTH)

    pitch_classes = unique_pitch_classes(root.pitch_class + i for i in intervals)

    return ParsedChord(
        root=root,
        pitch_classes=tuple(pitch_classes),
        label=f"{root.name}{quality_raw}",
        source="local",
    )


def chord_from_tones(
    root: str, tones: Iterable[Tuple[str, str]], label: Optional[str] = None
) -> Optional[ParsedChord]:
    """Translate an externally resolved chord into a ParsedChord.

    Args:
        root: Root note name, e.g. 'Gb'
        tones: (note, degree) pairs, e.g. [('Gb', '1'), ('Bb', '3')]
        label: Optional display label; defaults to '<root> chord'

    Returns:
        ParsedChord with source 'llm', or None if the root or any tone is not
        a valid note name
    """
    tones = list(tones)
    root_note = parse_note(root)
    if root_note is None:
        logger.warning(f"Resolved chord has an invalid root '{root}'")
        return None

    pitch_classes: List[PitchClass] = []
    note_names = {}
    for note, _degree in tones:
        parsed = parse_note(note)
        if parsed is None:
            logger.warning(f"Resolved chord has an invalid tone '{note}'")
            return None
        if parsed.pitch_class not in pitch_classes:
            pitch_classes.append(parsed.pitch_class)
            note_names[parsed.pitch_class] = parsed.name

    if not pitch_classes:
        return None
    if root_note.pitch_class not in pitch_classes:
        pitch_classes.insert(0, root_note.pitch_class)
    note_names[root_note.pitch_class] = root_note.name

    return ParsedChord(
        root=root_note,
        pitch_classes=tuple(pitch_classes),
        label=label or f"{root_note.name} chord",
        source="llm",
        degree_map=build_degree_map(root_note.pitch_class, tones),
        note_names=note_names,
    )
