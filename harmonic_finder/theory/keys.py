"""Major/minor key signatures and scales described by the resolution service."""

import re
from typing import Iterable, List, Optional, Tuple

from ..logger import get_logger
from ..note_types import KeySignature, PitchClass
from ..note_utils import normalize_pitch_class, parse_note, pitch_class_to_name
from .degrees import build_degree_map

logger = get_logger(__name__)

MAJOR = "major"
MINOR = "minor"

MAJOR_INTERVALS = (0, 2, 4, 5, 7, 9, 11)
MINOR_INTERVALS = (0, 2, 3, 5, 7, 8, 10)

# Conventional spelling of each root, so Eb major never reads as "D# major"
MAJOR_KEY_NAMES = {
    0: "C",
    1: "Db",
    2: "D",
    3: "Eb",
    4: "E",
    5: "F",
    6: "F#",
    7: "G",
    8: "Ab",
    9: "A",
    10: "Bb",
    11: "B",
}

MINOR_KEY_NAMES = {
    0: "C",
    1: "C#",
    2: "D",
    3: "Eb",
    4: "E",
    5: "F",
    6: "F#",
    7: "G",
    8: "G#",
    9: "A",
    10: "Bb",
    11: "B",
}

KEY_LABEL_PATTERN = re.compile(r"^(\S+)\s+(major|minor|maj|min)$", re.IGNORECASE)


def build_scale(root: PitchClass, mode: str) -> Tuple[PitchClass, ...]:
    intervals = MAJOR_INTERVALS if mode == MAJOR else MINOR_INTERVALS
    return tuple((root + interval) % 12 for interval in intervals)


def key_set_from_root(root: int, mode: str) -> KeySignature:
    """Build the major or natural minor key on a root pitch class."""
    if mode not in (MAJOR, MINOR):
        raise ValueError(f"Unknown mode: {mode}")
    root = normalize_pitch_class(root)
    names = MAJOR_KEY_NAMES if mode == MAJOR else MINOR_KEY_NAMES
    display = names.get(root) or pitch_class_to_name(root)
    return KeySignature(
        root=root,
        label=f"{display} {mode}",
        mode=mode,
        scale=build_scale(root, mode),
    )


def _build_all_keys() -> Tuple[KeySignature, ...]:
    keys: List[KeySignature] = []
    for pc in range(12):
        keys.append(key_set_from_root(pc, MAJOR))
        keys.append(key_set_from_root(pc, MINOR))
    return tuple(keys)


ALL_KEYS = _build_all_keys()

_KEYS_BY_LABEL = {key.label.lower(): key for key in ALL_KEYS}


def _normalize_label(label: str) -> str:
    return " ".join(label.split()).lower()


def find_key(label: str) -> Optional[KeySignature]:
    """Look up one of the 24 built-in keys by its label.

    Labels are matched case-insensitively. A label that spells the root
    differently ("D# major", "bb min") resolves to the built-in key on the
    same root.

    Returns:
        The matching KeySignature, or None
    """
    if not label or not isinstance(label, str):
        return None

    normalized = _normalize_label(label)
    if normalized in _KEYS_BY_LABEL:
        return _KEYS_BY_LABEL[normalized]

    match = KEY_LABEL_PATTERN.match(normalized)
    if not match:
        return None
    root = parse_note(match.group(1))
    if root is None or root.octave is not None:
        return None
    mode = MAJOR if match.group(2).startswith("maj") else MINOR
    return key_set_from_root(root.pitch_class, mode)


def is_pitch_class_in_key(pitch_class: int, key: Optional[KeySignature]) -> bool:
    if key is None:
        return False
    return normalize_pitch_class(pitch_class) in key.scale


def key_from_tones(
    label: str, root: str, tones: Iterable[Tuple[str, str]]
) -> Optional[KeySignature]:
    """Translate an externally described scale into a KeySignature.

    Args:
        label: Display label, e.g. 'Gb mixolydian'
        root: Root note name
        tones: Ordered (note, degree) pairs

    Returns:
        KeySignature, or None if the root or any tone is not a valid note
    """
    tones = list(tones)
    root_note = parse_note(root)
    if root_note is None:
        logger.warning(f"Scale '{label}' has an invalid root '{root}'")
        return None

    scale: List[PitchClass] = []
    note_names = {}
    for note, _degree in tones:
        parsed = parse_note(note)
        if parsed is None:
            logger.warning(f"Scale '{label}' has an invalid tone '{note}'")
            return None
        if parsed.pitch_class not in scale:
            scale.append(parsed.pitch_class)
            note_names[parsed.pitch_class] = parsed.name

    if not scale:
        return None
    if root_note.pitch_class not in scale:
        scale.insert(0, root_note.pitch_class)
    note_names[root_note.pitch_class] = root_note.name

    parts = label.strip().split(None, 1)
    mode = parts[1] if len(parts) > 1 else label.strip()
    return KeySignature(
        root=root_note.pitch_class,
        label=label,
        mode=mode,
        scale=tuple(scale),
        degree_map=build_degree_map(root_note.pitch_class, tones),
        note_names=note_names,
        source="llm",
    )
