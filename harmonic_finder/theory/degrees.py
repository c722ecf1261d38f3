"""Scale- and chord-degree labels for pitch classes."""

from typing import Dict, Iterable, Optional, Tuple

from ..note_types import FretboardMarker, KeySignature, ParsedChord, PitchClass
from ..note_utils import normalize_pitch_class, parse_note

# Degree of every semitone offset from a chord root
CHORD_DEGREES = {
    0: "1",
    1: "b2",
    2: "2",
    3: "b3",
    4: "3",
    5: "4",
    6: "b5",
    7: "5",
    8: "#5",
    9: "6",
    10: "b7",
    11: "7",
}

LABEL_MODES = ("notes", "degrees")


def build_degree_map(
    root_pitch_class: PitchClass, tones: Iterable[Tuple[str, str]]
) -> Dict[PitchClass, str]:
    """Map pitch classes to degree labels from (note, degree) pairs.

    The first label seen for a pitch class wins; the root is always "1".
    Tones whose note does not parse are skipped.
    """
    degree_map: Dict[PitchClass, str] = {}
    for note, degree in tones:
        parsed = parse_note(note)
        if parsed is None:
            continue
        if parsed.pitch_class not in degree_map:
            degree_map[parsed.pitch_class] = degree
    degree_map[normalize_pitch_class(root_pitch_class)] = "1"
    return degree_map


def key_degree(pitch_class: int, key: Optional[KeySignature]) -> Optional[str]:
    if key is None:
        return None
    pc = normalize_pitch_class(pitch_class)
    if key.degree_map is not None and pc in key.degree_map:
        return key.degree_map[pc]
    if pc not in key.scale:
        return None
    return str(key.scale.index(pc) + 1)


def chord_degree(pitch_class: int, chord: Optional[ParsedChord]) -> Optional[str]:
    if chord is None:
        return None
    pc = normalize_pitch_class(pitch_class)
    if chord.degree_map is not None and pc in chord.degree_map:
        return chord.degree_map[pc]
    return CHORD_DEGREES[(pc - chord.root.pitch_class) % 12]


def display_name(
    pitch_class: int,
    fallback: str,
    key: Optional[KeySignature] = None,
    chord: Optional[ParsedChord] = None,
) -> str:
    """Spelling to show for a pitch class, preferring the one the resolver supplied."""
    pc = normalize_pitch_class(pitch_class)
    source = chord if chord is not None else key
    if source is not None and source.note_names and pc in source.note_names:
        return source.note_names[pc]
    return fallback


def marker_text(
    marker: FretboardMarker,
    label_mode: str = "notes",
    key: Optional[KeySignature] = None,
    chord: Optional[ParsedChord] = None,
) -> str:
    """Text a consumer prints inside a marker.

    In "notes" mode the marker label is used, respelled with the names of the
    active chord or scale when they are known. In "degrees" mode the degree
    relative to the active chord (or key) is shown, falling back to the label
    for pitch classes with no degree.
    """
    if label_mode not in LABEL_MODES:
        raise ValueError(f"Unknown label mode: {label_mode}")

    if label_mode == "notes":
        octave = marker.label.lstrip("ABCDEFG#b")
        name = display_name(marker.pitch_class, marker.label[: len(marker.label) - len(octave)], key, chord)
        return f"{name}{octave}"

    if chord is not None:
        return chord_degree(marker.pitch_class, chord) or marker.label
    if key is not None:
        return key_degree(marker.pitch_class, key) or marker.label
    return marker.label
