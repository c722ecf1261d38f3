"""Fuse a tuning with the active key or chord into fretboard markers."""

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from ..logger import get_logger
from ..note_types import (
    FretboardMarker,
    KeySignature,
    MarkerMode,
    ParsedChord,
    StringNote,
)
from ..note_utils import absolute_pitch_to_note
from .geometry import DEFAULT_FRET_COUNT
from .harmonics import compute_harmonics_for_string

logger = get_logger(__name__)


def tag_marker(
    marker: FretboardMarker,
    key: Optional[KeySignature] = None,
    chord: Optional[ParsedChord] = None,
) -> FretboardMarker:
    """Set the in-key, root and chord-tone flags of a marker."""
    pc = marker.pitch_class
    return replace(
        marker,
        is_in_key=key is not None and pc in key.scale,
        is_root=key is not None and pc == key.root,
        in_chord=chord is not None and pc in chord.pitch_classes,
    )


def _resolve_sharps(prefer_sharps: Optional[bool], key: Optional[KeySignature]) -> bool:
    if prefer_sharps is not None:
        return prefer_sharps
    return key.prefers_sharps if key is not None else True


def build_fretboard_notes(
    tuning: Sequence[StringNote],
    key: Optional[KeySignature] = None,
    chord: Optional[ParsedChord] = None,
    fret_count: int = DEFAULT_FRET_COUNT,
    prefer_sharps: Optional[bool] = None,
) -> List[FretboardMarker]:
    """One marker per string per fret, 0 to fret_count inclusive."""
    sharps = _resolve_sharps(prefer_sharps, key)
    markers = []
    for string_index, string_note in enumerate(tuning):
        for fret in range(fret_count + 1):
            note = absolute_pitch_to_note(string_note.absolute_pitch + fret, sharps)
            marker = FretboardMarker(
                fret=fret,
                label=note.name,
                pitch_class=note.pitch_class,
                string_index=string_index,
            )
            markers.append(tag_marker(marker, key, chord))
    return markers


def build_fretboard_harmonics(
    tuning: Sequence[StringNote],
    key: Optional[KeySignature] = None,
    chord: Optional[ParsedChord] = None,
    prefer_sharps: Optional[bool] = None,
) -> List[FretboardMarker]:
    """The natural harmonics of every string."""
    sharps = _resolve_sharps(prefer_sharps, key)
    markers = []
    for string_index, string_note in enumerate(tuning):
        for harmonic in compute_harmonics_for_string(
            string_note.absolute_pitch, sharps, string_index
        ):
            markers.append(tag_marker(harmonic, key, chord))
    return markers


def build_fretboard_markers(
    tuning: Sequence[StringNote],
    key: Optional[KeySignature] = None,
    chord: Optional[ParsedChord] = None,
    mode: MarkerMode = MarkerMode.CONTINUOUS,
    fret_count: int = DEFAULT_FRET_COUNT,
    prefer_sharps: Optional[bool] = None,
) -> List[FretboardMarker]:
    """Build the markers to render for a tuning.

    Args:
        tuning: Open strings, low to high
        key: Active key or scale, if any
        chord: Active chord, if any
        mode: CONTINUOUS for every fretted note, HARMONIC for natural harmonics
        fret_count: Highest fret in CONTINUOUS mode
        prefer_sharps: Spelling of labels; None follows the active key

    Returns:
        A fresh list of markers ordered by string, then fret
    """
    if mode is MarkerMode.CONTINUOUS:
        markers = build_fretboard_notes(tuning, key, chord, fret_count, prefer_sharps)
    elif mode is MarkerMode.HARMONIC:
        markers = build_fretboard_harmonics(tuning, key, chord, prefer_sharps)
    else:
        raise ValueError(f"Unknown marker mode: {mode}")

    logger.debug(f"Built {len(markers)} {mode.name.lower()} markers for {len(tuning)} strings")
    return markers


def visible_markers(
    markers: Iterable[FretboardMarker],
    key: Optional[KeySignature] = None,
    chord: Optional[ParsedChord] = None,
) -> List[FretboardMarker]:
    """Markers a consumer highlights: chord tones, else in-key notes, else all."""
    if chord is not None:
        return [m for m in markers if m.in_chord]
    if key is not None:
        return [m for m in markers if m.is_in_key]
    return list(markers)
