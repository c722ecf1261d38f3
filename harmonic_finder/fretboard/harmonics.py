"""Natural-harmonic positions on a string and the notes they sound."""

from typing import List, Tuple

import numpy as np

from ..note_types import FretboardMarker, HarmonicPoint
from ..note_utils import absolute_pitch_to_note, note_label

# Fret positions of the harmonic nodes players actually use
HARMONIC_FRETS = (3.2, 4, 5, 7, 9, 12, 16, 19)

MAX_PARTIAL = 12


def fret_for_fraction(k: int, n: int) -> float:
    """Fret at which k/n of the string length lies between the nut and the finger."""
    return float(-12 * np.log2(1 - k / n))


def _candidate_fractions() -> Tuple[np.ndarray, np.ndarray]:
    # Ordered by n, then k, so argmin keeps the simplest fraction on ties
    pairs = [(k, n) for n in range(2, MAX_PARTIAL + 1) for k in range(1, n)]
    ks = np.array([k for k, _ in pairs], dtype=float)
    ns = np.array([n for _, n in pairs], dtype=float)
    return ks, ns


def nearest_partial(fret: float) -> HarmonicPoint:
    """Find the harmonic whose node lies closest to a fret position.

    Harmonic nodes do not fall exactly on frets, so every fraction k/n with
    n up to 12 is tried and the nearest one wins. The denominator n is the
    partial; the sounding pitch is round(12 * log2(n)) semitones above the
    open string.
    """
    ks, ns = _candidate_fractions()
    predicted = -12 * np.log2(1 - ks / ns)
    best = int(np.argmin(np.abs(predicted - fret)))
    partial = int(ns[best])
    return HarmonicPoint(
        fret=fret,
        partial=partial,
        semitone_shift=int(round(12 * np.log2(partial))),
    )


HARMONIC_POINTS: Tuple[HarmonicPoint, ...] = tuple(nearest_partial(f) for f in HARMONIC_FRETS)


def harmonic_note_for_pitch(open_pitch: int, point: HarmonicPoint, prefer_sharps: bool = True):
    return absolute_pitch_to_note(open_pitch + point.semitone_shift, prefer_sharps)


def compute_harmonics_for_string(
    open_pitch: int, prefer_sharps: bool = True, string_index: int = 0
) -> List[FretboardMarker]:
    """Untagged harmonic markers for one open string (e.g. 40 for E2)."""
    markers = []
    for point in HARMONIC_POINTS:
        note = harmonic_note_for_pitch(open_pitch, point, prefer_sharps)
        markers.append(
            FretboardMarker(
                fret=point.fret,
                label=note_label(note),
                pitch_class=note.pitch_class,
                string_index=string_index,
                partial=point.partial,
            )
        )
    return markers
