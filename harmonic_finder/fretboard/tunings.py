"""Tuning presets and custom per-string tunings."""

from typing import Dict, List, Optional, Sequence, Tuple

from ..logger import get_logger
from ..note_types import StringNote, TuningResult
from ..note_utils import absolute_pitch_to_note, note_label, parse_note, to_absolute_pitch

logger = get_logger(__name__)

STANDARD = "standard"
FOURTHS = "fourths"
CUSTOM = "custom"
PRESETS = (STANDARD, FOURTHS, CUSTOM)

# MIDI pitches, low string to high string
PRESET_BASES: Dict[str, Tuple[int, ...]] = {
    STANDARD: (40, 45, 50, 55, 59, 64),  # E2 A2 D3 G3 B3 E4
    FOURTHS: (40, 45, 50, 55, 60, 65),  # E2 A2 D3 G3 C4 F4
}

# Four and five strings are treated as basses for every preset
BASS_BASES: Dict[int, Tuple[int, ...]] = {
    4: (28, 33, 38, 43),  # E1 A1 D2 G2
    5: (23, 28, 33, 38, 43),  # B0 E1 A1 D2 G2
}

DEFAULT_CUSTOM_NOTE = "C3"
FALLBACK_OCTAVE = 3
STRING_INTERVAL = 5  # Each added low string sits a fourth below the previous one


def expand_low_strings(base: Sequence[int], string_count: int) -> List[int]:
    """Fit a base tuning to a string count.

    Fewer strings drop the lowest ones; more strings are added below the
    current lowest string, a fourth apart.
    """
    if string_count <= len(base):
        return list(base[len(base) - string_count:]) if string_count > 0 else []
    extended = list(base)
    while len(extended) < string_count:
        extended.insert(0, extended[0] - STRING_INTERVAL)
    return extended


def _string_from_pitch(pitch: int) -> StringNote:
    note = absolute_pitch_to_note(pitch)
    return StringNote(label=note_label(note), pitch_class=note.pitch_class, absolute_pitch=pitch)


def preset_tuning(preset: str, string_count: int) -> Tuple[StringNote, ...]:
    """Build one of the preset tunings for the given number of strings.

    Raises:
        ValueError: If the preset has no fixed pitches (unknown or 'custom')
    """
    if preset not in PRESET_BASES:
        raise ValueError(f"Unknown tuning preset: {preset}")
    base = BASS_BASES.get(string_count, PRESET_BASES[preset])
    return tuple(_string_from_pitch(pitch) for pitch in expand_low_strings(base, string_count))


def parse_custom_tuning(
    inputs: Sequence[str], fallback_octave: int = FALLBACK_OCTAVE
) -> TuningResult:
    """Parse one note per string; bad strings are reported, not fatal.

    Args:
        inputs: Note names, low string first (e.g. ['D2', 'A2', 'D3'])
        fallback_octave: Octave used when a note has none

    Returns:
        TuningResult with every string that parsed and an error message per
        string that did not
    """
    strings: List[StringNote] = []
    errors: List[str] = []
    for index, value in enumerate(inputs):
        parsed = parse_note(value)
        if parsed is None:
            errors.append(f'String {index + 1}: invalid note "{value or ""}"')
            continue
        octave = parsed.octave if parsed.octave is not None else fallback_octave
        strings.append(
            StringNote(
                label=f"{parsed.name}{octave}",
                pitch_class=parsed.pitch_class,
                absolute_pitch=to_absolute_pitch(parsed.pitch_class, octave),
            )
        )
    if errors:
        logger.info(f"Custom tuning had {len(errors)} invalid string(s)")
    return TuningResult(strings=tuple(strings), errors=tuple(errors))


def build_tuning(
    preset: str, string_count: int, custom_inputs: Optional[Sequence[str]] = None
) -> TuningResult:
    """Build a tuning from a preset name or custom per-string notes."""
    if preset == CUSTOM:
        inputs = list(custom_inputs or [])[:string_count]
        inputs += [DEFAULT_CUSTOM_NOTE] * (string_count - len(inputs))
        return parse_custom_tuning(inputs)
    return TuningResult(strings=preset_tuning(preset, string_count))
