"""Type definitions for the Harmonic Finder project."""

from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

PitchClass = int


def _freeze_map(values: Optional[Mapping[int, str]]) -> Optional[Mapping[int, str]]:
    if values is None:
        return None
    return MappingProxyType({int(k): str(v) for k, v in values.items()})


def _map_to_json(values: Optional[Mapping[int, str]]) -> Optional[Dict[str, str]]:
    if values is None:
        return None
    return {str(k): v for k, v in values.items()}


@dataclass(frozen=True)
class ParsedNote:
    """A note name reduced to its pitch class (and octave, if one was given)."""

    name: str  # Canonical spelling, e.g. 'C#' or 'Bb'
    pitch_class: PitchClass  # 0-11, 0 is C
    octave: Optional[int] = None  # e.g. 2

    def __str__(self):
        return f"{self.name}{'' if self.octave is None else self.octave}"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "pitch_class": self.pitch_class, "octave": self.octave}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParsedNote":
        return cls(
            name=str(data["name"]),
            pitch_class=int(data["pitch_class"]),
            octave=None if data.get("octave") is None else int(data["octave"]),
        )


@dataclass(frozen=True)
class StringNote:
    """One open string of a tuning, ordered low to high."""

    label: str  # Display label, e.g. 'E2'
    pitch_class: PitchClass
    absolute_pitch: int  # MIDI note number of the open string


@dataclass(frozen=True)
class TuningResult:
    """Strings that parsed, plus one message per string that did not."""

    strings: Tuple[StringNote, ...]
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class KeySignature:
    """A key or scale: a root plus the pitch classes that belong to it.

    The 24 built-in major/minor keys carry no degree map; their degrees are the
    1-based positions in ``scale``. Scales described by the resolution service
    bring an explicit ``degree_map`` and their preferred ``note_names``.
    """

    root: PitchClass
    label: str
    mode: str  # 'major', 'minor' or a free-form name like 'mixolydian'
    scale: Tuple[PitchClass, ...]
    degree_map: Optional[Mapping[PitchClass, str]] = None
    note_names: Optional[Mapping[PitchClass, str]] = None
    source: str = "builtin"

    def __post_init__(self):
        object.__setattr__(self, "scale", tuple(int(pc) for pc in self.scale))
        object.__setattr__(self, "degree_map", _freeze_map(self.degree_map))
        object.__setattr__(self, "note_names", _freeze_map(self.note_names))
        if self.root not in self.scale:
            raise ValueError(f"Key '{self.label}' does not contain its root {self.root}")

    @property
    def prefers_sharps(self) -> bool:
        """False when the root is spelled with a flat (Eb major, Bb dorian...).

        Resolved scales carry the root's spelling in ``note_names``; built-in
        keys are labelled with their conventional root name.
        """
        root_name = (self.note_names or {}).get(self.root)
        if root_name is None:
            root_name = self.label.split(" ", 1)[0]
        return "b" not in root_name[1:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "label": self.label,
            "mode": self.mode,
            "scale": list(self.scale),
            "degree_map": _map_to_json(self.degree_map),
            "note_names": _map_to_json(self.note_names),
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeySignature":
        return cls(
            root=int(data["root"]),
            label=str(data["label"]),
            mode=str(data["mode"]),
            scale=tuple(int(pc) for pc in data["scale"]),
            degree_map=data.get("degree_map"),
            note_names=data.get("note_names"),
            source=str(data.get("source", "builtin")),
        )


@dataclass(frozen=True)
class ParsedChord:
    """A chord as a set of pitch classes around a root."""

    root: ParsedNote
    pitch_classes: Tuple[PitchClass, ...]
    label: str
    source: str  # 'local' or 'llm'
    degree_map: Optional[Mapping[PitchClass, str]] = None
    note_names: Optional[Mapping[PitchClass, str]] = None

    def __post_init__(self):
        object.__setattr__(self, "pitch_classes", tuple(int(pc) for pc in self.pitch_classes))
        object.__setattr__(self, "degree_map", _freeze_map(self.degree_map))
        object.__setattr__(self, "note_names", _freeze_map(self.note_names))
        if self.root.pitch_class not in self.pitch_classes:
            raise ValueError(f"Chord '{self.label}' does not contain its root")
        if self.degree_map is not None and self.degree_map.get(self.root.pitch_class) != "1":
            raise ValueError(f"Chord '{self.label}' root must map to degree '1'")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root.to_dict(),
            "pitch_classes": list(self.pitch_classes),
            "label": self.label,
            "source": self.source,
            "degree_map": _map_to_json(self.degree_map),
            "note_names": _map_to_json(self.note_names),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParsedChord":
        return cls(
            root=ParsedNote.from_dict(data["root"]),
            pitch_classes=tuple(int(pc) for pc in data["pitch_classes"]),
            label=str(data["label"]),
            source=str(data["source"]),
            degree_map=data.get("degree_map"),
            note_names=data.get("note_names"),
        )


@dataclass(frozen=True)
class HarmonicPoint:
    """A natural-harmonic node, independent of tuning."""

    fret: float  # Fractional fret position, nut is 0
    partial: int  # Overtone number (2 = octave)
    semitone_shift: int  # Pitch above the open string


class MarkerMode(Enum):
    """Which markers the fretboard generator produces."""

    CONTINUOUS = auto()  # Every fretted note from 0 to fret_count
    HARMONIC = auto()  # Natural harmonics only


@dataclass(frozen=True)
class FretboardMarker:
    """A note placed on one string at one (possibly fractional) fret."""

    fret: float
    label: str
    pitch_class: PitchClass
    string_index: int  # 0 is the lowest string
    is_in_key: bool = False
    is_root: bool = False
    in_chord: bool = False
    partial: Optional[int] = None  # Only set for harmonic markers

    def __str__(self):
        return f"S{self.string_index}F{self.fret:g}:{self.label}"


@dataclass(frozen=True)
class CacheWriteResult:
    """Outcome of a best-effort cache write."""

    ok: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class Resolution:
    """What a resolver produced for one chord or scale request."""

    value: Optional[Any] = None  # ParsedChord or KeySignature
    source: Optional[str] = None  # 'builtin', 'local' or 'llm'
    cache: Optional[str] = None  # 'HIT' or 'MISS'
    cache_key: Optional[str] = None
    cache_write: Optional[str] = None  # 'OK' or 'ERR'
    cache_write_error: Optional[str] = None
    error: Optional[str] = None
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.value is not None
