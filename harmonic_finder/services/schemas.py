"""Schemas for chord and scale payloads returned by the resolution service.

The pydantic models are the boundary check: a response either validates into
a fully typed payload or is rejected as a whole. The JSON schemas are sent
with the request so the model is constrained to the same shape.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..note_utils import parse_note

# 1-13 with at most one accidental, or a double flat/sharp (bb7 in a dim7 chord)
DEGREE_PATTERN = r"^(bb|##|b|#)?(1[0-3]|[1-9])$"


def _check_note(value: str) -> str:
    if parse_note(value) is None:
        raise ValueError(f"not a note name: {value!r}")
    return value.strip()


class TonePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    note: str
    degree: str = Field(pattern=DEGREE_PATTERN)

    @field_validator("note")
    @classmethod
    def _valid_note(cls, v: str) -> str:
        return _check_note(v)


class ChordPayload(BaseModel):
    """{root, tones:[{note, degree}], label?} for one chord."""

    model_config = ConfigDict(extra="forbid")

    root: str
    tones: List[TonePayload] = Field(min_length=1)
    label: Optional[str] = None

    @field_validator("root")
    @classmethod
    def _valid_root(cls, v: str) -> str:
        return _check_note(v)


class ScalePayload(BaseModel):
    """{label, root, tones:[{note, degree}]} for one scale, tones in order."""

    model_config = ConfigDict(extra="forbid")

    label: str = Field(min_length=1)
    root: str
    tones: List[TonePayload] = Field(min_length=2)

    @field_validator("root")
    @classmethod
    def _valid_root(cls, v: str) -> str:
        return _check_note(v)


_TONES_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "note": {"type": "string"},
            "degree": {"type": "string"},
        },
        "required": ["note", "degree"],
        "additionalProperties": False,
    },
}

CHORD_RESPONSE_SCHEMA = {
    "name": "chord_notes",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "root": {"type": "string"},
            "tones": dict(_TONES_SCHEMA, minItems=1),
        },
        "required": ["root", "tones"],
        "additionalProperties": False,
    },
}

SCALE_RESPONSE_SCHEMA = {
    "name": "scale_notes",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "label": {"type": "string"},
            "root": {"type": "string"},
            "tones": dict(_TONES_SCHEMA, minItems=2),
        },
        "required": ["label", "root", "tones"],
        "additionalProperties": False,
    },
}
