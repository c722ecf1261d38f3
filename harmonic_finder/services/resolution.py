"""Chord and scale resolution through an OpenAI-compatible chat-completions API."""

import json
import urllib.error
import urllib.request
from typing import Any, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from ..core.interfaces import IResolutionService
from ..logger import get_logger
from .schemas import CHORD_RESPONSE_SCHEMA, SCALE_RESPONSE_SCHEMA, ChordPayload, ScalePayload

logger = get_logger(__name__)

# (url, body, headers, timeout) -> (status, response body)
Transport = Callable[[str, bytes, Dict[str, str], float], Tuple[int, bytes]]

CHORD_SYSTEM_PROMPT = (
    "You are a music theory assistant. Convert chord symbols into chord tones with correct "
    "enharmonic spellings and explicit chord-degree labels. Return only JSON."
)

SCALE_SYSTEM_PROMPT = (
    "You are a music theory assistant. Convert a key/scale description into scale tones with "
    "correct enharmonic spellings and explicit degree labels. Return only JSON."
)


def chord_user_prompt(text: str) -> str:
    return (
        f"Chord: {text}\n"
        "Return JSON with:\n"
        '- root: root note name (pitch class only, no octave), e.g. "C#", "Gb"\n'
        "- tones: array of objects { note, degree }\n"
        "  - note: pitch-class note name (no octave), spelled consistently with the chord symbol.\n"
        "  - degree: chord degree label. Use extensions when appropriate (9/11/13) and "
        "alterations like b9/#9/#11/b13.\n"
        "    Examples: 1, b3, 3, 5, b7, 7, 9, b9, #9, 11, #11, 13, b13\n"
    )


def scale_user_prompt(text: str) -> str:
    return (
        f"Scale: {text}\n"
        "Return JSON with:\n"
        '- label: a nice display label (e.g. "Gb mixolydian")\n'
        '- root: root note name (e.g. "Gb")\n'
        "- tones: ordered array of { note, degree }\n"
        "  - note: pitch-class note name (no octaves), using correct enharmonics for the scale.\n"
        "  - degree: scale degree label relative to the root, using 1-7 with optional "
        "accidentals (e.g. b3, #4, b5).\n"
        "    Use chromatic degrees for passing tones if requested.\n"
    )


def urllib_transport(
    url: str, body: bytes, headers: Dict[str, str], timeout: float
) -> Tuple[int, bytes]:
    """POST with the standard library; HTTP error statuses are returned, not raised."""
    request = urllib.request.Request(url, data=body, headers=headers, method="POST")
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return response.status, response.read()
    except urllib.error.HTTPError as e:
        return e.code, e.read() or b""


class OpenAIResolutionService(IResolutionService):
    """Resolves chord symbols and scale names with a single chat-completions call.

    Every failure (no network, timeout, non-2xx status, missing content,
    invalid JSON, schema violation, unparsable note or degree) yields None.
    There is no retry and no partial extraction.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        api_url: str = "https://api.openai.com/v1/chat/completions",
        timeout: float = 20.0,
        transport: Optional[Transport] = None,
    ):
        if not api_key:
            raise ValueError("An API key is required for the resolution service")
        self._api_key = api_key
        self._model = model
        self.api_url = api_url
        self.timeout = float(timeout)
        self._transport = transport or urllib_transport

    @property
    def model(self) -> str:
        return self._model

    def resolve_chord(self, text: str) -> Optional[Dict[str, Any]]:
        return self._resolve(
            CHORD_SYSTEM_PROMPT, chord_user_prompt(text), CHORD_RESPONSE_SCHEMA, ChordPayload
        )

    def resolve_scale(self, text: str) -> Optional[Dict[str, Any]]:
        return self._resolve(
            SCALE_SYSTEM_PROMPT, scale_user_prompt(text), SCALE_RESPONSE_SCHEMA, ScalePayload
        )

    def build_request(self, system: str, user: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "response_format": {"type": "json_schema", "json_schema": schema},
        }

    def _resolve(
        self,
        system: str,
        user: str,
        schema: Dict[str, Any],
        payload_cls: Type[BaseModel],
    ) -> Optional[Dict[str, Any]]:
        body = json.dumps(self.build_request(system, user, schema)).encode("utf-8")
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            status, raw = self._transport(self.api_url, body, headers, self.timeout)
        except OSError as e:
            # URLError, socket timeouts and connection resets all land here
            logger.error(f"Resolution request failed: {e}")
            return None

        if not 200 <= status < 300:
            logger.error(f"Resolution service returned HTTP {status}")
            return None

        try:
            data = json.loads(raw)
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Malformed resolution response: {e}")
            return None
        if not isinstance(content, str) or not content:
            logger.warning("Resolution response had no content")
            return None

        try:
            payload = payload_cls.model_validate_json(content)
        except ValidationError as e:
            logger.warning(
                f"Resolution payload rejected ({e.error_count()} error(s)): {content[:200]}"
            )
            return None

        logger.debug(f"Resolved payload: {payload}")
        return payload.model_dump()
