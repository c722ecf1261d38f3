"""Turn chord and scale text into ParsedChord / KeySignature values.

A resolver combines three sources, cheapest first: built-in knowledge
(the 24 keys, or the local chord grammar when no service is configured),
the response cache, and the resolution service. Only service results are
cached.
"""

import time
from typing import Any, Dict, Optional

from ..core.events import ResolutionEvents, ResolutionEventType
from ..core.interfaces import ICacheStore, IResolutionService
from ..logger import get_logger
from ..note_types import KeySignature, ParsedChord, Resolution
from ..theory.chords import chord_from_tones, parse_chord_locally
from ..theory.keys import find_key, key_from_tones
from .cache import NullCacheStore, make_cache_prompt, normalize_prompt_input

logger = get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _tone_pairs(payload: Dict[str, Any]):
    return [(tone["note"], tone["degree"]) for tone in payload["tones"]]


class BaseResolver:
    """Shared cache-then-service flow for chords and scales."""

    kind = ""

    def __init__(
        self,
        service: Optional[IResolutionService] = None,
        cache: Optional[ICacheStore] = None,
        events: Optional[ResolutionEvents] = None,
        log_timings: bool = False,
    ):
        self.service = service
        self.cache = cache if cache is not None else NullCacheStore()
        self.events = events if events is not None else ResolutionEvents()
        self.log_timings = log_timings

    def _call_service(self, text: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def _translate(self, payload: Dict[str, Any]) -> Optional[Any]:
        raise NotImplementedError

    def _deserialize(self, data: Dict[str, Any]) -> Any:
        raise NotImplementedError

    def _fallback(self, text: str) -> Optional[Any]:
        return None

    def _finish(self, resolution: Resolution, start: float) -> Resolution:
        resolution.timings["total_ms"] = _elapsed_ms(start)
        if self.log_timings:
            logger.info(
                f"[timing] {self.kind} cache={resolution.cache} "
                f"source={resolution.source} {resolution.timings}"
            )
        return resolution

    def _fail(self, start: float, **fields: Any) -> Resolution:
        error = f"Unable to parse {self.kind}"
        self.events.emit(
            ResolutionEventType.FAILED,
            kind=self.kind,
            cache_key=fields.get("cache_key"),
            elapsed_ms=_elapsed_ms(start),
            error=error,
        )
        return self._finish(Resolution(error=error, **fields), start)

    def resolve(self, text: str) -> Resolution:
        """Resolve free text; never raises for bad input or collaborator failures."""
        start = time.perf_counter()
        normalized = normalize_prompt_input(text if isinstance(text, str) else "")
        if not normalized:
            return Resolution(error=f"{self.kind.capitalize()} is required")

        builtin = self._builtin(normalized)
        if builtin is not None:
            source = "builtin" if self.kind == "scale" else "local"
            self.events.emit(
                ResolutionEventType.RESOLVED,
                kind=self.kind,
                cache_key=None,
                elapsed_ms=_elapsed_ms(start),
            )
            return self._finish(Resolution(value=builtin, source=source), start)

        if self.service is None:
            fallback = self._fallback(normalized)
            if fallback is not None:
                return self._finish(Resolution(value=fallback, source="local"), start)
            return self._fail(start)

        cache_key = make_cache_prompt(self.kind, self.service.model, normalized)
        timings: Dict[str, float] = {}

        step = time.perf_counter()
        cached = self._read_cache(cache_key)
        timings["cache_get_ms"] = _elapsed_ms(step)
        if cached is not None:
            logger.info(f"Cache HIT for {self.kind} '{normalized}'")
            self.events.emit(
                ResolutionEventType.CACHE_HIT,
                kind=self.kind,
                cache_key=cache_key,
                elapsed_ms=_elapsed_ms(start),
            )
            return self._finish(
                Resolution(
                    value=cached, source=cached.source, cache="HIT",
                    cache_key=cache_key, timings=timings,
                ),
                start,
            )

        self.events.emit(
            ResolutionEventType.CACHE_MISS,
            kind=self.kind,
            cache_key=cache_key,
            elapsed_ms=_elapsed_ms(start),
        )

        step = time.perf_counter()
        value = None
        try:
            payload = self._call_service(normalized)
            if payload is not None:
                value = self._translate(payload)
        except Exception as e:
            logger.error(f"Resolution service error for {self.kind} '{normalized}': {e}")
        timings["service_ms"] = _elapsed_ms(step)

        if value is None:
            fallback = self._fallback(normalized)
            if fallback is not None:
                logger.info(f"Using local {self.kind} parse for '{normalized}'")
                return self._finish(
                    Resolution(
                        value=fallback, source="local", cache="MISS",
                        cache_key=cache_key, timings=timings,
                    ),
                    start,
                )
            return self._fail(start, cache="MISS", cache_key=cache_key, timings=timings)

        step = time.perf_counter()
        write = self.cache.set(cache_key, value.to_dict())
        timings["cache_set_ms"] = _elapsed_ms(step)
        if not write.ok:
            logger.warning(f"Cache write failed for {self.kind}: {write.error}")
            self.events.emit(
                ResolutionEventType.CACHE_WRITE_FAILED,
                kind=self.kind,
                cache_key=cache_key,
                elapsed_ms=_elapsed_ms(start),
                error=write.error,
            )

        self.events.emit(
            ResolutionEventType.RESOLVED,
            kind=self.kind,
            cache_key=cache_key,
            elapsed_ms=_elapsed_ms(start),
        )
        return self._finish(
            Resolution(
                value=value,
                source=value.source,
                cache="MISS",
                cache_key=cache_key,
                cache_write="OK" if write.ok else "ERR",
                cache_write_error=write.error,
                timings=timings,
            ),
            start,
        )

    def _builtin(self, text: str) -> Optional[Any]:
        return None

    def _read_cache(self, cache_key: str) -> Optional[Any]:
        try:
            data = self.cache.get(cache_key)
        except OSError as e:
            logger.warning(f"Cache read failed for {cache_key}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        try:
            return self._deserialize(data)
        except (KeyError, TypeError, ValueError) as e:
            # A stale or corrupt entry is a miss; it is overwritten below
            logger.warning(f"Ignoring unreadable cache entry {cache_key}: {e}")
            return None


class ChordResolver(BaseResolver):
    """Resolves chord symbols; the local grammar covers a missing or failing service."""

    kind = "chord"

    def _call_service(self, text: str) -> Optional[Dict[str, Any]]:
        return self.service.resolve_chord(text)

    def _translate(self, payload: Dict[str, Any]) -> Optional[ParsedChord]:
        return chord_from_tones(payload["root"], _tone_pairs(payload), payload.get("label"))

    def _deserialize(self, data: Dict[str, Any]) -> ParsedChord:
        return ParsedChord.from_dict(data)

    def _fallback(self, text: str) -> Optional[ParsedChord]:
        return parse_chord_locally(text)


class ScaleResolver(BaseResolver):
    """Resolves key and scale names; the 24 major/minor keys need no service call."""

    kind = "scale"

    def _builtin(self, text: str) -> Optional[KeySignature]:
        return find_key(text)

    def _call_service(self, text: str) -> Optional[Dict[str, Any]]:
        return self.service.resolve_scale(text)

    def _translate(self, payload: Dict[str, Any]) -> Optional[KeySignature]:
        return key_from_tones(payload["label"], payload["root"], _tone_pairs(payload))

    def _deserialize(self, data: Dict[str, Any]) -> KeySignature:
        return KeySignature.from_dict(data)


