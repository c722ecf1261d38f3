"""Response cache for resolved chords and scales.

Reads and writes are best-effort. A read that fails is a miss; a write that
fails is reported in its CacheWriteResult and the caller keeps its value.
"""

import hashlib
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.interfaces import ICacheStore
from ..logger import get_logger
from ..note_types import CacheWriteResult

logger = get_logger(__name__)

SCHEMA_VERSIONS = {
    "chord": "chord:v2",
    "scale": "scale:v2",
}

_WHITESPACE = re.compile(r"\s+")


def normalize_prompt_input(text: str) -> str:
    """Trim and collapse runs of whitespace to a single space."""
    return _WHITESPACE.sub(" ", text or "").strip()


def make_cache_prompt(kind: str, model: str, text: str) -> str:
    """Cache key for one request: schema version, model and normalized input.

    Examples:
        >>> make_cache_prompt('scale', 'gpt-4o-mini', '  D  dorian ')
        'scale:v2:<sha256 hex>'
    """
    if kind not in SCHEMA_VERSIONS:
        raise ValueError(f"Unknown cache kind: {kind}")
    version = SCHEMA_VERSIONS[kind]
    raw = f"{version}|model={model}|input={normalize_prompt_input(text)}"
    return f"{version}:{hashlib.sha256(raw.encode('utf-8')).hexdigest()}"


class MemoryCacheStore(ICacheStore):
    """Process-local cache, mostly for tests and one-shot CLI runs."""

    def __init__(self):
        self._values: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._values.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> CacheWriteResult:
        try:
            self._values[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            return CacheWriteResult(ok=False, error=str(e))
        return CacheWriteResult(ok=True)

    def __len__(self):
        return len(self._values)


class JsonFileCacheStore(ICacheStore):
    """Cache that keeps one JSON file per key in a directory."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{key.replace(':', '_')}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path_for(key)
        try:
            if not path.exists():
                return None
            with open(path, "r") as f:
                row = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if not isinstance(row, dict) or row.get("prompt") != key:
            return None
        return row.get("response")

    def set(self, key: str, value: Any) -> CacheWriteResult:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w") as f:
                json.dump({"prompt": key, "response": value}, f, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return CacheWriteResult(ok=False, error=str(e))
        logger.debug(f"Cached {key} in {path}")
        return CacheWriteResult(ok=True)


class NullCacheStore(ICacheStore):
    """Stand-in when caching is disabled: every read misses, every write fails."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any) -> CacheWriteResult:
        return CacheWriteResult(ok=False, error="cache not configured")
