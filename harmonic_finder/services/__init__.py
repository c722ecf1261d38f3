"""Chord and scale resolution: service client, response cache and resolvers."""

from .cache import (
    JsonFileCacheStore,
    MemoryCacheStore,
    NullCacheStore,
    make_cache_prompt,
    normalize_prompt_input,
)
from .resolution import OpenAIResolutionService
from .resolvers import ChordResolver, ScaleResolver

__all__ = [
    "JsonFileCacheStore",
    "MemoryCacheStore",
    "NullCacheStore",
    "make_cache_prompt",
    "normalize_prompt_input",
    "OpenAIResolutionService",
    "ChordResolver",
    "ScaleResolver",
]
