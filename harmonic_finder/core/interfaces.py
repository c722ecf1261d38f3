"""Defines the core interfaces for the Harmonic Finder application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..note_types import CacheWriteResult


class IResolutionService(ABC):
    """Interface for services that turn chord or scale text into tone lists."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Identifier of the model answering requests, part of the cache key."""
        pass

    @abstractmethod
    def resolve_chord(self, text: str) -> Optional[Dict[str, Any]]:
        """Return a validated {root, tones, label?} payload, or None on any failure."""
        pass

    @abstractmethod
    def resolve_scale(self, text: str) -> Optional[Dict[str, Any]]:
        """Return a validated {label, root, tones} payload, or None on any failure."""
        pass


class ICacheStore(ABC):
    """Interface for the key to JSON response cache."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or when the store is unreachable."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> CacheWriteResult:
        """Store a value; failures are reported in the result, never raised."""
        pass
