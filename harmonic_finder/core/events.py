"""Event system for Harmonic Finder components."""

from typing import Any, Callable, Dict, List, Optional
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)

ResolutionListener = Callable[["ResolutionEventType", Dict[str, Any]], None]


class ResolutionEventType(Enum):
    """Event types emitted while resolving a chord or scale."""

    CACHE_HIT = auto()
    CACHE_MISS = auto()
    CACHE_WRITE_FAILED = auto()
    RESOLVED = auto()
    FAILED = auto()


class ResolutionEvents:
    """Dispatches resolver events to registered listeners.

    Listeners receive the event type and a payload dict (``kind``,
    ``cache_key``, ``elapsed_ms`` and, for failures, ``error``). A listener
    registered without an event type hears every event.
    """

    def __init__(self):
        self._listeners: Dict[Optional[ResolutionEventType], List[ResolutionListener]] = {}

    def on(
        self, callback: ResolutionListener, event_type: Optional[ResolutionEventType] = None
    ) -> None:
        """Register a callback for one event type, or for all of them.

        Args:
            callback: Function called with (event_type, payload)
            event_type: Event type to listen for, or None for every event
        """
        listeners = self._listeners.setdefault(event_type, [])
        if callback not in listeners:
            listeners.append(callback)
            logger.debug(f"Added listener for {event_type.name if event_type else 'all events'}")

    def emit(self, event_type: ResolutionEventType, **payload: Any) -> None:
        """Notify the listeners of one event.

        A failing listener is logged and skipped; it never interrupts the resolver.
        """
        for callback in self._listeners.get(event_type, []) + self._listeners.get(None, []):
            try:
                callback(event_type, payload)
            except Exception as e:
                logger.error(f"Error in listener for {event_type.name}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")
