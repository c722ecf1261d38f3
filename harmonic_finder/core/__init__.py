"""Core components for the Harmonic Finder application."""

# Import interfaces for easier access
from .interfaces import ICacheStore, IResolutionService

__all__ = ["ICacheStore", "IResolutionService"]
