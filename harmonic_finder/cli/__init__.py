"""Command-line interface for Harmonic Finder."""

from .main import cli, main

__all__ = ["cli", "main"]
