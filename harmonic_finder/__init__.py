"""Harmonic Finder: fretboard notes, natural harmonics, keys and chords."""

__version__ = "0.1.0"
