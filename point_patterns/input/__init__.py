"""Input layer - Point set loading from tables and MIDI files."""

from .loader import PointSetLoader

__all__ = ["PointSetLoader"]
