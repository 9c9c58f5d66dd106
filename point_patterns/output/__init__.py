"""Output layer - Export of discovered patterns.

This layer handles exporting pattern covers to:
- JSON pattern reports
- MIDI files, one instrument per pattern
"""

from .report import JSONReportWriter
from .midi import CoverMIDIExporter

__all__ = [
    "JSONReportWriter",
    "CoverMIDIExporter",
]
