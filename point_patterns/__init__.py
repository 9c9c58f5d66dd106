"""Point Patterns - Translational pattern discovery in symbolic music.

Architecture Layers:
    1. core/        - Points, point sets, patterns, TECs and pattern covers
    2. input/       - Point set loading (CSV/TSV tables, MIDI)
    3. discovery/   - Vector index, SIA/SIAR, SIATEC/SIATEC-C, COSIATEC,
                      SIATECCompress, query matching
    4. processing/  - Candidate pruning (compactness filter)
    5. output/      - Export (JSON reports, MIDI)
"""

__version__ = "0.1.0"

# Core types
from .core import (
    PointSet,
    Pattern,
    Mtp,
    Tec,
    PatternCover,
    PointPatternsError,
    MalformedInputError,
    ConfigurationError,
    CapacityError,
)

# Input layer
from .input import PointSetLoader

# Discovery layer
from .discovery import (
    DifferenceVectorIndex,
    Sia,
    SiaR,
    Siatec,
    SiatecCH,
    Cosiatec,
    SiatecCompress,
    QueryMatcher,
)

# Processing layer
from .processing import CompactnessFilter, CompactnessConfig

# Output layer
from .output import JSONReportWriter, CoverMIDIExporter

from .config import DiscoveryConfig
from .pipeline import discover_patterns

__all__ = [
    # Core
    "PointSet",
    "Pattern",
    "Mtp",
    "Tec",
    "PatternCover",
    "PointPatternsError",
    "MalformedInputError",
    "ConfigurationError",
    "CapacityError",
    # Input
    "PointSetLoader",
    # Discovery
    "DifferenceVectorIndex",
    "Sia",
    "SiaR",
    "Siatec",
    "SiatecCH",
    "Cosiatec",
    "SiatecCompress",
    "QueryMatcher",
    # Processing
    "CompactnessFilter",
    "CompactnessConfig",
    # Output
    "JSONReportWriter",
    "CoverMIDIExporter",
    # Pipeline
    "DiscoveryConfig",
    "discover_patterns",
]
