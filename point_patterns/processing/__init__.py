"""Processing layer - Candidate pruning between TEC construction and compression.

This layer refines the candidate TECs:
- Compactness scoring (region and weighted span measures)
- Degenerate pattern removal
- Duplicate TEC removal
"""

from .compactness import (
    CompactnessFilter,
    CompactnessConfig,
    FilterStats,
    region_compactness,
    span_compactness,
)

__all__ = [
    "CompactnessFilter",
    "CompactnessConfig",
    "FilterStats",
    "region_compactness",
    "span_compactness",
]
