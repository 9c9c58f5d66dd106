"""Discovery layer - Translational pattern discovery in point sets.

This layer finds repeated patterns:
- Difference vector index shared by every algorithm
- SIA / SIAR maximal translatable patterns
- SIATEC / SIATEC-C / SIATEC-CH translational equivalence classes
- COSIATEC and SIATECCompress pattern covers
- Exact and partial query matching
"""

from .vector_index import DifferenceVectorIndex, VectorGroup, group_differences
from .sia import Sia, SiaR, find_mtps
from .siatec import Siatec, SiatecCH, find_translators, split_on_ioi_gaps, distinct_shapes
from .heuristics import TecStats, stats_of
from .cosiatec import Cosiatec, CompressionStats, compute_candidates
from .siatec_compress import SiatecCompress
from .matching import QueryMatcher, PartialMatch

__all__ = [
    "DifferenceVectorIndex",
    "VectorGroup",
    "group_differences",
    "Sia",
    "SiaR",
    "find_mtps",
    "Siatec",
    "SiatecCH",
    "find_translators",
    "split_on_ioi_gaps",
    "distinct_shapes",
    "TecStats",
    "stats_of",
    "Cosiatec",
    "CompressionStats",
    "compute_candidates",
    "SiatecCompress",
    "QueryMatcher",
    "PartialMatch",
]
