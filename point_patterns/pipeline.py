"""Discovery pipeline entry point.

    points -> PointSet -> difference vector index -> SIA -> SIATEC
        -> compactness filter -> COSIATEC / SIATECCompress -> PatternCover
"""

from typing import Optional, Tuple

from .config import DiscoveryConfig
from .core import PatternCover, PointSet
from .discovery import CompressionStats, Cosiatec, SiatecCompress


def discover_patterns(
    point_set: PointSet,
    config: Optional[DiscoveryConfig] = None,
    return_stats: bool = False,
) -> PatternCover | Tuple[PatternCover, CompressionStats]:
    """Compress a point set into a pattern cover.

    Args:
        point_set: Source point set; it is not modified
        config: Discovery settings. compression_mode "exact" runs COSIATEC,
            "fast" runs SIATECCompress.
        return_stats: Whether to return compression statistics

    Returns:
        PatternCover whose occurrences and residual together are exactly
        point_set, optionally with statistics

    Raises:
        ConfigurationError: If the configuration is invalid for point_set
        CapacityError: If the difference vector index does not fit in memory
    """
    config = config or DiscoveryConfig()
    config.validate(point_set.dims)

    if config.compression_mode == "fast":
        engine = SiatecCompress(config)
    else:
        engine = Cosiatec(config)
    return engine.compute_cover(point_set, return_stats=return_stats)
