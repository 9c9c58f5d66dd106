"""SIATECCompress - single-pass approximation of COSIATEC.

Candidates are computed and ranked once against the whole point set. The
ranking is then walked in order: each candidate is cut down to the
occurrences that lie entirely in the still uncovered points and kept if
that remainder still compresses. Patterns that were partly covered by an
earlier selection are never rediscovered as smaller patterns, so the cover
can contain more TECs than the one COSIATEC finds for the same input.
"""

from typing import Optional, Tuple

from ..config import DiscoveryConfig
from ..core import PatternCover, PointSet
from ..core.constants import MIN_PATTERN_SIZE
from .cosiatec import CompressionStats, compute_candidates


class SiatecCompress:
    """SIATECCompress pattern discovery.

    Args:
        config: Discovery settings; defaults to DiscoveryConfig()
    """

    algorithm = "SIATECCompress"

    def __init__(self, config: Optional[DiscoveryConfig] = None):
        self.config = (config or DiscoveryConfig()).validate()

    def compute_cover(
        self,
        point_set: PointSet,
        return_stats: bool = False,
    ) -> PatternCover | Tuple[PatternCover, CompressionStats]:
        """
        Compress point_set into a pattern cover in a single ranking pass.

        Args:
            point_set: Source point set; it is not modified
            return_stats: Whether to return compression statistics

        Returns:
            PatternCover in selection order, optionally with statistics
        """
        stats = CompressionStats()
        cover = PatternCover(source_size=len(point_set), algorithm=self.algorithm)
        remaining = point_set

        if len(point_set) >= MIN_PATTERN_SIZE:
            ranked = compute_candidates(point_set, self.config)
            stats.candidates_evaluated = len(ranked)

            for candidate in ranked:
                if len(remaining) < MIN_PATTERN_SIZE:
                    break
                stats.iterations += 1
                tec = candidate.tec.restrict_to(remaining)
                if tec is None:
                    continue
                if self.config.remove_redundant:
                    tec = tec.remove_redundant_translators()
                covered = tec.covered_set()
                if len(covered) / tec.encoding_cost > self.config.min_compression_ratio:
                    cover.tecs.append(tec)
                    remaining = remaining.difference(covered)

        stats.selected = len(cover.tecs)
        cover.close(remaining, as_singletons=self.config.residual_as_singletons)
        stats.singletons = len(cover.tecs) - stats.selected
        stats.residual_size = len(cover.residual)

        if return_stats:
            return cover, stats
        return cover
