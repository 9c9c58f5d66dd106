"""COSIATEC - greedy compression of a point set into a pattern cover.

Each iteration recomputes the candidate TECs of the points that are still
uncovered, selects the best one [Meredith 2013] and removes the points it
covers. The loop ends when no point is left or no candidate compresses
better than listing its points one by one.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import DiscoveryConfig
from ..core import PatternCover, PointSet
from ..core.constants import MIN_PATTERN_SIZE
from ..processing import CompactnessFilter
from .heuristics import TecStats, stats_of
from .siatec import Siatec, SiatecCH


@dataclass
class CompressionStats:
    """Statistics from a compression run."""

    iterations: int = 0
    candidates_evaluated: int = 0
    selected: int = 0
    singletons: int = 0
    residual_size: int = 0


def compute_candidates(point_set: PointSet, config: DiscoveryConfig) -> List[TecStats]:
    """Ranked candidate TECs of point_set, best first.

    Candidates are the SIATEC (SIATEC-C with max_ioi, or SIATEC-CH) TECs of
    the point set and, unless disabled, their conjugates. Redundant
    translators are removed before the compactness filter runs.
    """
    if config.tec_algorithm == "siatec-ch":
        siatec = SiatecCH(max_ioi=config.max_ioi, min_pattern_size=MIN_PATTERN_SIZE)
    else:
        siatec = Siatec(
            max_ioi=config.max_ioi,
            min_pattern_size=MIN_PATTERN_SIZE,
            workers=config.workers,
        )
    candidates = []
    for tec in siatec.compute_tecs(point_set):
        candidates.append(tec)
        if config.use_conjugates:
            conjugate = tec.conjugate().restrict_to(point_set)
            if conjugate is not None:
                candidates.append(conjugate)

    if config.remove_redundant:
        candidates = [tec.remove_redundant_translators() for tec in candidates]

    compactness_filter = CompactnessFilter(config=config.compactness_config())
    scored = compactness_filter.scored(candidates, point_set)
    return sorted(
        (stats_of(tec, compactness) for tec, compactness in scored),
        key=TecStats.rank_key,
    )


class Cosiatec:
    """COSIATEC pattern discovery.

    Args:
        config: Discovery settings; defaults to DiscoveryConfig()
    """

    algorithm = "COSIATEC"

    def __init__(self, config: Optional[DiscoveryConfig] = None):
        self.config = (config or DiscoveryConfig()).validate()

    def best_tec(self, point_set: PointSet) -> Tuple[Optional[TecStats], int]:
        """Best candidate of point_set and the number of candidates ranked.

        The best candidate is None when it does not compress better than
        min_compression_ratio.
        """
        ranked = compute_candidates(point_set, self.config)
        if ranked and ranked[0].compression_ratio > self.config.min_compression_ratio:
            return ranked[0], len(ranked)
        return None, len(ranked)

    def compute_cover(
        self,
        point_set: PointSet,
        return_stats: bool = False,
    ) -> PatternCover | Tuple[PatternCover, CompressionStats]:
        """
        Compress point_set into a pattern cover.

        Args:
            point_set: Source point set; it is not modified
            return_stats: Whether to return compression statistics

        Returns:
            PatternCover in selection order, optionally with statistics
        """
        stats = CompressionStats()
        cover = PatternCover(source_size=len(point_set), algorithm=self.algorithm)
        remaining = point_set

        while len(remaining) >= MIN_PATTERN_SIZE:
            stats.iterations += 1
            best, evaluated = self.best_tec(remaining)
            stats.candidates_evaluated += evaluated
            if best is None:
                break
            cover.tecs.append(best.tec)
            remaining = remaining.difference(best.covered)

        stats.selected = len(cover.tecs)
        cover.close(remaining, as_singletons=self.config.residual_as_singletons)
        stats.singletons = len(cover.tecs) - stats.selected
        stats.residual_size = len(cover.residual)

        if return_stats:
            return cover, stats
        return cover
