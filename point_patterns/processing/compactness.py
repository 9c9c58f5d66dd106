"""Compactness filter - prune sparse and degenerate TECs before compression.

Compactness relates the number of points in a pattern to the size of the
region it spans. Non-compact patterns are rarely musically meaningful and
would dominate the compression loop, so they are removed beforehand.

Two measures are supported:
- region: |P| / number of points of the source set inside the bounding box
  of an occurrence, taking the best occurrence [Meredith 2013]. Always in
  (0, 1].
- span: |P| / prod(1 + weight_d * extent_d), a density over the weighted
  bounding box that lets pitch and time be scaled independently.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core import ConfigurationError, PointSet, Tec
from ..core.constants import COMPACTNESS_MEASURES, MIN_PATTERN_SIZE

# Occurrences whose bounding boxes are tested against the point set at once
_OCCURRENCE_BLOCK = 256


@dataclass
class CompactnessConfig:
    """Configuration for the compactness filter.

    Attributes:
        min_compactness: Minimum compactness to keep a TEC (default: 0.0)
        measure: "region" or "span" (default: "region")
        dimension_weights: Per-dimension scale used by the span measure
        min_pattern_size: Smaller patterns are always dropped (default: 2)
        deduplicate: Drop repeated TECs after the first (default: True)
    """

    min_compactness: float = 0.0
    measure: str = "region"
    dimension_weights: Optional[Tuple[float, ...]] = None
    min_pattern_size: int = MIN_PATTERN_SIZE
    deduplicate: bool = True


@dataclass
class FilterStats:
    """Statistics from a filtering pass."""

    original_count: int = 0
    final_count: int = 0
    removed_degenerate: int = 0
    removed_sparse: int = 0
    removed_duplicates: int = 0

    @property
    def total_removed(self) -> int:
        """Total TECs removed."""
        return self.original_count - self.final_count


def region_compactness(tec: Tec, point_set: PointSet) -> float:
    """Best ratio of pattern size to the number of points of point_set
    lying in the bounding box of an occurrence."""
    points = point_set.as_array()
    if len(points) == 0:
        return 0.0

    lower, upper = tec.pattern.bounds()
    translators = np.asarray(tec.translators)
    lowers = translators + np.asarray(lower)
    uppers = translators + np.asarray(upper)

    contained = len(points)
    for start in range(0, len(translators), _OCCURRENCE_BLOCK):
        block = slice(start, start + _OCCURRENCE_BLOCK)
        inside = np.all(
            (points[None, :, :] >= lowers[block, None, :])
            & (points[None, :, :] <= uppers[block, None, :]),
            axis=2,
        )
        contained = min(contained, int(inside.sum(axis=1).min()))
    if contained == 0:
        return 0.0
    return len(tec.pattern) / contained


def span_compactness(tec: Tec, weights: Optional[Sequence[float]] = None) -> float:
    """Pattern size over the weighted volume of its bounding box."""
    extents = tec.pattern.extents()
    if weights is None:
        weights = (1.0,) * len(extents)
    volume = 1.0
    for weight, extent in zip(weights, extents):
        volume *= 1.0 + weight * extent
    return len(tec.pattern) / volume


class CompactnessFilter:
    """Score TECs by compactness and drop the ones not worth compressing."""

    def __init__(
        self,
        min_compactness: float = 0.0,
        measure: str = "region",
        config: Optional[CompactnessConfig] = None,
    ):
        """Initialize CompactnessFilter.

        Args:
            min_compactness: Minimum compactness to keep a TEC
            measure: Compactness measure, "region" or "span"
            config: Optional CompactnessConfig for advanced settings

        Raises:
            ConfigurationError: If the measure is unknown or the threshold
                is negative
        """
        if config is not None:
            self.config = config
        else:
            self.config = CompactnessConfig(min_compactness=min_compactness, measure=measure)

        if self.config.measure not in COMPACTNESS_MEASURES:
            raise ConfigurationError(
                f"Unknown compactness measure {self.config.measure!r}. "
                f"Supported: {COMPACTNESS_MEASURES}"
            )
        if self.config.min_compactness < 0:
            raise ConfigurationError("min_compactness must not be negative")

    def score(self, tec: Tec, point_set: PointSet) -> float:
        """Compactness of a TEC relative to point_set."""
        if self.config.measure == "span":
            return span_compactness(tec, self.config.dimension_weights)
        return region_compactness(tec, point_set)

    def scored(
        self,
        tecs: List[Tec],
        point_set: PointSet,
        return_stats: bool = False,
    ) -> List[Tuple[Tec, float]] | Tuple[List[Tuple[Tec, float]], FilterStats]:
        """Filter TECs and pair every survivor with its compactness.

        Args:
            tecs: Candidate TECs, in the order they should be kept
            point_set: Point set the compactness is measured against
            return_stats: Whether to return filter statistics

        Returns:
            (tec, compactness) pairs, optionally with statistics
        """
        stats = FilterStats(original_count=len(tecs))
        seen = set()
        kept: List[Tuple[Tec, float]] = []

        for tec in tecs:
            if len(tec.pattern) < self.config.min_pattern_size:
                stats.removed_degenerate += 1
                continue
            if self.config.deduplicate:
                key = tec.sort_key()
                if key in seen:
                    stats.removed_duplicates += 1
                    continue
                seen.add(key)
            compactness = self.score(tec, point_set)
            if compactness < self.config.min_compactness:
                stats.removed_sparse += 1
                continue
            kept.append((tec, compactness))

        stats.final_count = len(kept)
        if return_stats:
            return kept, stats
        return kept

    def filter(
        self,
        tecs: List[Tec],
        point_set: PointSet,
        return_stats: bool = False,
    ) -> List[Tec] | Tuple[List[Tec], FilterStats]:
        """Filter TECs, dropping degenerate, duplicate and sparse ones."""
        kept, stats = self.scored(tecs, point_set, return_stats=True)
        result = [tec for tec, _ in kept]
        if return_stats:
            return result, stats
        return result
