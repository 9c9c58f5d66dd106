"""Heuristics used to rank candidate TECs during compression.

The compression ratio of a TEC is the number of points it covers divided by
the number of points needed to encode it (pattern points plus non-zero
translators). Candidates are compared by the ranking key of TecStats:

    higher compression ratio, higher compactness, more covered points,
    larger pattern, smaller width, smaller area, then the smallest
    (pattern points, translators)

The last component makes the order total, so ranking is deterministic.
"""

from dataclasses import dataclass
from typing import Tuple

from ..core import Number, PointSet, Tec


@dataclass(frozen=True)
class TecStats:
    """A candidate TEC together with the quantities it is ranked by.

    Attributes:
        tec: Candidate TEC
        covered: Points covered by the TEC's occurrences
        compression_ratio: len(covered) / tec.encoding_cost
        compactness: Compactness score from the compactness filter
        width: Extent of the pattern along the onset dimension
        area: Product of the pattern's extents
    """

    tec: Tec
    covered: PointSet
    compression_ratio: float
    compactness: float
    width: Number
    area: Number

    @property
    def covered_count(self) -> int:
        return len(self.covered)

    @property
    def pattern_size(self) -> int:
        return len(self.tec.pattern)

    def rank_key(self) -> Tuple:
        """Sort key placing the best candidate first."""
        return (
            -self.compression_ratio,
            -self.compactness,
            -self.covered_count,
            -self.pattern_size,
            self.width,
            self.area,
            self.tec.pattern.points,
            self.tec.translators,
        )

    def is_better_than(self, other: "TecStats") -> bool:
        return self.rank_key() < other.rank_key()


def stats_of(tec: Tec, compactness: float) -> TecStats:
    """Compute the ranking quantities of a TEC."""
    covered = tec.covered_set()
    return TecStats(
        tec=tec,
        covered=covered,
        compression_ratio=len(covered) / tec.encoding_cost,
        compactness=compactness,
        width=tec.pattern.width,
        area=tec.pattern.area,
    )
