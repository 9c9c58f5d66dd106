"""SIA and SIAR - maximal translatable pattern discovery.

SIA [Meredith et al. 2002] finds every MTP of a point set: for each
distinct forward difference vector v, the points that translate by v onto
another point of the set form one MTP.

SIAR [Collins 2011] restricts the first pass to the r nearest neighbours
of every point and then recovers the full MTPs of the most frequent
intra-pattern vectors.
"""

from collections import Counter
from typing import List, Optional

from ..core import Mtp, PointSet, add, subtract
from .vector_index import DifferenceVectorIndex


def find_mtps(index: DifferenceVectorIndex) -> List[Mtp]:
    """One MTP per vector group of the index, in ascending vector order.

    Every i-side of a group belongs to the MTP. For a fixed vector and
    source point the target point is unique, so the group holds each
    source index once and the pattern is complete.
    """
    point_set = index.point_set
    return [
        Mtp(translator=group.vector, pattern=point_set.get_pattern(group.sources))
        for group in index
    ]


class Sia:
    """Computes all MTPs of a point set."""

    def compute_mtps(
        self,
        point_set: PointSet,
        index: Optional[DifferenceVectorIndex] = None,
    ) -> List[Mtp]:
        """
        Compute all MTPs.

        Args:
            point_set: Source point set
            index: Prebuilt difference vector index to reuse

        Returns:
            MTPs sorted by translator. Patterns are not deduplicated by
            shape; each carries its own driving vector.
        """
        if index is None:
            index = DifferenceVectorIndex(point_set)
        return find_mtps(index)


class SiaR:
    """SIAR: MTPs for the vectors found among the r nearest neighbours.

    Args:
        subdiagonals: Number of following points each point is paired with
            in the first pass (the r parameter)
    """

    def __init__(self, subdiagonals: int = 3):
        if subdiagonals < 1:
            raise ValueError("subdiagonals must be at least 1")
        self.subdiagonals = subdiagonals

    def compute_mtps(self, point_set: PointSet) -> List[Mtp]:
        """Return MTPs ordered by descending frequency of their vector
        within the first-pass patterns, ties broken by vector order."""
        index = DifferenceVectorIndex(point_set, subdiagonals=self.subdiagonals)

        frequencies: Counter = Counter()
        for mtp in find_mtps(index):
            points = mtp.pattern.points
            for i in range(len(points) - 1):
                for j in range(i + 1, len(points)):
                    frequencies[subtract(points[j], points[i])] += 1

        ranked = sorted(frequencies.items(), key=lambda item: (-item[1], item[0]))

        mtps = []
        for vector, _ in ranked:
            sources = [i for i, p in enumerate(point_set) if add(p, vector) in point_set]
            if sources:
                mtps.append(Mtp(translator=vector, pattern=point_set.get_pattern(sources)))
        return mtps
