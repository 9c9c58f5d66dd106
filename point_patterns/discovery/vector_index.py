"""Difference vector index - the shared substrate of SIA, SIATEC and matching.

For a point set of size N the index holds every forward difference
p_j - p_i (i < j in lexicographic order), sorted by vector and grouped so
that each distinct vector maps to the ordered list of index pairs that
produce it. Building it is O(N^2) in time and memory and dominates the
cost of the whole pipeline, so pair generation and sorting are done with
numpy; the grouping is an explicit lexsort followed by a linear pass.
"""

from bisect import bisect_left
from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..core import CapacityError, PointSet, Vector


@dataclass
class VectorGroup:
    """All forward index pairs (i, j) with point_j - point_i == vector."""

    vector: Vector
    pairs: Tuple[Tuple[int, int], ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.pairs)

    @property
    def sources(self) -> Tuple[int, ...]:
        """Indices i of the pairs, ascending."""
        return tuple(i for i, _ in self.pairs)

    @cached_property
    def successors(self) -> Dict[int, int]:
        """Map from source index i to the index j it translates onto."""
        return dict(self.pairs)


def group_differences(
    diffs: np.ndarray,
    tiebreakers: Sequence[np.ndarray] = (),
) -> List[Tuple[Vector, np.ndarray]]:
    """Sort difference rows and split them into runs of equal vectors.

    Args:
        diffs: (m, d) array of difference vectors
        tiebreakers: Arrays of length m ordering rows with equal vectors,
            most significant first

    Returns:
        List of (vector, row indices into diffs) in ascending vector order
    """
    if len(diffs) == 0:
        return []

    dims = diffs.shape[1]
    # lexsort treats the last key as primary
    keys = tuple(reversed(tiebreakers)) + tuple(diffs[:, k] for k in reversed(range(dims)))
    order = np.lexsort(keys)
    ordered = diffs[order]

    changed = np.any(ordered[1:] != ordered[:-1], axis=1)
    starts = np.flatnonzero(np.concatenate(([True], changed)))
    ends = np.append(starts[1:], len(order))

    vectors = ordered[starts].tolist()
    return [
        (tuple(vector), order[start:end])
        for vector, start, end in zip(vectors, starts, ends)
    ]


class DifferenceVectorIndex:
    """Sorted, grouped table of the forward difference vectors of a point set.

    Args:
        point_set: Source point set
        subdiagonals: Only pair each point with the next r points (SIAR)
        max_ioi: Only keep vectors whose first component (the inter-onset
            interval) is at most this value (SIATEC-C)

    Raises:
        CapacityError: If the pairwise table cannot be allocated
    """

    def __init__(
        self,
        point_set: PointSet,
        subdiagonals: Optional[int] = None,
        max_ioi: Optional[float] = None,
    ):
        self.point_set = point_set
        self.subdiagonals = subdiagonals
        self.max_ioi = max_ioi
        self.groups: List[VectorGroup] = self._build()
        self._vectors: List[Vector] = [group.vector for group in self.groups]

    def _build(self) -> List[VectorGroup]:
        n = len(self.point_set)
        if n < 2:
            return []

        try:
            points = self.point_set.as_array()
            sources, targets = np.triu_indices(n, k=1)
            if self.subdiagonals is not None:
                keep = (targets - sources) <= self.subdiagonals
                sources, targets = sources[keep], targets[keep]

            diffs = points[targets] - points[sources]
            if self.max_ioi is not None:
                keep = diffs[:, 0] <= self.max_ioi
                sources, targets, diffs = sources[keep], targets[keep], diffs[keep]

            runs = group_differences(diffs, (sources, targets))
        except MemoryError as e:
            raise CapacityError(
                f"Difference vector index for {n} points needs {n * (n - 1) // 2} "
                "pairs and does not fit in memory"
            ) from e

        source_list = sources.tolist()
        target_list = targets.tolist()
        return [
            VectorGroup(
                vector=vector,
                pairs=tuple((source_list[r], target_list[r]) for r in rows.tolist()),
            )
            for vector, rows in runs
        ]

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self) -> Iterator[VectorGroup]:
        return iter(self.groups)

    def __getitem__(self, index: int) -> VectorGroup:
        return self.groups[index]

    @property
    def vectors(self) -> List[Vector]:
        return list(self._vectors)

    @property
    def pair_count(self) -> int:
        return sum(len(group) for group in self.groups)

    def lookup(self, vector: Vector) -> Optional[VectorGroup]:
        """Group for vector by binary search, or None if no pair produces it."""
        vector = tuple(vector)
        position = bisect_left(self._vectors, vector)
        if position < len(self._vectors) and self._vectors[position] == vector:
            return self.groups[position]
        return None
