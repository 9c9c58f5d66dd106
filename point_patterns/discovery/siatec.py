"""SIATEC, SIATEC-C and SIATEC-CH - translational equivalence class construction.

SIATEC [Meredith et al. 2002] computes the TEC of every MTP. MTPs with the
same shape share one TEC, so they are merged by their vectorized form
before translators are searched for.

Translators are found by walking the difference vector index: starting
from every pair that realises the pattern's first adjacent difference, a
candidate occurrence survives only while each following difference leads
on to another point of the set. No coordinate is ever added during the
search, only looked up.
"""

from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..core import Pattern, PointSet, Tec, Vector, subtract
from .sia import find_mtps
from .vector_index import DifferenceVectorIndex


def find_translators(pattern: Pattern, index: DifferenceVectorIndex) -> List[Vector]:
    """All vectors that move pattern onto a subset of the indexed point set.

    Args:
        pattern: Pattern whose points belong to the indexed point set
        index: Difference vector index holding every adjacent difference
            of the pattern

    Returns:
        Translators in ascending order, including the zero vector
    """
    point_set = index.point_set
    anchor = pattern[0]
    if len(pattern) == 1:
        return [subtract(q, anchor) for q in point_set]

    shape = pattern.vectorize()
    first = index.lookup(shape[0])
    if first is None:
        return []

    # start index -> index of the point the chain has reached
    chains: Dict[int, int] = dict(first.pairs)
    for step in shape[1:]:
        group = index.lookup(step)
        if group is None:
            return []
        successors = group.successors
        chains = {
            start: successors[end] for start, end in chains.items() if end in successors
        }
        if not chains:
            return []

    return [subtract(point_set[start], anchor) for start in sorted(chains)]


def split_on_ioi_gaps(pattern: Pattern, max_ioi: float) -> List[Pattern]:
    """Split a pattern wherever consecutive onsets are more than max_ioi apart."""
    pieces: List[List[tuple]] = [[]]
    previous = pattern[0]
    for point in pattern:
        if point[0] - previous[0] > max_ioi:
            pieces.append([])
        pieces[-1].append(point)
        previous = point
    return [Pattern._from_sorted(piece, pattern.dims) for piece in pieces]


def distinct_shapes(patterns: Iterable[Pattern]) -> List[Pattern]:
    """Keep the first pattern of every translational equivalence class."""
    seen = set()
    distinct = []
    for pattern in patterns:
        key = pattern.vectorize()
        if key not in seen:
            seen.add(key)
            distinct.append(pattern)
    return distinct


class Siatec:
    """Computes the TECs of the MTPs of a point set.

    Args:
        max_ioi: When set, run SIATEC-C: only difference vectors with an
            inter-onset interval of at most max_ioi are indexed and MTP
            patterns are split at larger onset gaps
        min_pattern_size: Patterns smaller than this get no TEC (SIATEC-C
            always skips one-point pieces)
        workers: Number of processes used for the translator search
    """

    def __init__(
        self,
        max_ioi: Optional[float] = None,
        min_pattern_size: int = 1,
        workers: int = 1,
    ):
        self.max_ioi = max_ioi
        self.min_pattern_size = min_pattern_size
        self.workers = workers

    def compute_tecs(
        self,
        point_set: PointSet,
        index: Optional[DifferenceVectorIndex] = None,
    ) -> List[Tec]:
        """
        Compute one TEC per distinct MTP shape.

        Args:
            point_set: Source point set
            index: Prebuilt difference vector index to reuse

        Returns:
            TECs in canonical form (pattern at its smallest occurrence),
            sorted by pattern points and then translators
        """
        if len(point_set) < 2:
            return []
        if index is None:
            index = DifferenceVectorIndex(point_set, max_ioi=self.max_ioi)

        patterns = [mtp.pattern for mtp in find_mtps(index)]
        if self.max_ioi is not None:
            patterns = [
                piece
                for pattern in patterns
                for piece in split_on_ioi_gaps(pattern, self.max_ioi)
                if len(piece) > 1
            ]
        patterns = [p for p in distinct_shapes(patterns) if len(p) >= self.min_pattern_size]

        tecs: Dict[Tuple, Tec] = {}
        for pattern, translators in zip(patterns, self._search(patterns, index)):
            tec = Tec(pattern, tuple(translators)).restrict_to(point_set)
            if tec is not None:
                tecs.setdefault(tec.sort_key(), tec)

        return [tecs[key] for key in sorted(tecs)]

    def _search(self, patterns: List[Pattern], index: DifferenceVectorIndex) -> List[List[Vector]]:
        """Translator search, fanned out over processes when workers > 1.

        Executor.map keeps the input order, so the result does not depend
        on the number of workers.
        """
        search = partial(find_translators, index=index)
        if self.workers <= 1 or len(patterns) < 2 * self.workers:
            return [search(pattern) for pattern in patterns]

        chunksize = max(1, len(patterns) // (self.workers * 4))
        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(search, patterns, chunksize=chunksize))


class SiatecCH:
    """SIATEC-CH, a cover-driven variant of SIATEC-C.

    Forward differences are generated in onset windows of width max_ioi:
    in round k every point is paired with the points whose onset lies in
    (onset + (k-1)*max_ioi, onset + k*max_ioi]. The MTPs of a round are
    split at onset gaps larger than max_ioi, and a piece gets a TEC only
    if it improves the cover, i.e. at least one point of its source or
    target occurrence is so far covered only by smaller patterns. Within
    a round, smaller pieces are handled first.

    Far fewer TECs are produced than by SIATEC-C, at the cost of missing
    patterns whose points were already covered by larger ones.

    Args:
        max_ioi: Maximum inter-onset interval inside a pattern, and the
            width of a window
        min_pattern_size: Smaller pieces get no TEC (at least 2)
    """

    def __init__(self, max_ioi: float, min_pattern_size: int = 2):
        self.max_ioi = max_ioi
        self.min_pattern_size = max(2, min_pattern_size)

    def compute_tecs(
        self,
        point_set: PointSet,
        index: Optional[DifferenceVectorIndex] = None,
    ) -> List[Tec]:
        """Compute the TECs that improve the cover, sorted like Siatec's output.

        Args:
            point_set: Source point set
            index: Prebuilt difference vector index restricted to max_ioi
        """
        if len(point_set) < 2:
            return []
        if index is None:
            index = DifferenceVectorIndex(point_set, max_ioi=self.max_ioi)

        positions = {point: i for i, point in enumerate(point_set)}
        # Size of the largest pattern covering each point so far
        cover = [0] * len(point_set)
        tecs: Dict[Tuple, Tec] = {}

        for window in self._windows(point_set):
            pieces = []
            for vector in sorted(window):
                pieces.extend(self._split(point_set, window[vector]))
            pieces.sort(key=lambda piece: len(piece[0]))

            for pattern, indices in pieces:
                if len(pattern) < self.min_pattern_size:
                    continue
                if all(cover[i] >= len(pattern) for i in indices):
                    continue
                tec = Tec(pattern, tuple(find_translators(pattern, index))).restrict_to(point_set)
                if tec is None:
                    continue
                for point in tec.covered_set():
                    i = positions[point]
                    cover[i] = max(cover[i], len(pattern))
                tecs.setdefault(tec.sort_key(), tec)

        return [tecs[key] for key in sorted(tecs)]

    def _windows(self, point_set: PointSet) -> Iterator[Dict[Vector, List[Tuple[int, int]]]]:
        """Forward index pairs of each window round, grouped by vector."""
        n = len(point_set)
        onsets = [point[0] for point in point_set]
        # Next target index and window upper bound per source point
        starts = list(range(n))
        bounds = [onset + self.max_ioi for onset in onsets]

        while any(start < n for start in starts):
            window: Dict[Vector, List[Tuple[int, int]]] = {}
            for i in range(n):
                j = starts[i]
                while j < n and onsets[j] <= bounds[i]:
                    if j != i:
                        vector = subtract(point_set[j], point_set[i])
                        window.setdefault(vector, []).append((i, j))
                    j += 1
                starts[i] = j
                bounds[i] += self.max_ioi
            if window:
                yield window

    def _split(
        self, point_set: PointSet, pairs: List[Tuple[int, int]]
    ) -> List[Tuple[Pattern, List[int]]]:
        """MTP pieces of one vector with the indices of both of their occurrences."""
        pieces: List[List[Tuple[int, int]]] = [[]]
        previous = pairs[0][0]
        for source, target in pairs:
            if point_set[source][0] - point_set[previous][0] > self.max_ioi:
                pieces.append([])
            pieces[-1].append((source, target))
            previous = source
        return [
            (
                point_set.get_pattern(source for source, _ in piece),
                [i for pair in piece for i in pair],
            )
            for piece in pieces
        ]
