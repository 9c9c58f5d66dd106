"""Query matching - find occurrences of a query pattern in a target point set.

Two problems from [Ukkonen et al. 2003] are solved:
- P1, exact matching: every translator w with query + w a subset of the
  target.
- P2, partial matching: every translator under which at least a given
  number of query points land on target points. The differences between
  all target and query points are sorted and grouped exactly like the
  difference vector index groups a single point set.

By default translators may shift pitch (transposition-invariant matching).
With transposition_invariant=False only translators that keep the pitch
coordinate fixed are reported.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..core import ConfigurationError, MalformedInputError, Pattern, PointSet, Vector, add, subtract
from ..core.constants import PITCH_DIMENSION
from .vector_index import group_differences


@dataclass(frozen=True)
class PartialMatch:
    """Translator and the ascending target indices it matches.

    Attributes:
        translator: Vector moving the matched query points onto the target
        indices: Indices into the target point set of the matched points
    """

    translator: Vector
    indices: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.indices)

    def occurrence(self, target: PointSet) -> Pattern:
        return target.get_pattern(self.indices)


class QueryMatcher:
    """Exact and partial matcher for query patterns.

    Args:
        transposition_invariant: Allow translators that shift pitch
        pitch_dimension: Coordinate holding pitch
    """

    def __init__(self, transposition_invariant: bool = True, pitch_dimension: int = PITCH_DIMENSION):
        if pitch_dimension < 0:
            raise ConfigurationError("pitch_dimension must not be negative")
        self.transposition_invariant = transposition_invariant
        self.pitch_dimension = pitch_dimension

    def _check(self, query: PointSet, target: PointSet) -> Pattern:
        if not isinstance(query, Pattern):
            query = Pattern._from_sorted(query.points, query.dims) if query else Pattern(())
        if target and query.dims != target.dims:
            raise MalformedInputError(
                f"Query has {query.dims} dimensions but target has {target.dims}"
            )
        if not self.transposition_invariant and self.pitch_dimension >= query.dims:
            raise ConfigurationError(
                f"pitch_dimension {self.pitch_dimension} is out of range for "
                f"{query.dims}-dimensional points"
            )
        return query

    def _allowed(self, translator: Vector) -> bool:
        return self.transposition_invariant or translator[self.pitch_dimension] == 0

    def find_translators(self, query: PointSet, target: PointSet) -> List[Vector]:
        """All translators mapping the whole query into target, ascending.

        Raises:
            MalformedInputError: If query is empty or the dimensionalities differ
        """
        query = self._check(query, target)
        anchor = query[0]
        translators = []
        for point in target:
            translator = subtract(point, anchor)
            if not self._allowed(translator):
                continue
            if all(add(p, translator) in target for p in query):
                translators.append(translator)
        return translators

    def find_occurrences(self, query: PointSet, target: PointSet) -> List[Pattern]:
        """Exact occurrences of query in target, ordered by translator."""
        query = self._check(query, target)
        return [query.translate(t) for t in self.find_translators(query, target)]

    def find_partial(
        self,
        query: PointSet,
        target: PointSet,
        min_match_size: Optional[int] = None,
    ) -> List[PartialMatch]:
        """Translators matching at least min_match_size query points.

        Args:
            query: Query pattern
            target: Point set searched for the query
            min_match_size: Minimum number of matched points
                (default: the size of the query, i.e. exact matches)

        Returns:
            PartialMatch objects ordered by translator
        """
        query = self._check(query, target)
        if min_match_size is None:
            min_match_size = len(query)
        if min_match_size < 1:
            raise ConfigurationError("min_match_size must be at least 1")
        if not target:
            return []

        targets = target.as_array()
        queries = query.as_array()
        # Row r holds target[r % n] - query[r // n]
        diffs = (targets[None, :, :] - queries[:, None, :]).reshape(-1, query.dims)
        target_index = np.tile(np.arange(len(target)), len(query))

        matches = []
        for translator, rows in group_differences(diffs, (target_index,)):
            if len(rows) < min_match_size or not self._allowed(translator):
                continue
            matches.append(
                PartialMatch(translator=translator, indices=tuple(target_index[rows].tolist()))
            )
        return matches
