"""MTP and TEC - the results of pattern discovery.

A TEC (translational equivalence class) is a pattern together with the
translators that map it onto its occurrences. Translators are kept sorted
and always include the zero vector, so the pattern itself is the first
occurrence.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .errors import MalformedInputError
from .point import Vector, add, is_zero, subtract, zero_vector
from .point_set import Pattern, PointSet


@dataclass(frozen=True)
class Mtp:
    """Maximal translatable pattern: every point of pattern, moved by
    translator, lands on a point of the source set."""

    translator: Vector
    pattern: Pattern


@dataclass(frozen=True)
class Tec:
    """Pattern and the translators of all of its occurrences.

    Attributes:
        pattern: The pattern occurrence the translators are relative to
        translators: Sorted, duplicate-free vectors including the zero vector
    """

    pattern: Pattern
    translators: Tuple[Vector, ...] = ()

    def __post_init__(self):
        dims = self.pattern.dims
        translators = {tuple(t) for t in self.translators}
        if any(len(t) != dims for t in translators):
            raise MalformedInputError(
                f"Translators must have the pattern's dimensionality ({dims})"
            )
        translators.add(zero_vector(dims))
        object.__setattr__(self, "translators", tuple(sorted(translators)))

    @property
    def encoding_cost(self) -> int:
        """Points needed to write this TEC down: the pattern plus every
        translator except the implicit zero vector."""
        return len(self.pattern) + len(self.translators) - 1

    def occurrence(self, translator: Vector) -> Pattern:
        return self.pattern.translate(translator)

    def expand(self) -> List[Pattern]:
        """All occurrences of the pattern, starting with the pattern itself."""
        return [self.occurrence(t) for t in self.translators]

    def covered_set(self) -> PointSet:
        """Union of all occurrences."""
        points = [add(p, t) for t in self.translators for p in self.pattern]
        return PointSet._from_unsorted(points, self.pattern.dims)

    def occurs_at(self, translator: Vector, point_set: PointSet) -> bool:
        return all(add(p, translator) in point_set for p in self.pattern)

    def conjugate(self) -> "Tec":
        """TEC covering the same points with the roles of pattern and
        translators swapped.

        The conjugate's pattern is the first pattern point moved by every
        translator, and its translators are the offsets of the pattern
        points from that first point.
        """
        origin = self.pattern[0]
        pattern = Pattern._from_unsorted(
            [add(origin, t) for t in self.translators], self.pattern.dims
        )
        translators = tuple(subtract(p, origin) for p in self.pattern)
        return Tec(pattern, translators)

    def restrict_to(self, point_set: PointSet) -> Optional["Tec"]:
        """Keep only occurrences that lie entirely inside point_set.

        The result is re-anchored on its first surviving occurrence, so the
        zero vector is present and every translator is lexicographically
        non-negative. This is also the canonical form of a TEC: restricting
        a TEC to the set it was computed from moves the pattern to its
        smallest occurrence.

        Returns:
            The restricted TEC, or None if no occurrence survives
        """
        kept = [t for t in self.translators if self.occurs_at(t, point_set)]
        if not kept:
            return None
        anchor = kept[0]
        if is_zero(anchor):
            if len(kept) == len(self.translators):
                return self
            return Tec(self.pattern, tuple(kept))

        pattern = self.pattern.translate(anchor)
        shifted = (subtract(t, anchor) for t in kept)
        translators = tuple(
            t for t in shifted if all(add(p, t) in point_set for p in pattern)
        )
        return Tec(pattern, translators)

    def remove_redundant_translators(self) -> "Tec":
        """Drop translators whose occurrence is already covered by others.

        Translators are visited from the largest down and kept only if they
        add uncovered points, so the covered set is unchanged.
        """
        if len(self.translators) <= 2:
            return self

        covered = set(self.pattern)
        kept = [zero_vector(self.pattern.dims)]
        for translator in reversed(self.translators):
            if is_zero(translator):
                continue
            occurrence = [add(p, translator) for p in self.pattern]
            if not covered.issuperset(occurrence):
                kept.append(translator)
                covered.update(occurrence)

        if len(kept) == len(self.translators):
            return self
        return Tec(self.pattern, tuple(kept))

    def sort_key(self):
        """Canonical ordering: pattern points, then translators."""
        return (self.pattern.points, self.translators)

    def to_dict(self) -> Dict[str, list]:
        return {
            "pattern": [list(p) for p in self.pattern],
            "translators": [list(t) for t in self.translators],
        }
