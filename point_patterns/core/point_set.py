"""PointSet and Pattern - the value types every discovery stage works on.

A PointSet is an immutable, duplicate-free collection of points kept in
lexicographic order. Set operations never modify a PointSet; they return
a new one. A Pattern is a non-empty PointSet that is compared with other
patterns by shape, i.e. up to translation.
"""

from functools import cached_property
from typing import FrozenSet, Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np

from .errors import MalformedInputError
from .point import Number, Point, Vector, add, subtract, validate_point


class PointSet:
    """Sorted set of points with a fixed dimensionality.

    Args:
        points: Iterable of coordinate sequences. Order does not matter and
            duplicates are dropped.
        dims: Expected dimensionality. Inferred from the first point when
            omitted; required to describe an empty set of known shape.

    Raises:
        MalformedInputError: If points disagree on dimensionality or contain
            non-finite or non-numeric coordinates
    """

    def __init__(self, points: Iterable[Sequence[Number]] = (), dims: Optional[int] = None):
        unique = set()
        for coords in points:
            point = validate_point(coords, dims)
            if dims is None:
                dims = len(point)
            unique.add(point)
        self._points: Tuple[Point, ...] = tuple(sorted(unique))
        self._dims = dims or 0

    @classmethod
    def _from_sorted(cls, points: Sequence[Point], dims: int):
        """Build from points already validated, sorted and duplicate-free."""
        instance = cls.__new__(cls)
        instance._points = tuple(points)
        instance._dims = dims
        return instance

    @classmethod
    def _from_unsorted(cls, points: Iterable[Point], dims: int):
        """Build from validated points in any order, possibly repeated."""
        return cls._from_sorted(sorted(set(points)), dims)

    @property
    def points(self) -> Tuple[Point, ...]:
        return self._points

    @property
    def dims(self) -> int:
        """Dimensionality of the points (0 for an empty set of unknown shape)."""
        return self._dims

    @cached_property
    def _members(self) -> FrozenSet[Point]:
        return frozenset(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __getitem__(self, index: int) -> Point:
        return self._points[index]

    def __contains__(self, point) -> bool:
        return tuple(point) in self._members

    def __bool__(self) -> bool:
        return bool(self._points)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PointSet):
            return NotImplemented
        return self._points == other._points

    def __hash__(self) -> int:
        return hash(self._points)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._points)})"

    def as_array(self) -> np.ndarray:
        """Points as an (n, dims) array, int64 when every coordinate is integral."""
        if not self._points:
            return np.empty((0, self._dims))
        return np.asarray(self._points)

    def get_pattern(self, indices: Iterable[int]) -> "Pattern":
        """Pattern made of the points at the given ascending indices."""
        return Pattern._from_sorted([self._points[i] for i in indices], self._dims)

    def translate(self, vector: Vector):
        """Copy of this set with every point moved by vector."""
        return type(self)._from_unsorted([add(p, vector) for p in self._points], self._dims)

    def difference(self, other: "PointSet") -> "PointSet":
        """Points of this set that are not in other."""
        members = other._members
        return PointSet._from_sorted(
            [p for p in self._points if p not in members], self._dims
        )

    def intersect(self, other: "PointSet") -> "PointSet":
        members = other._members
        return PointSet._from_sorted(
            [p for p in self._points if p in members], self._dims
        )

    def union(self, other: "PointSet") -> "PointSet":
        dims = self._dims or other._dims
        return PointSet._from_unsorted(self._points + other._points, dims)

    def issubset(self, other: "PointSet") -> bool:
        members = other._members
        return all(p in members for p in self._points)

    def bounds(self) -> Tuple[Point, Point]:
        """Lower and upper corners of the bounding box."""
        if not self._points:
            raise ValueError("Empty point set has no bounds")
        columns = list(zip(*self._points))
        return tuple(min(c) for c in columns), tuple(max(c) for c in columns)


class Pattern(PointSet):
    """A non-empty point set compared with other patterns by shape.

    Two patterns are translationally equivalent if, and only if, their
    vectorized representations are equal.
    """

    def __init__(self, points: Iterable[Sequence[Number]], dims: Optional[int] = None):
        super().__init__(points, dims)
        if not self._points:
            raise MalformedInputError("Pattern must contain at least one point")

    def vectorize(self) -> Tuple[Vector, ...]:
        """Differences between adjacent points; the pattern's shape key."""
        pts = self._points
        return tuple(subtract(pts[i + 1], pts[i]) for i in range(len(pts) - 1))

    def extents(self) -> Tuple[Number, ...]:
        """Size of the bounding box along each dimension."""
        lower, upper = self.bounds()
        return tuple(hi - lo for lo, hi in zip(lower, upper))

    @property
    def width(self) -> Number:
        """Extent along the first (onset) dimension."""
        return self.extents()[0]

    @property
    def area(self) -> Number:
        """Product of the extents over all dimensions."""
        result = 1
        for extent in self.extents():
            result *= extent
        return result

    def is_translation_of(self, other: "Pattern") -> bool:
        return len(self) == len(other) and self.vectorize() == other.vectorize()


def point_set_from_array(array: np.ndarray) -> PointSet:
    """Build a PointSet from an (n, dims) numeric array."""
    array = np.asarray(array)
    if array.ndim != 2:
        raise MalformedInputError(f"Expected a 2-D array of points, got shape {array.shape}")
    return PointSet(array.tolist(), dims=array.shape[1])

