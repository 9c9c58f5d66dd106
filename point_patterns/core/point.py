"""Point and vector helpers.

Points and vectors share one representation: a tuple of plain Python
numbers. Equality and ordering are the tuple's own exact lexicographic
comparison, so no tolerance is ever applied.
"""

import math
from numbers import Integral, Real
from typing import Iterable, Optional, Sequence, Tuple, Union

from .errors import MalformedInputError

Number = Union[int, float]
Point = Tuple[Number, ...]
Vector = Tuple[Number, ...]


def validate_point(coords: Iterable[Number], dims: Optional[int] = None) -> Point:
    """Convert coordinates into a point tuple.

    Args:
        coords: Sequence of numeric coordinates
        dims: Expected dimensionality, or None to accept any

    Returns:
        Point tuple with int or float components

    Raises:
        MalformedInputError: If a coordinate is not a finite number or the
            dimensionality does not match
    """
    if isinstance(coords, (str, bytes)):
        raise MalformedInputError(f"Point must be a sequence of numbers, got {coords!r}")
    try:
        values = tuple(coords)
    except TypeError:
        raise MalformedInputError(f"Point must be a sequence of numbers, got {coords!r}")

    if not values:
        raise MalformedInputError("Point must have at least one coordinate")
    if dims is not None and len(values) != dims:
        raise MalformedInputError(
            f"Point {values} has {len(values)} coordinates, expected {dims}"
        )

    point = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise MalformedInputError(f"Non-numeric coordinate {value!r} in point {values}")
        if isinstance(value, Integral):
            point.append(int(value))
            continue
        value = float(value)
        if not math.isfinite(value):
            raise MalformedInputError(f"Non-finite coordinate in point {values}")
        # Fold -0.0 into 0.0 so equal points hash and sort identically
        point.append(value + 0.0)
    return tuple(point)


def add(point: Sequence[Number], vector: Sequence[Number]) -> Point:
    """Translate a point by a vector."""
    return tuple(a + b for a, b in zip(point, vector))


def subtract(to: Sequence[Number], origin: Sequence[Number]) -> Vector:
    """Vector that translates origin onto to."""
    return tuple(a - b for a, b in zip(to, origin))


def negate(vector: Sequence[Number]) -> Vector:
    return tuple(0 - a for a in vector)


def zero_vector(dims: int) -> Vector:
    return (0,) * dims


def is_zero(vector: Sequence[Number]) -> bool:
    return all(a == 0 for a in vector)
