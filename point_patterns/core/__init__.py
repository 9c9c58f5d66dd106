"""Core types for point_patterns."""

from .point import Number, Point, Vector, add, subtract, negate, is_zero, zero_vector, validate_point
from .point_set import PointSet, Pattern, point_set_from_array
from .tec import Mtp, Tec
from .cover import PatternCover
from .errors import (
    PointPatternsError,
    MalformedInputError,
    ConfigurationError,
    CapacityError,
)

__all__ = [
    "Number",
    "Point",
    "Vector",
    "add",
    "subtract",
    "negate",
    "is_zero",
    "zero_vector",
    "validate_point",
    "PointSet",
    "Pattern",
    "point_set_from_array",
    "Mtp",
    "Tec",
    "PatternCover",
    "PointPatternsError",
    "MalformedInputError",
    "ConfigurationError",
    "CapacityError",
]
