"""Error types raised at the boundaries of the discovery pipeline.

Every failure is reported where it first becomes detectable: point set
construction, file loading, or configuration validation. Once a point set
and a configuration have been accepted, the discovery stages themselves
do not raise.
"""


class PointPatternsError(Exception):
    """Base class for all errors raised by point_patterns."""


class MalformedInputError(PointPatternsError, ValueError):
    """Raised for points with the wrong dimensionality, non-numeric or
    non-finite coordinates, and unreadable input tables."""


class ConfigurationError(PointPatternsError, ValueError):
    """Raised when a DiscoveryConfig can never be satisfied."""


class CapacityError(PointPatternsError, MemoryError):
    """Raised when the O(N^2) difference vector index does not fit in memory."""
