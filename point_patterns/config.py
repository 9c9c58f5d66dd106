"""Discovery configuration and its validation."""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .core import ConfigurationError
from .core.constants import (
    COMPACTNESS_MEASURES,
    COMPRESSION_MODES,
    DEFAULT_MIN_COMPRESSION_RATIO,
    TEC_ALGORITHMS,
)
from .processing import CompactnessConfig


@dataclass
class DiscoveryConfig:
    """Configuration for a pattern discovery run.

    Attributes:
        compression_mode: "exact" runs COSIATEC, "fast" runs SIATECCompress
            (default: "exact")
        min_compactness: Minimum compactness of a candidate TEC (default: 0.0)
        compactness_measure: "region" or "span" (default: "region")
        dimension_weights: Per-dimension scale for the span measure
            (default: None, all 1.0)
        min_compression_ratio: A TEC is selected only if its compression
            ratio is strictly above this (default: 1.0)
        use_conjugates: Also consider the conjugate of every TEC (default: True)
        remove_redundant: Drop translators whose occurrences are covered by
            other occurrences (default: True)
        residual_as_singletons: Turn uncovered points into one-point TECs
            instead of leaving them in the residual (default: True)
        max_ioi: Restrict candidates to SIATEC-C patterns with at most this
            inter-onset interval (default: None, unrestricted)
        workers: Processes used for the translator search (default: 1)
        tec_algorithm: "siatec" (SIATEC or SIATEC-C) or "siatec-ch", the
            cover-driven SIATEC-CH; "siatec-ch" needs max_ioi (default: "siatec")
    """

    compression_mode: str = "exact"
    min_compactness: float = 0.0
    compactness_measure: str = "region"
    dimension_weights: Optional[Tuple[float, ...]] = None
    min_compression_ratio: float = DEFAULT_MIN_COMPRESSION_RATIO
    use_conjugates: bool = True
    remove_redundant: bool = True
    residual_as_singletons: bool = True
    max_ioi: Optional[float] = None
    workers: int = 1
    tec_algorithm: str = "siatec"

    def validate(self, dims: Optional[int] = None) -> "DiscoveryConfig":
        """Check the configuration before any computation starts.

        Args:
            dims: Dimensionality of the point set the run will use, to
                check dimension_weights against

        Returns:
            self, for chaining

        Raises:
            ConfigurationError: If an option is unknown or can never be satisfied
        """
        if self.compression_mode not in COMPRESSION_MODES:
            raise ConfigurationError(
                f"Unknown compression mode {self.compression_mode!r}. "
                f"Supported: {COMPRESSION_MODES}"
            )
        if self.compactness_measure not in COMPACTNESS_MEASURES:
            raise ConfigurationError(
                f"Unknown compactness measure {self.compactness_measure!r}. "
                f"Supported: {COMPACTNESS_MEASURES}"
            )
        if not math.isfinite(self.min_compactness) or self.min_compactness < 0:
            raise ConfigurationError(
                f"min_compactness must be a non-negative number, got {self.min_compactness}"
            )
        # Region compactness never exceeds 1
        if self.compactness_measure == "region" and self.min_compactness > 1:
            raise ConfigurationError(
                f"min_compactness {self.min_compactness} can never be reached with the "
                "region measure (maximum 1.0)"
            )
        if not math.isfinite(self.min_compression_ratio) or self.min_compression_ratio < 0:
            raise ConfigurationError(
                f"min_compression_ratio must be a non-negative number, got {self.min_compression_ratio}"
            )
        if self.dimension_weights is not None:
            weights = tuple(self.dimension_weights)
            if any(not math.isfinite(w) or w <= 0 for w in weights):
                raise ConfigurationError(f"dimension_weights must be positive, got {weights}")
            if dims is not None and dims > 0 and len(weights) != dims:
                raise ConfigurationError(
                    f"dimension_weights has {len(weights)} entries for {dims}-dimensional points"
                )
        if self.max_ioi is not None and (not math.isfinite(self.max_ioi) or self.max_ioi <= 0):
            raise ConfigurationError(f"max_ioi must be positive, got {self.max_ioi}")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if self.tec_algorithm not in TEC_ALGORITHMS:
            raise ConfigurationError(
                f"Unknown TEC algorithm {self.tec_algorithm!r}. Supported: {TEC_ALGORITHMS}"
            )
        if self.tec_algorithm == "siatec-ch" and self.max_ioi is None:
            raise ConfigurationError("SIATEC-CH needs max_ioi")
        return self

    def compactness_config(self) -> CompactnessConfig:
        """Settings for the compactness filter."""
        weights = tuple(self.dimension_weights) if self.dimension_weights is not None else None
        return CompactnessConfig(
            min_compactness=self.min_compactness,
            measure=self.compactness_measure,
            dimension_weights=weights,
        )
