"""PatternCover - the compressed encoding produced by COSIATEC and SIATECCompress."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from .point_set import Pattern, PointSet
from .tec import Tec


@dataclass
class PatternCover:
    """Ordered TECs plus the points no TEC covers.

    The occurrences of all TECs together with the residual reproduce the
    source point set exactly.

    Attributes:
        tecs: Selected TECs in the order they were chosen
        residual: Points left uncovered (empty when residual points were
            turned into singleton TECs)
        source_size: Number of points in the source point set
        algorithm: Name of the algorithm that produced the cover
    """

    tecs: List[Tec] = field(default_factory=list)
    residual: PointSet = field(default_factory=PointSet)
    source_size: int = 0
    algorithm: str = ""

    def __len__(self) -> int:
        return len(self.tecs)

    def __iter__(self) -> Iterator[Tec]:
        return iter(self.tecs)

    @property
    def patterns(self) -> List[Pattern]:
        return [tec.pattern for tec in self.tecs]

    @property
    def encoding_length(self) -> int:
        """Total number of points and translators needed to write the cover down."""
        return sum(tec.encoding_cost for tec in self.tecs) + len(self.residual)

    @property
    def compression_ratio(self) -> float:
        """Source size divided by encoding length (1.0 means no compression)."""
        if self.encoding_length == 0:
            return 0.0
        return self.source_size / self.encoding_length

    def covered_points(self) -> PointSet:
        """Union of the occurrences of every TEC in the cover."""
        covered = PointSet(dims=self.residual.dims)
        for tec in self.tecs:
            covered = covered.union(tec.covered_set())
        return covered

    def close(self, remaining: PointSet, as_singletons: bool = True) -> None:
        """Finish the cover with the points no selected TEC reached.

        Args:
            remaining: Uncovered points
            as_singletons: Append each point as a one-point TEC instead of
                keeping it in the residual
        """
        if as_singletons:
            for point in remaining:
                self.tecs.append(Tec(Pattern._from_sorted([point], remaining.dims)))
            self.residual = PointSet(dims=remaining.dims)
        else:
            self.residual = remaining

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "algorithm": self.algorithm,
            "source_size": self.source_size,
            "encoding_length": self.encoding_length,
            "compression_ratio": self.compression_ratio,
            "tecs": [
                {
                    **tec.to_dict(),
                    "occurrences": [[list(p) for p in occ] for occ in tec.expand()],
                }
                for tec in self.tecs
            ],
            "residual": [list(p) for p in self.residual],
        }
