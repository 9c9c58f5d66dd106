"""JSON pattern reports.

Each TEC becomes one record:

    {
      "piece": "bwv847",
      "pattern": {"label": "P0", "source": "COSIATEC",
                  "data_type": "point_set", "data": [[1.0, 64], ...]},
      "occurrences": [ pattern objects of the other occurrences ]
    }
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from ..core import Pattern, PatternCover, Tec


class JSONReportWriter:
    """Writes TECs and pattern covers as JSON reports."""

    def __init__(self, piece: str = "", indent: int = 2):
        """
        Initialize JSONReportWriter.

        Args:
            piece: Name of the analysed piece, copied into every record
            indent: JSON indentation
        """
        self.piece = piece
        self.indent = indent

    @staticmethod
    def pattern_record(label: str, source: str, pattern: Pattern) -> Dict[str, Any]:
        return {
            "label": label,
            "source": source,
            "data_type": "point_set",
            "data": [list(p) for p in pattern],
        }

    def tec_records(self, tecs: List[Tec], source: str) -> List[Dict[str, Any]]:
        """One record per TEC, labelled P0, P1, ... in order."""
        records = []
        for i, tec in enumerate(tecs):
            label = f"P{i}"
            occurrences = tec.expand()
            records.append({
                "piece": self.piece,
                "pattern": self.pattern_record(label, source, occurrences[0]),
                "occurrences": [
                    self.pattern_record(label, source, occ) for occ in occurrences[1:]
                ],
            })
        return records

    def cover_report(self, cover: PatternCover) -> Dict[str, Any]:
        """Summary, TEC records and residual of a pattern cover."""
        return {
            "piece": self.piece,
            "summary": {
                "algorithm": cover.algorithm,
                "source_size": cover.source_size,
                "patterns": len(cover),
                "encoding_length": cover.encoding_length,
                "compression_ratio": round(cover.compression_ratio, 4),
            },
            "patterns": self.tec_records(cover.tecs, cover.algorithm),
            "residual": [list(p) for p in cover.residual],
        }

    def write(self, tecs: List[Tec], source: str, output_path: str) -> None:
        """Write a list of TEC records."""
        self._dump(self.tec_records(tecs, source), output_path)

    def write_batches(
        self, tecs: List[Tec], source: str, output_dir: str, batch_size: int
    ) -> List[Path]:
        """
        Write TEC records in files of at most batch_size records.

        Files are named patterns_<piece>_<source>_<n>.json; labels restart
        at P0 in every file.

        Returns:
            Paths of the written files, in batch order
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        paths = []
        for number, start in enumerate(range(0, len(tecs), batch_size)):
            path = Path(output_dir) / f"patterns_{self.piece}_{source}_{number}.json"
            self.write(tecs[start:start + batch_size], source, str(path))
            paths.append(path)
        return paths

    def write_cover(self, cover: PatternCover, output_path: str) -> None:
        """Write a pattern cover report."""
        self._dump(self.cover_report(cover), output_path)

    def _dump(self, data: Any, output_path: str) -> None:
        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            json.dump(data, f, indent=self.indent)
