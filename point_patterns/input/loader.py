"""Point set loading from delimited tables and MIDI files."""

import csv
import math
import warnings
from pathlib import Path
from typing import List, Optional, Sequence

import pretty_midi

from ..core import MalformedInputError, PointSet
from ..core.constants import DEFAULT_COLUMNS, MIDI_FEATURES


class PointSetLoader:
    """Reads point sets from CSV/TSV tables and MIDI files."""

    TABLE_FORMATS = {".csv", ".tsv", ".txt"}
    MIDI_FORMATS = {".mid", ".midi"}

    def __init__(
        self,
        columns: Sequence[int] = DEFAULT_COLUMNS,
        onset_decimals: Optional[int] = None,
        midi_features: Sequence[str] = ("onset", "pitch"),
    ):
        """
        Initialize PointSetLoader.

        Args:
            columns: Table columns holding the point coordinates, in order
            onset_decimals: Round the first coordinate to this many decimals,
                so that tuplet onsets written with finite precision line up
            midi_features: Note attributes that become point coordinates

        Raises:
            ValueError: If a column index is negative or a MIDI feature is unknown
        """
        if not columns or any(c < 0 for c in columns):
            raise ValueError(f"Columns must be non-negative indices, got {columns}")
        unknown = [f for f in midi_features if f not in MIDI_FEATURES]
        if unknown or not midi_features:
            raise ValueError(
                f"Unknown MIDI features {unknown}. Supported: {MIDI_FEATURES}"
            )
        self.columns = tuple(columns)
        self.onset_decimals = onset_decimals
        self.midi_features = tuple(midi_features)

    def load(self, path: str) -> PointSet:
        """
        Load a point set from a file.

        Args:
            path: Path to a table (.csv, .tsv, .txt) or MIDI file (.mid, .midi)

        Returns:
            PointSet of the file's points

        Raises:
            FileNotFoundError: If file doesn't exist
            MalformedInputError: If the format is unsupported or a value
                cannot be read as a finite number
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Point set file not found: {path}")

        suffix = path.suffix.lower()
        if suffix in self.TABLE_FORMATS:
            rows = self._read_table(path)
        elif suffix in self.MIDI_FORMATS:
            rows = self._read_midi(path)
        else:
            raise MalformedInputError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.TABLE_FORMATS | self.MIDI_FORMATS)}"
            )

        if self.onset_decimals is not None:
            rows = [[round(row[0], self.onset_decimals)] + row[1:] for row in rows]

        point_set = PointSet(rows, dims=len(rows[0]) if rows else self._dims_for(suffix))
        if len(point_set) < len(rows):
            warnings.warn(
                f"{path.name}: {len(rows) - len(point_set)} duplicate points collapsed"
            )
        return point_set

    def _dims_for(self, suffix: str) -> int:
        if suffix in self.MIDI_FORMATS:
            return len(self.midi_features)
        return len(self.columns)

    def _read_table(self, path: Path) -> List[List[float]]:
        """Rows of the selected columns; a non-numeric first row is a header."""
        delimiter = "\t" if path.suffix.lower() == ".tsv" else ","
        with open(path, newline="") as f:
            records = [r for r in csv.reader(f, delimiter=delimiter) if any(c.strip() for c in r)]

        if records and self._is_header(records[0]):
            records = records[1:]

        rows = []
        for line, record in enumerate(records, start=1):
            row = []
            for column in self.columns:
                if column >= len(record):
                    raise MalformedInputError(
                        f"{path.name}: value missing at column {column} of row {line}"
                    )
                row.append(self._parse(record[column], path, line))
            rows.append(row)
        return rows

    def _is_header(self, record: List[str]) -> bool:
        """A row with every selected column, at least one of them non-numeric."""
        if any(column >= len(record) for column in self.columns):
            return False
        try:
            for column in self.columns:
                float(record[column])
        except ValueError:
            return True
        return False

    @staticmethod
    def _parse(cell: str, path: Path, line: int) -> float:
        text = cell.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            raise MalformedInputError(f"{path.name}: cannot read {cell!r} in row {line}")
        if not math.isfinite(value):
            raise MalformedInputError(f"{path.name}: non-finite value {cell!r} in row {line}")
        return value

    def _read_midi(self, path: Path) -> List[List[float]]:
        """One row per non-drum note with the configured features."""
        try:
            midi = pretty_midi.PrettyMIDI(str(path))
        except Exception as e:
            raise MalformedInputError(f"{path.name}: cannot read MIDI file ({e})") from e

        rows = []
        for voice, instrument in enumerate(midi.instruments):
            if instrument.is_drum:
                continue
            for note in instrument.notes:
                features = {
                    "onset": note.start,
                    "pitch": note.pitch,
                    "duration": note.end - note.start,
                    "velocity": note.velocity,
                    "voice": voice,
                }
                rows.append([features[name] for name in self.midi_features])

        if not rows:
            warnings.warn(f"{path.name}: no pitched notes found")
        return rows
