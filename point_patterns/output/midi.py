"""MIDI rendering of pattern covers."""

import warnings
from pathlib import Path

import pretty_midi

from ..core import PatternCover, PointSet
from ..core.constants import PITCH_DIMENSION


class CoverMIDIExporter:
    """Render a pattern cover as MIDI, one instrument per TEC.

    Points are read as (onset, pitch, ...) and every point covered by a TEC
    becomes a note of that TEC's instrument. Residual points go to a final
    "residual" instrument.
    """

    def __init__(
        self,
        tempo: float = 120.0,
        time_scale: float = 1.0,
        note_duration: float = 0.25,
        velocity: int = 100,
        pitch_dimension: int = PITCH_DIMENSION,
    ):
        """
        Initialize CoverMIDIExporter.

        Args:
            tempo: Tempo in BPM
            time_scale: Seconds per onset unit
            note_duration: Note length in seconds
            velocity: MIDI velocity of every note (0-127)
            pitch_dimension: Coordinate holding MIDI pitch
        """
        self.tempo = tempo
        self.time_scale = time_scale
        self.note_duration = note_duration
        self.velocity = velocity
        self.pitch_dimension = pitch_dimension

    def cover_to_pretty_midi(self, cover: PatternCover) -> pretty_midi.PrettyMIDI:
        """Convert a cover to a PrettyMIDI object without saving.

        Raises:
            ValueError: If the points have no pitch coordinate
        """
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)

        skipped = 0
        for i, tec in enumerate(cover.tecs):
            instrument = pretty_midi.Instrument(program=0, name=f"P{i}")
            skipped += self._add_notes(instrument, tec.covered_set())
            midi.instruments.append(instrument)

        if cover.residual:
            instrument = pretty_midi.Instrument(program=0, name="residual")
            skipped += self._add_notes(instrument, cover.residual)
            midi.instruments.append(instrument)

        if skipped:
            warnings.warn(f"{skipped} points outside the MIDI pitch range were not rendered")
        return midi

    def export(self, cover: PatternCover, output_path: str) -> None:
        """
        Export a cover to a MIDI file.

        Args:
            cover: Pattern cover of an onset/pitch point set
            output_path: Path to output MIDI file
        """
        midi = self.cover_to_pretty_midi(cover)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(output_path)

    def _add_notes(self, instrument: pretty_midi.Instrument, points: PointSet) -> int:
        """Append a note per point; returns the number of points skipped."""
        if points and points.dims <= self.pitch_dimension:
            raise ValueError(
                f"Cannot render {points.dims}-dimensional points without a pitch coordinate"
            )
        skipped = 0
        for point in points:
            pitch = int(round(point[self.pitch_dimension]))
            start = point[0] * self.time_scale
            if not 0 <= pitch <= 127 or start < 0:
                skipped += 1
                continue
            instrument.notes.append(
                pretty_midi.Note(
                    velocity=self.velocity,
                    pitch=pitch,
                    start=start,
                    end=start + self.note_duration,
                )
            )
        return skipped
