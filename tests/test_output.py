"""Tests for JSON reports and MIDI export of pattern covers."""

import json
import pytest
from pathlib import Path
import sys

import pretty_midi

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from point_patterns.config import DiscoveryConfig
from point_patterns.core import PointSet, Pattern, Tec
from point_patterns.discovery import Cosiatec
from point_patterns.output import JSONReportWriter, CoverMIDIExporter


MOTIF = [(0, 60), (1, 62), (2, 64)]


def repeated_motif(extra=()) -> PointSet:
    points = []
    for onset, shift in ((0, 0), (4, 2), (8, -1)):
        points.extend((t + onset, p + shift) for t, p in MOTIF)
    points.extend(extra)
    return PointSet(points)


def motif_cover(residual_as_singletons: bool = True):
    ps = repeated_motif(extra=[(13, 30)])
    config = DiscoveryConfig(residual_as_singletons=residual_as_singletons)
    return Cosiatec(config).compute_cover(ps)


class TestJSONReport:
    """Test JSON records and reports."""

    def test_pattern_record(self):
        record = JSONReportWriter.pattern_record("P3", "SIATEC", Pattern([(1, 60), (0.5, 62)]))
        assert record == {
            "label": "P3",
            "source": "SIATEC",
            "data_type": "point_set",
            "data": [[0.5, 62], [1, 60]],
        }

    def test_tec_records(self):
        tec = Tec(Pattern(MOTIF), ((4, 2), (8, -1)))
        records = JSONReportWriter(piece="bwv847").tec_records([tec], "COSIATEC")
        assert len(records) == 1
        record = records[0]
        assert record["piece"] == "bwv847"
        assert record["pattern"]["label"] == "P0"
        assert record["pattern"]["data"] == [[0, 60], [1, 62], [2, 64]]
        assert len(record["occurrences"]) == 2
        assert record["occurrences"][0]["data"] == [[4, 62], [5, 64], [6, 66]]

    def test_cover_report(self):
        cover = motif_cover(residual_as_singletons=False)
        report = JSONReportWriter(piece="motif").cover_report(cover)
        assert report["summary"] == {
            "algorithm": "COSIATEC",
            "source_size": 10,
            "patterns": 1,
            "encoding_length": 6,
            "compression_ratio": round(10 / 6, 4),
        }
        assert report["residual"] == [[13, 30]]
        assert [r["pattern"]["label"] for r in report["patterns"]] == ["P0"]

    def test_write_cover(self, tmp_path):
        path = tmp_path / "reports" / "motif.json"
        JSONReportWriter(piece="motif").write_cover(motif_cover(), str(path))
        data = json.loads(path.read_text())
        assert data["piece"] == "motif"
        assert data["summary"]["patterns"] == 2
        assert data["residual"] == []

    def test_write_tecs(self, tmp_path):
        path = tmp_path / "tecs.json"
        tec = Tec(Pattern(MOTIF), ((4, 2),))
        JSONReportWriter().write([tec], "SIATEC", str(path))
        data = json.loads(path.read_text())
        assert data[0]["pattern"]["source"] == "SIATEC"

    def test_write_batches(self, tmp_path):
        tecs = [
            Tec(Pattern(MOTIF), ((4, 2),)),
            Tec(Pattern(MOTIF[:2]), ((1, 2), (4, 2))),
            Tec(Pattern([(0, 60), (2, 64)]), ((8, -1),)),
        ]
        writer = JSONReportWriter(piece="bwv847")
        paths = writer.write_batches(tecs, "SIATEC", str(tmp_path / "batches"), batch_size=2)
        assert [p.name for p in paths] == [
            "patterns_bwv847_SIATEC_0.json",
            "patterns_bwv847_SIATEC_1.json",
        ]
        first = json.loads(paths[0].read_text())
        second = json.loads(paths[1].read_text())
        assert [r["pattern"]["label"] for r in first] == ["P0", "P1"]
        assert [r["pattern"]["label"] for r in second] == ["P0"]
        assert second[0]["pattern"]["data"] == [[0, 60], [2, 64]]

    def test_write_batches_invalid_size(self, tmp_path):
        tec = Tec(Pattern(MOTIF), ((4, 2),))
        with pytest.raises(ValueError):
            JSONReportWriter().write_batches([tec], "SIATEC", str(tmp_path), batch_size=0)


class TestCoverMIDIExport:
    """Test MIDI rendering of covers."""

    def test_one_instrument_per_tec(self):
        midi = CoverMIDIExporter().cover_to_pretty_midi(motif_cover())
        assert [i.name for i in midi.instruments] == ["P0", "P1"]
        assert len(midi.instruments[0].notes) == 9
        assert len(midi.instruments[1].notes) == 1

    def test_residual_instrument(self):
        midi = CoverMIDIExporter().cover_to_pretty_midi(motif_cover(residual_as_singletons=False))
        assert [i.name for i in midi.instruments] == ["P0", "residual"]
        assert midi.instruments[1].notes[0].pitch == 30

    def test_time_scale(self):
        exporter = CoverMIDIExporter(time_scale=0.5, note_duration=0.1)
        midi = exporter.cover_to_pretty_midi(motif_cover())
        starts = sorted(n.start for n in midi.instruments[0].notes)
        assert starts[-1] == pytest.approx(5.0)

    def test_out_of_range_pitches_skipped(self):
        cover = Cosiatec().compute_cover(PointSet([(0, 60), (1, 200)]))
        with pytest.warns(UserWarning, match="outside the MIDI pitch range"):
            midi = CoverMIDIExporter().cover_to_pretty_midi(cover)
        assert sum(len(i.notes) for i in midi.instruments) == 1

    def test_export_writes_file(self, tmp_path):
        path = tmp_path / "out" / "motif.mid"
        CoverMIDIExporter().export(motif_cover(), str(path))
        assert path.exists()
        midi = pretty_midi.PrettyMIDI(str(path))
        assert sum(len(i.notes) for i in midi.instruments) == 10

    def test_points_without_pitch(self):
        cover = Cosiatec().compute_cover(PointSet([(0,), (1,), (4,), (5,)]))
        with pytest.raises(ValueError):
            CoverMIDIExporter().cover_to_pretty_midi(cover)
