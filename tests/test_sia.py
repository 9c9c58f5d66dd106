"""Tests for SIA and SIAR maximal translatable pattern discovery."""

import pytest
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from point_patterns.core import PointSet, add
from point_patterns.discovery import Sia, SiaR, DifferenceVectorIndex


def line(n: int = 4) -> PointSet:
    return PointSet([(i, 0) for i in range(n)])


def unit_square() -> PointSet:
    return PointSet([(0, 0), (1, 0), (0, 1), (1, 1)])


def melody() -> PointSet:
    """Short two-voice fragment with a repeated figure."""
    return PointSet([
        (0, 60), (1, 62), (2, 64), (2, 48),
        (4, 60), (5, 62), (6, 64), (6, 48),
        (7, 55), (8, 67), (9, 65),
    ])


class TestSia:
    """Test SIA."""

    def test_line(self):
        mtps = Sia().compute_mtps(line(4))
        assert [m.translator for m in mtps] == [(1, 0), (2, 0), (3, 0)]
        assert mtps[0].pattern.points == ((0, 0), (1, 0), (2, 0))
        assert mtps[1].pattern.points == ((0, 0), (1, 0))
        assert mtps[2].pattern.points == ((0, 0),)

    def test_unit_square(self):
        mtps = {m.translator: m.pattern.points for m in Sia().compute_mtps(unit_square())}
        assert mtps[(0, 1)] == ((0, 0), (1, 0))
        assert mtps[(1, 0)] == ((0, 0), (0, 1))
        assert mtps[(1, 1)] == ((0, 0),)
        assert mtps[(1, -1)] == ((0, 1),)

    def test_mtps_are_maximal(self):
        ps = melody()
        for mtp in Sia().compute_mtps(ps):
            expected = [p for p in ps if add(p, mtp.translator) in ps]
            assert mtp.pattern.points == tuple(expected)

    def test_no_shape_deduplication(self):
        # Both (1, 0) and (2, 0) give a pattern; patterns may repeat across vectors
        ps = PointSet([(0, 0), (1, 0), (2, 0), (10, 0), (11, 0)])
        mtps = Sia().compute_mtps(ps)
        translators = [m.translator for m in mtps]
        assert len(translators) == len(set(translators))
        assert len(mtps) == len(DifferenceVectorIndex(ps))

    def test_reuses_index(self):
        ps = melody()
        index = DifferenceVectorIndex(ps)
        assert Sia().compute_mtps(ps, index) == Sia().compute_mtps(ps)

    def test_degenerate_inputs(self):
        assert Sia().compute_mtps(PointSet()) == []
        assert Sia().compute_mtps(PointSet([(0, 0)])) == []


class TestSiaR:
    """Test SIAR."""

    def test_line_single_subdiagonal(self):
        mtps = SiaR(subdiagonals=1).compute_mtps(line(4))
        assert [m.translator for m in mtps] == [(1, 0), (2, 0)]
        assert mtps[0].pattern.points == ((0, 0), (1, 0), (2, 0))
        assert mtps[1].pattern.points == ((0, 0), (1, 0))

    def test_line_three_subdiagonals(self):
        mtps = SiaR(subdiagonals=3).compute_mtps(line(4))
        assert [m.translator for m in mtps] == [(1, 0), (2, 0)]

    def test_results_are_full_mtps(self):
        ps = melody()
        for mtp in SiaR(subdiagonals=2).compute_mtps(ps):
            expected = [p for p in ps if add(p, mtp.translator) in ps]
            assert mtp.pattern.points == tuple(expected)

    def test_invalid_subdiagonals(self):
        with pytest.raises(ValueError):
            SiaR(subdiagonals=0)

    def test_degenerate_inputs(self):
        assert SiaR().compute_mtps(PointSet()) == []
        assert SiaR().compute_mtps(PointSet([(0, 0)])) == []
