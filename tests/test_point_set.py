"""Tests for the core value types.

Tests cover:
- Point validation and the exactness rules for coordinates
- PointSet ordering, deduplication and set operations
- Pattern shape comparison
- TEC construction, conjugates, canonical form and redundancy removal
- PatternCover bookkeeping
"""

import math
import pytest
import numpy as np
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from point_patterns.core import (
    PointSet,
    Pattern,
    Tec,
    PatternCover,
    MalformedInputError,
    validate_point,
    point_set_from_array,
)


# ============================================================================
# Test Fixtures - Helper functions to create test data
# ============================================================================

def line(n: int = 4) -> PointSet:
    """n points spaced one unit apart along the onset axis."""
    return PointSet([(i, 0) for i in range(n)])


# ============================================================================
# Point validation
# ============================================================================

class TestValidatePoint:
    """Test coordinate validation."""

    def test_integral_values_become_int(self):
        point = validate_point((np.int64(3), 4))
        assert point == (3, 4)
        assert all(type(c) is int for c in point)

    def test_negative_zero_is_folded(self):
        point = validate_point((-0.0, 1.5))
        assert math.copysign(1.0, point[0]) == 1.0

    def test_rejects_non_finite(self):
        with pytest.raises(MalformedInputError):
            validate_point((float("nan"), 60))
        with pytest.raises(MalformedInputError):
            validate_point((float("inf"), 60))

    def test_rejects_non_numeric(self):
        with pytest.raises(MalformedInputError):
            validate_point(("a", 60))
        with pytest.raises(MalformedInputError):
            validate_point((True, 60))
        with pytest.raises(MalformedInputError):
            validate_point("12")

    def test_rejects_wrong_dimensionality(self):
        with pytest.raises(MalformedInputError):
            validate_point((1, 2, 3), dims=2)
        with pytest.raises(MalformedInputError):
            validate_point(())


# ============================================================================
# PointSet
# ============================================================================

class TestPointSet:
    """Test PointSet construction and set operations."""

    def test_sorted_and_deduplicated(self):
        ps = PointSet([(1, 0), (0, 1), (1, 0)])
        assert ps.points == ((0, 1), (1, 0))
        assert len(ps) == 2
        assert ps.dims == 2

    def test_mixed_dimensionality_rejected(self):
        with pytest.raises(MalformedInputError):
            PointSet([(0, 0), (1, 2, 3)])

    def test_empty_set(self):
        assert len(PointSet()) == 0
        assert not PointSet()
        assert PointSet([], dims=2).dims == 2

    def test_membership_is_exact(self):
        ps = PointSet([(0.5, 60)])
        assert (0.5, 60) in ps
        assert (0.5, 60.0) in ps
        assert (0.5000001, 60) not in ps

    def test_negative_zero_equals_zero(self):
        ps = PointSet([(-0.0, 1.0)])
        assert (0.0, 1.0) in ps
        assert ps == PointSet([(0.0, 1.0)])

    def test_translate_returns_new_set(self):
        ps = line(3)
        moved = ps.translate((10, 2))
        assert moved.points == ((10, 2), (11, 2), (12, 2))
        assert ps.points == ((0, 0), (1, 0), (2, 0))

    def test_set_operations(self):
        a = PointSet([(0, 0), (1, 0), (2, 0)])
        b = PointSet([(1, 0), (5, 5)])

        assert a.difference(b).points == ((0, 0), (2, 0))
        assert a.intersect(b).points == ((1, 0),)
        assert a.union(b).points == ((0, 0), (1, 0), (2, 0), (5, 5))
        assert PointSet([(1, 0)]).issubset(a)
        assert not b.issubset(a)

    def test_difference_keeps_dims_when_empty(self):
        a = line(2)
        assert a.difference(a).dims == 2
        assert len(a.difference(a)) == 0

    def test_bounds(self):
        ps = PointSet([(0, 64), (2, 60), (1, 67)])
        assert ps.bounds() == ((0, 60), (2, 67))
        with pytest.raises(ValueError):
            PointSet().bounds()

    def test_as_array(self):
        arr = line(3).as_array()
        assert arr.shape == (3, 2)
        assert np.issubdtype(arr.dtype, np.integer)
        assert PointSet([], dims=2).as_array().shape == (0, 2)

    def test_from_array(self):
        ps = point_set_from_array(np.array([[1.0, 60.0], [0.0, 62.0]]))
        assert ps.points == ((0.0, 62.0), (1.0, 60.0))
        with pytest.raises(MalformedInputError):
            point_set_from_array(np.array([1.0, 2.0]))

    def test_get_pattern(self):
        pattern = line(4).get_pattern([1, 3])
        assert isinstance(pattern, Pattern)
        assert pattern.points == ((1, 0), (3, 0))


# ============================================================================
# Pattern
# ============================================================================

class TestPattern:
    """Test Pattern shape semantics."""

    def test_empty_pattern_rejected(self):
        with pytest.raises(MalformedInputError):
            Pattern([])

    def test_vectorize(self):
        pattern = Pattern([(0, 60), (1, 62), (3, 60)])
        assert pattern.vectorize() == ((1, 2), (2, -2))

    def test_translation_equivalence(self):
        a = Pattern([(0, 60), (1, 62)])
        b = Pattern([(4, 65), (5, 67)])
        c = Pattern([(0, 60), (1, 63)])
        assert a.is_translation_of(b)
        assert not a.is_translation_of(c)
        assert a != b

    def test_width_and_area(self):
        pattern = Pattern([(0, 60), (2, 64), (1, 62)])
        assert pattern.extents() == (2, 4)
        assert pattern.width == 2
        assert pattern.area == 8

    def test_translate_keeps_type(self):
        moved = Pattern([(0, 0)]).translate((1, 1))
        assert isinstance(moved, Pattern)


# ============================================================================
# TEC
# ============================================================================

class TestTec:
    """Test TEC invariants and transformations."""

    def test_zero_vector_added_and_sorted(self):
        tec = Tec(Pattern([(0, 0), (1, 0)]), ((2, 0), (1, 0)))
        assert tec.translators == ((0, 0), (1, 0), (2, 0))
        assert Tec(Pattern([(0, 0)])).translators == ((0, 0),)

    def test_translator_dimensionality_checked(self):
        with pytest.raises(MalformedInputError):
            Tec(Pattern([(0, 0)]), ((1, 0, 0),))

    def test_encoding_cost(self):
        tec = Tec(Pattern([(0, 0), (1, 0)]), ((2, 0), (1, 0)))
        assert tec.encoding_cost == 4

    def test_expand_and_covered_set(self):
        tec = Tec(Pattern([(0, 0), (1, 0)]), ((2, 0),))
        occurrences = tec.expand()
        assert occurrences[0] == tec.pattern
        assert occurrences[1].points == ((2, 0), (3, 0))
        assert tec.covered_set() == line(4)

    def test_conjugate_covers_same_points(self):
        tec = Tec(Pattern([(0, 0), (1, 0)]), ((2, 0),))
        conjugate = tec.conjugate()
        assert conjugate.pattern.points == ((0, 0), (2, 0))
        assert conjugate.translators == ((0, 0), (1, 0))
        assert conjugate.covered_set() == tec.covered_set()

    def test_restrict_to_reanchors(self):
        tec = Tec(Pattern([(5, 5)]), ((-5, -5), (1, 0)))
        restricted = tec.restrict_to(PointSet([(0, 0), (6, 5)]))
        assert restricted.pattern.points == ((0, 0),)
        assert restricted.translators == ((0, 0), (6, 5))

    def test_restrict_to_nothing_left(self):
        tec = Tec(Pattern([(0, 0), (1, 0)]))
        assert tec.restrict_to(PointSet([(0, 0)])) is None

    def test_restrict_to_unchanged(self):
        tec = Tec(Pattern([(0, 0), (1, 0)]), ((2, 0),))
        assert tec.restrict_to(line(4)) is tec

    def test_remove_redundant_translators(self):
        tec = Tec(Pattern([(0, 0), (1, 0)]), ((1, 0), (2, 0)))
        reduced = tec.remove_redundant_translators()
        assert reduced.translators == ((0, 0), (2, 0))
        assert reduced.covered_set() == tec.covered_set()

    def test_remove_redundant_keeps_necessary(self):
        tec = Tec(Pattern([(0, 0)]), ((1, 0), (2, 0)))
        assert tec.remove_redundant_translators() is tec

    def test_to_dict(self):
        tec = Tec(Pattern([(0, 0)]), ((1, 0),))
        assert tec.to_dict() == {"pattern": [[0, 0]], "translators": [[0, 0], [1, 0]]}


# ============================================================================
# PatternCover
# ============================================================================

class TestPatternCover:
    """Test PatternCover bookkeeping."""

    def test_encoding_length_and_ratio(self):
        cover = PatternCover(
            tecs=[Tec(Pattern([(0, 0), (1, 0)]), ((2, 0),))],
            source_size=4,
        )
        assert cover.encoding_length == 3
        assert cover.compression_ratio == pytest.approx(4 / 3)
        assert cover.covered_points() == line(4)

    def test_empty_cover(self):
        cover = PatternCover()
        assert len(cover) == 0
        assert cover.encoding_length == 0
        assert cover.compression_ratio == 0.0

    def test_close_as_singletons(self):
        cover = PatternCover(source_size=2)
        cover.close(PointSet([(0, 0), (3, 1)]))
        assert len(cover) == 2
        assert all(tec.translators == ((0, 0),) for tec in cover)
        assert len(cover.residual) == 0
        assert cover.encoding_length == 2

    def test_close_keeping_residual(self):
        cover = PatternCover(source_size=2)
        remaining = PointSet([(0, 0), (3, 1)])
        cover.close(remaining, as_singletons=False)
        assert len(cover) == 0
        assert cover.residual == remaining
        assert cover.encoding_length == 2

    def test_to_dict(self):
        cover = PatternCover(
            tecs=[Tec(Pattern([(0, 0)]), ((1, 0),))],
            source_size=2,
            algorithm="COSIATEC",
        )
        data = cover.to_dict()
        assert data["algorithm"] == "COSIATEC"
        assert data["encoding_length"] == 2
        assert data["tecs"][0]["occurrences"] == [[[0, 0]], [[1, 0]]]
        assert data["residual"] == []
