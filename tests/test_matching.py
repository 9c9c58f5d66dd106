"""Tests for exact and partial query matching."""

import pytest
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from point_patterns.core import PointSet, Pattern, MalformedInputError, ConfigurationError
from point_patterns.discovery import QueryMatcher, PartialMatch


def target() -> PointSet:
    """Melody followed by a transposed copy against a second voice."""
    return PointSet([
        (0.0, 72), (0.25, 74), (0.5, 72), (0.875, 72),
        (1.0, 45), (1.0, 60), (1.25, 47), (1.25, 62), (1.5, 45), (1.875, 45),
    ])


def query() -> Pattern:
    return Pattern([(0.0, 72), (0.25, 74), (0.5, 72), (0.875, 72)])


class TestExactMatching:
    """Test exact (P1) matching."""

    def test_transposed_occurrences_found(self):
        translators = QueryMatcher().find_translators(query(), target())
        assert translators == [(0, 0), (1.0, -27)]

    def test_occurrences(self):
        occurrences = QueryMatcher().find_occurrences(query(), target())
        assert len(occurrences) == 2
        assert occurrences[0] == query()
        assert occurrences[1] == Pattern([(1.0, 45), (1.25, 47), (1.5, 45), (1.875, 45)])

    def test_exact_pitch_only(self):
        matcher = QueryMatcher(transposition_invariant=False)
        assert matcher.find_translators(query(), target()) == [(0, 0)]

    def test_query_not_in_target(self):
        missing = Pattern([(0.0, 72), (0.25, 74), (0.5, 73)])
        assert QueryMatcher().find_translators(missing, target()) == []

    def test_point_set_query(self):
        translators = QueryMatcher().find_translators(PointSet(query()), target())
        assert len(translators) == 2

    def test_empty_target(self):
        assert QueryMatcher().find_translators(query(), PointSet()) == []


class TestPartialMatching:
    """Test partial (P2) matching."""

    def test_full_matches(self):
        matches = QueryMatcher().find_partial(query(), target(), min_match_size=4)
        assert [m.indices for m in matches] == [(0, 1, 2, 3), (4, 6, 8, 9)]
        assert matches[1].translator == (1.0, -27)

    def test_default_is_exact(self):
        matches = QueryMatcher().find_partial(query(), target())
        assert len(matches) == 2

    def test_partial_match_found(self):
        matches = QueryMatcher().find_partial(query(), target(), min_match_size=2)
        by_translator = {m.translator: m for m in matches}
        assert by_translator[(1.0, -12)].indices == (5, 7)
        assert all(len(m) >= 2 for m in matches)

    def test_match_occurrence(self):
        ps = target()
        match = PartialMatch(translator=(1.0, -12), indices=(5, 7))
        assert match.occurrence(ps).points == ((1.0, 60), (1.25, 62))

    def test_exact_pitch_only(self):
        matcher = QueryMatcher(transposition_invariant=False)
        matches = matcher.find_partial(query(), target(), min_match_size=1)
        assert all(m.translator[1] == 0 for m in matches)

    def test_invalid_min_match_size(self):
        with pytest.raises(ConfigurationError):
            QueryMatcher().find_partial(query(), target(), min_match_size=0)


class TestMatcherValidation:
    """Test input validation."""

    def test_dimension_mismatch(self):
        with pytest.raises(MalformedInputError):
            QueryMatcher().find_translators(Pattern([(0, 0, 0)]), target())

    def test_empty_query(self):
        with pytest.raises(MalformedInputError):
            QueryMatcher().find_translators(PointSet(), target())

    def test_pitch_dimension_out_of_range(self):
        matcher = QueryMatcher(transposition_invariant=False)
        with pytest.raises(ConfigurationError):
            matcher.find_translators(Pattern([(0,)]), PointSet([(0,), (1,)]))
