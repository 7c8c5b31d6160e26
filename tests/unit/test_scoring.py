"""Unit tests for ScoringEngine and DiagnosticEngine.

Tests cover:
- score = sum of selected weights
- unknown and duplicate ids
- monotonicity when events are added
- round half up for fractional weights
- DiagnosticEngine composition (score -> level -> advice)
"""

import pytest

from stresscheck.core.analysis import (
    ClassificationPolicy,
    DiagnosticEngine,
    RecommendationGenerator,
    ScoringEngine,
    get_diagnostic_engine,
    reset_diagnostic_engine,
    round_half_up,
)
from stresscheck.models.diagnostic import StressLevel
from stresscheck.models.event import Event


@pytest.fixture
def travail_events():
    """One category "Travail" with weights 50 and 60."""
    return [
        Event(id=1, text="Evenement 1", weight=50, category="Travail"),
        Event(id=2, text="Evenement 2", weight=60, category="Travail"),
    ]


class TestRoundHalfUp:
    """Tests for round_half_up()."""

    @pytest.mark.parametrize("value,expected", [
        (0, 0),
        (2.4, 2),
        (2.5, 3),
        (3.5, 4),
        (110.0, 110),
    ])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


class TestScoringEngine:
    """Tests for ScoringEngine.score()."""

    def test_sum_of_weights(self, travail_events):
        assert ScoringEngine().score(travail_events, {1, 2}) == 110

    def test_empty_selection_scores_zero(self, travail_events):
        assert ScoringEngine().score(travail_events, set()) == 0

    def test_unknown_ids_ignored(self, travail_events):
        assert ScoringEngine().score(travail_events, {1, 99}) == 50

    def test_duplicate_ids_counted_once(self, travail_events):
        assert ScoringEngine().score(travail_events, [1, 1, 2]) == 110

    def test_monotonic_under_superset(self, small_catalog):
        engine = ScoringEngine()
        subset = {1, 3}
        superset = {1, 2, 3, 4}
        assert engine.score(small_catalog.events, superset) >= engine.score(small_catalog.events, subset)

    def test_fractional_weights_rounded(self):
        events = [
            Event(id=1, text="a", weight=12.25),
            Event(id=2, text="b", weight=12.25),
        ]
        # 24.5 rounds up
        assert ScoringEngine().score(events, {1, 2}) == 25

    def test_selected_events_in_catalog_order(self, small_catalog):
        selected = ScoringEngine().selected_events(small_catalog.events, {4, 1})
        assert [e.id for e in selected] == [1, 4]


class TestDiagnosticEngine:
    """Tests for DiagnosticEngine.evaluate()."""

    def test_travail_both_selected_is_faible(self, travail_events):
        result = DiagnosticEngine().evaluate(travail_events, {1, 2})
        assert result.score == 110
        assert result.stress_level == StressLevel.FAIBLE
        assert result.interpretation == ClassificationPolicy.INTERPRETATIONS[StressLevel.FAIBLE]
        assert result.recommendations == RecommendationGenerator().recommend(StressLevel.FAIBLE)
        assert result.selected_events_count == 2

    def test_count_ignores_unknown_ids(self, travail_events):
        result = DiagnosticEngine().evaluate(travail_events, {1, 42})
        assert result.selected_events_count == 1

    def test_uses_injected_policy(self, travail_events):
        policy = ClassificationPolicy({"thresholds": {"moderate": 100, "high": 200}})
        result = DiagnosticEngine(policy=policy).evaluate(travail_events, {1, 2})
        assert result.stress_level == StressLevel.MODERE

    def test_singleton(self):
        reset_diagnostic_engine()
        assert get_diagnostic_engine() is get_diagnostic_engine()
