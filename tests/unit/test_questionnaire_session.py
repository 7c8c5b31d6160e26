"""Unit tests for QuestionnaireSession.

Tests cover:
- initial state (EMPTY / AT_CATEGORY(0))
- toggle() rules
- next()/previous() transitions
- empty selection guard at the last category
- submission: SUBMITTING -> COMPLETE with a result
- progress and category position
"""

from unittest.mock import MagicMock

import pytest

from stresscheck.core.analysis.engine import DiagnosticEngine
from stresscheck.core.catalog import EventCatalog
from stresscheck.core.questionnaire import QuestionnaireSession
from stresscheck.models.diagnostic import StressLevel
from stresscheck.models.errors import EmptySelectionError, InvalidTransitionError
from stresscheck.models.event import Event
from stresscheck.models.session import SessionPhase, SessionState


@pytest.fixture
def travail_catalog():
    """One category "Travail" with weights 50 and 60."""
    return EventCatalog([
        Event(id=1, text="Evenement 1", weight=50, category="Travail"),
        Event(id=2, text="Evenement 2", weight=60, category="Travail"),
    ])


class TestInitialState:
    """Session creation."""

    def test_empty_catalog(self):
        session = QuestionnaireSession(EventCatalog())
        assert session.state == SessionState.empty()
        assert session.progress() == 0
        assert session.current_category is None
        assert session.current_events() == []

    def test_starts_at_first_category(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        assert session.state == SessionState.at_category(0)
        assert session.current_category == "Travail"
        assert [e.id for e in session.current_events()] == [1, 2]
        assert session.category_position() == (1, 2)

    def test_next_on_empty_rejected(self):
        session = QuestionnaireSession(EventCatalog())
        with pytest.raises(InvalidTransitionError):
            session.next()


class TestToggle:
    """toggle()."""

    def test_toggle_adds_then_removes(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        assert session.toggle(1) is True
        assert session.is_selected(1)
        assert session.toggle(1) is False
        assert session.selection == frozenset()

    def test_toggle_unknown_id_ignored(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        assert session.toggle(99) is False
        assert session.selected_count == 0

    def test_selection_kept_across_categories(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        session.toggle(1)
        session.next()
        session.toggle(3)
        session.previous()
        assert session.selection == frozenset({1, 3})

    def test_selection_is_a_copy(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        session.toggle(1)
        selection = session.selection
        session.toggle(2)
        assert selection == frozenset({1})

    def test_toggle_ignored_after_complete(self, travail_catalog):
        session = QuestionnaireSession(travail_catalog)
        session.toggle(1)
        session.next()
        assert session.toggle(2) is False
        assert session.selection == frozenset({1})


class TestNavigation:
    """next() and previous()."""

    def test_next_advances(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        assert session.next() == SessionState.at_category(1)
        assert session.current_category == "Personnel"

    def test_previous_noop_at_first(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        assert session.previous() == SessionState.at_category(0)

    def test_previous_goes_back(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        session.next()
        assert session.previous() == SessionState.at_category(0)

    def test_empty_selection_at_last_category(self, travail_catalog):
        session = QuestionnaireSession(travail_catalog)
        with pytest.raises(EmptySelectionError) as exc_info:
            session.next()
        assert exc_info.value.code == "DIAGNOSTIC_EMPTY_SELECTION"
        assert session.state == SessionState.at_category(0)
        assert session.result is None

    def test_empty_selection_is_recoverable(self, travail_catalog):
        session = QuestionnaireSession(travail_catalog)
        with pytest.raises(EmptySelectionError):
            session.next()
        session.toggle(1)
        assert session.next().phase == SessionPhase.COMPLETE


class TestSubmission:
    """Submission from the last category."""

    def test_both_selected_scores_110_faible(self, travail_catalog):
        session = QuestionnaireSession(travail_catalog)
        session.toggle(1)
        session.toggle(2)
        assert session.next() == SessionState.complete()
        assert session.result.score == 110
        assert session.result.stress_level == StressLevel.FAIBLE
        assert session.result.selected_events_count == 2

    def test_engine_called_once_with_selection(self, travail_catalog):
        engine = MagicMock(spec=DiagnosticEngine)
        session = QuestionnaireSession(travail_catalog, engine)
        session.toggle(2)
        session.next()
        engine.evaluate.assert_called_once()
        events, selection = engine.evaluate.call_args[0]
        assert selection == {2}
        assert session.result is engine.evaluate.return_value

    def test_next_after_complete_rejected(self, travail_catalog):
        session = QuestionnaireSession(travail_catalog)
        session.toggle(1)
        session.next()
        with pytest.raises(InvalidTransitionError):
            session.next()

    def test_previous_after_complete_is_noop(self, travail_catalog):
        session = QuestionnaireSession(travail_catalog)
        session.toggle(1)
        session.next()
        assert session.previous() == SessionState.complete()


class TestProgress:
    """progress() and category_position()."""

    def test_progress_never_100_while_navigating(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        assert session.progress() == pytest.approx(100 / 3)
        session.next()
        assert session.progress() == pytest.approx(200 / 3)

    def test_progress_100_when_complete(self, small_catalog):
        session = QuestionnaireSession(small_catalog)
        session.toggle(1)
        session.next()
        session.next()
        assert session.progress() == 100
        assert session.category_position() == (2, 2)


class TestSessionState:
    """SessionState validation."""

    def test_at_category_requires_index(self):
        with pytest.raises(ValueError):
            SessionState(SessionPhase.AT_CATEGORY)

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            SessionState.at_category(-1)

    def test_complete_has_no_index(self):
        with pytest.raises(ValueError):
            SessionState(SessionPhase.COMPLETE, 2)

    def test_to_dict(self):
        assert SessionState.at_category(1).to_dict() == {"phase": "at_category", "index": 1}
