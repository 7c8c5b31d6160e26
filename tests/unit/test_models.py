"""Unit tests for data models and errors."""

from datetime import datetime, timezone

import pytest

from stresscheck.models.diagnostic import DiagnosticResult, StressLevel
from stresscheck.models.errors import (
    CatalogUnavailable,
    DeleteFailed,
    DiagnosticError,
    EmptySelectionError,
    HistoryUnavailable,
    InvalidTransitionError,
    Notice,
    SubmissionFailed,
)
from stresscheck.models.event import Event
from stresscheck.models.history import HistoryRecord


class TestEvent:
    """Event dataclass."""

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            Event(id=1, text="x", weight=-1)

    def test_to_dict_optional_fields(self):
        event = Event(id=3, text="Mariage", weight=50, category="Familial",
                      description="Union maritale", order=7)
        assert event.to_dict() == {
            "id": 3,
            "question": "Mariage",
            "weight": 50,
            "category": "Familial",
            "description": "Union maritale",
            "order": 7,
        }

    def test_frozen(self):
        event = Event(id=1, text="x", weight=1)
        with pytest.raises(AttributeError):
            event.weight = 5


class TestDiagnosticResult:
    """DiagnosticResult dataclass."""

    def test_to_dict(self):
        result = DiagnosticResult(
            score=180,
            stress_level=StressLevel.MODERE,
            interpretation="Texte",
            recommendations=("A", "B"),
            selected_events_count=4,
        )
        assert result.to_dict() == {
            "score": 180,
            "stressLevel": "Modéré",
            "interpretation": "Texte",
            "recommendations": ["A", "B"],
            "selectedEventsCount": 4,
        }

    def test_negative_score_rejected(self):
        with pytest.raises(ValueError):
            DiagnosticResult(score=-1, stress_level=StressLevel.FAIBLE, interpretation="")


class TestHistoryRecord:
    """HistoryRecord dataclass."""

    def test_from_result_round_trip(self):
        result = DiagnosticResult(
            score=320,
            stress_level=StressLevel.ELEVE,
            interpretation="Texte",
            recommendations=("A",),
            selected_events_count=2,
        )
        created = datetime(2026, 3, 1, 10, tzinfo=timezone.utc)
        record = HistoryRecord.from_result(7, created, result, (4, 9))
        assert record.to_result() == result
        data = record.to_dict()
        assert data["id"] == 7
        assert data["stress_level"] == "Élevé"
        assert data["selected_event_ids"] == [4, 9]
        assert data["created_at"] == "2026-03-01T10:00:00+00:00"


class TestErrors:
    """Error taxonomy."""

    @pytest.mark.parametrize("error_cls,code,retryable", [
        (CatalogUnavailable, "CATALOG_UNAVAILABLE", True),
        (SubmissionFailed, "SUBMISSION_FAILED", True),
        (HistoryUnavailable, "HISTORY_UNAVAILABLE", True),
        (DeleteFailed, "HISTORY_DELETE_FAILED", True),
        (InvalidTransitionError, "SESSION_INVALID_TRANSITION", False),
    ])
    def test_codes(self, error_cls, code, retryable):
        error = error_cls("message", details={"id": 1})
        assert isinstance(error, DiagnosticError)
        assert error.code == code
        assert error.retryable is retryable
        assert error.to_dict() == {"code": code, "message": "message", "details": {"id": 1}}

    def test_empty_selection_default_message(self):
        error = EmptySelectionError()
        assert error.code == "DIAGNOSTIC_EMPTY_SELECTION"
        assert "au moins un événement" in error.message
        assert error.retryable is False

    def test_notice_from_error(self):
        notice = Notice.from_error(DeleteFailed("La suppression a echoue"))
        assert notice == Notice("HISTORY_DELETE_FAILED", "La suppression a echoue", True)
        assert notice.to_dict()["retryable"] is True
