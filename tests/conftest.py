"""Pytest fixtures for StressCheck tests."""

from datetime import datetime, timedelta, timezone

import pytest

from stresscheck import create_app
from stresscheck.core.analysis import (
    reset_classification_policy,
    reset_diagnostic_engine,
    reset_statistics_analyzer,
)
from stresscheck.core.catalog import EventCatalog
from stresscheck.models.diagnostic import StressLevel
from stresscheck.models.event import Event
from stresscheck.models.history import HistoryRecord
from stresscheck.services import reset_catalog_store, reset_history_store


def _reset_singletons():
    reset_classification_policy()
    reset_diagnostic_engine()
    reset_statistics_analyzer()
    reset_catalog_store()
    reset_history_store()


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset every singleton before/after each test."""
    _reset_singletons()
    yield
    _reset_singletons()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def history_path(tmp_path):
    """Temporary history file (not created)."""
    return tmp_path / "history" / "diagnostics.json"


@pytest.fixture
def app(history_path):
    """Create application for testing.

    Uses the bundled catalog and a temporary history file.

    Returns:
        Flask: Application configured for testing
    """
    app = create_app('testing', overrides={
        'STRESSCHECK_HISTORY_PATH': str(history_path),
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client.

    Args:
        app: Flask application fixture

    Returns:
        FlaskClient: Test client for making requests
    """
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create test CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def small_catalog():
    """Two categories, four events."""
    return EventCatalog([
        Event(id=1, text="Conflit avec un collegue", weight=50, category="Travail"),
        Event(id=2, text="Changement de poste", weight=60, category="Travail"),
        Event(id=3, text="Demenagement", weight=20, category="Personnel"),
        Event(id=4, text="Vacances", weight=13, category="Personnel"),
    ])


@pytest.fixture
def make_record():
    """Factory for HistoryRecord, one minute apart going back in time."""
    base = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def _make(
        record_id,
        score=100,
        level=None,
        events_count=3,
        minutes_ago=None,
    ):
        if level is None:
            if score < 150:
                level = StressLevel.FAIBLE
            elif score < 300:
                level = StressLevel.MODERE
            else:
                level = StressLevel.ELEVE
        offset = record_id if minutes_ago is None else minutes_ago
        return HistoryRecord(
            id=record_id,
            created_at=base - timedelta(minutes=offset),
            score=score,
            stress_level=level,
            interpretation="",
            selected_events_count=events_count,
        )

    return _make
