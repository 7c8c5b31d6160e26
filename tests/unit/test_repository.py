"""Unit tests for RemoteHistoryRepository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from stresscheck.client.api_client import DiagnosticApiClient
from stresscheck.client.repository import RemoteHistoryRepository
from stresscheck.core.analysis.engine import DiagnosticEngine
from stresscheck.models.diagnostic import StressLevel
from stresscheck.models.errors import HistoryUnavailable


@pytest.fixture
def api():
    return MagicMock(spec=DiagnosticApiClient)


class TestListRecords:
    """list_records()."""

    @pytest.mark.anyio
    async def test_normalizes_payload(self, api):
        api.fetch_history = AsyncMock(return_value={"diagnostics": [
            {"id": 2, "total_score": 320, "result_category": "Élevé", "created_at": "2026-03-02T10:00:00Z"},
            {"id": 1, "score": 100, "created_at": "2026-03-01T10:00:00Z"},
        ]})
        records = await RemoteHistoryRepository(api).list_records()
        assert [r.id for r in records] == [2, 1]
        assert records[0].stress_level == StressLevel.ELEVE
        assert records[1].stress_level == StressLevel.FAIBLE

    @pytest.mark.anyio
    async def test_unexpected_payload(self, api):
        api.fetch_history = AsyncMock(return_value={"message": "maintenance"})
        with pytest.raises(HistoryUnavailable):
            await RemoteHistoryRepository(api).list_records()


class TestSave:
    """save()."""

    @pytest.mark.anyio
    async def test_submits_ids(self, api, small_catalog):
        result = DiagnosticEngine().evaluate(small_catalog.events, {1, 2})
        api.submit = AsyncMock(return_value={"score": 110, "stressLevel": "Faible"})
        stored = await RemoteHistoryRepository(api).save(result, [1, 2])
        api.submit.assert_awaited_once_with([1, 2])
        assert stored.score == 110
        assert stored.selected_events_count == 2

    @pytest.mark.anyio
    async def test_empty_response(self, api, small_catalog):
        result = DiagnosticEngine().evaluate(small_catalog.events, {1})
        api.submit = AsyncMock(return_value=None)
        assert await RemoteHistoryRepository(api).save(result, [1]) is None


class TestDelete:
    """delete()."""

    @pytest.mark.anyio
    async def test_delegates(self, api):
        api.delete_history = AsyncMock(return_value=False)
        assert await RemoteHistoryRepository(api).delete(8) is False
        api.delete_history.assert_awaited_once_with(8)
