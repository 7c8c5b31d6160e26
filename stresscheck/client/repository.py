"""History repositories used by the client flows.

HistoryRepository is the interface the flows depend on; the remote
implementation talks to the REST API and normalizes every payload through
the ingestion adapter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from stresscheck.client.api_client import DiagnosticApiClient
from stresscheck.core.analysis.classification import (
    ClassificationPolicy,
    get_classification_policy,
)
from stresscheck.core.catalog.normalization import (
    normalize_history,
    normalize_submit_response,
)
from stresscheck.models.diagnostic import DiagnosticResult
from stresscheck.models.errors import HistoryUnavailable
from stresscheck.models.history import HistoryRecord

logger = logging.getLogger(__name__)


class HistoryRepository(Protocol):
    """Durable store of past diagnostics."""

    async def list_records(self) -> list[HistoryRecord]:
        ...

    async def save(
        self, result: DiagnosticResult, selected_event_ids: Iterable[int]
    ) -> DiagnosticResult | None:
        ...

    async def delete(self, record_id: int) -> bool:
        ...


class RemoteHistoryRepository:
    """HistoryRepository backed by the REST API.

    Usage:
        repo = RemoteHistoryRepository(api)
        records = await repo.list_records()
    """

    def __init__(
        self,
        api: DiagnosticApiClient,
        policy: ClassificationPolicy | None = None,
    ) -> None:
        self._api = api
        self._policy = policy or get_classification_policy()

    async def list_records(self) -> list[HistoryRecord]:
        """Fetch the history, most recent first.

        Raises:
            HistoryUnavailable: Transport failure or payload without a list
        """
        payload = await self._api.fetch_history()
        records = normalize_history(payload, self._policy)
        if records is None:
            raise HistoryUnavailable(
                "Impossible de charger l'historique",
                details={"reason": "unexpected_payload"},
            )
        logger.debug(f"History fetched (records={len(records)})")
        return records

    async def save(
        self,
        result: DiagnosticResult,
        selected_event_ids: Iterable[int],
    ) -> DiagnosticResult | None:
        """Persist a locally computed result.

        Args:
            result: Result computed on the client
            selected_event_ids: Ids submitted with the result

        Returns:
            The result as recorded by the server, if the response has one

        Raises:
            SubmissionFailed: Transport failure
        """
        ids = list(selected_event_ids)
        payload = await self._api.submit(ids)
        stored = normalize_submit_response(payload, self._policy, result.selected_events_count)
        if stored is not None and stored.score != result.score:
            logger.warning(
                f"Server score differs from local score "
                f"(local={result.score}, server={stored.score})"
            )
        return stored

    async def delete(self, record_id: int) -> bool:
        """Delete a record.

        Returns:
            True if deleted, False if it was already gone

        Raises:
            DeleteFailed: Transport failure
        """
        return await self._api.delete_history(record_id)
