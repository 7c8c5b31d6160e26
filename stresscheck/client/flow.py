"""Client-side diagnostic and history flows.

DiagnosticFlow
    catalog load -> QuestionnaireSession -> local result -> background save.
    The result is computed before anything is sent and returned at once;
    a failed save becomes a Notice, the result stays valid.

HistoryBrowser
    history list + StatsSnapshot. The list is only changed after a delete
    succeeded on the server, then the snapshot is recomputed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable

from stresscheck.client.repository import HistoryRepository
from stresscheck.core.analysis.engine import DiagnosticEngine, get_diagnostic_engine
from stresscheck.core.analysis.statistics import StatisticsAnalyzer, get_statistics_analyzer
from stresscheck.core.catalog.event_catalog import CatalogSource, EventCatalog
from stresscheck.core.questionnaire.session import QuestionnaireSession
from stresscheck.models.diagnostic import DiagnosticResult
from stresscheck.models.errors import (
    DeleteFailed,
    HistoryUnavailable,
    Notice,
    SubmissionFailed,
)
from stresscheck.models.history import HistoryRecord
from stresscheck.models.session import SessionPhase, SessionState
from stresscheck.models.statistics import StatsSnapshot

logger = logging.getLogger(__name__)

NoticeCallback = Callable[[Notice], None]


class DiagnosticFlow:
    """Runs one questionnaire against a catalog source and a repository.

    Usage:
        flow = DiagnosticFlow(api, RemoteHistoryRepository(api))
        session = await flow.start()
        session.toggle(1)
        while session.result is None:
            await flow.advance(session)
        await flow.drain()
    """

    def __init__(
        self,
        source: CatalogSource,
        repository: HistoryRepository,
        engine: DiagnosticEngine | None = None,
        on_notice: NoticeCallback | None = None,
    ) -> None:
        self._source = source
        self._repository = repository
        self._engine = engine or get_diagnostic_engine()
        self._on_notice = on_notice
        self._pending: set[asyncio.Task] = set()
        self.notices: list[Notice] = []

    async def start(self) -> QuestionnaireSession:
        """Load the catalog and open a new session.

        Raises:
            CatalogUnavailable: Questions could not be fetched (no session created)
        """
        catalog = await EventCatalog.load(self._source)
        return QuestionnaireSession(catalog, self._engine)

    async def advance(self, session: QuestionnaireSession) -> SessionState:
        """Call session.next() and start the save when the session completes.

        Raises:
            EmptySelectionError: Nothing selected at the last category
            InvalidTransitionError: Session not navigating
        """
        state = session.next()
        if state.phase == SessionPhase.COMPLETE and session.result is not None:
            self.persist(session.result, session.selection)
        return state

    def persist(
        self,
        result: DiagnosticResult,
        selected_event_ids: Iterable[int],
    ) -> asyncio.Task:
        """Save a computed result in the background.

        Returns:
            The background task (also tracked until it finishes)
        """
        task = asyncio.create_task(self._save(result, sorted(selected_event_ids)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> int:
        """Number of saves still running."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every background save to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def _save(self, result: DiagnosticResult, selected_event_ids: list[int]) -> None:
        try:
            await self._repository.save(result, selected_event_ids)
        except SubmissionFailed as exc:
            logger.warning(f"Diagnostic not saved (score={result.score}, error={exc.message})")
            self._notify(Notice.from_error(exc))
            return
        logger.info(f"Diagnostic saved (score={result.score}, events={len(selected_event_ids)})")

    def _notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        if self._on_notice is not None:
            self._on_notice(notice)


class HistoryBrowser:
    """History list and its statistics.

    Usage:
        browser = HistoryBrowser(RemoteHistoryRepository(api))
        snapshot = await browser.refresh()
        await browser.delete(record_id)
    """

    def __init__(
        self,
        repository: HistoryRepository,
        analyzer: StatisticsAnalyzer | None = None,
        on_notice: NoticeCallback | None = None,
    ) -> None:
        self._repository = repository
        self._analyzer = analyzer or get_statistics_analyzer()
        self._on_notice = on_notice
        self._records: list[HistoryRecord] = []
        self._snapshot = self._analyzer.analyze([])
        self.notices: list[Notice] = []

    @property
    def records(self) -> tuple[HistoryRecord, ...]:
        return tuple(self._records)

    @property
    def snapshot(self) -> StatsSnapshot:
        return self._snapshot

    def get(self, record_id: int) -> HistoryRecord | None:
        """Return a loaded record by id (detail view)."""
        return next((r for r in self._records if r.id == record_id), None)

    async def refresh(self) -> StatsSnapshot:
        """Reload the history and recompute the statistics.

        On HistoryUnavailable the list is emptied, the snapshot degrades to
        the empty one and a notice is recorded.
        """
        try:
            records = await self._repository.list_records()
        except HistoryUnavailable as exc:
            logger.warning(f"History unavailable (error={exc.message})")
            self._notify(Notice.from_error(exc))
            records = []

        self._records = list(records)
        self._snapshot = self._analyzer.analyze(self._records)
        return self._snapshot

    async def delete(self, record_id: int) -> bool:
        """Delete a record, then drop it from the list and recompute.

        Deleting an id already gone is a no-op. On DeleteFailed the list is
        left untouched and a retryable notice is recorded.

        Returns:
            True if the record was removed from the list
        """
        try:
            await self._repository.delete(record_id)
        except DeleteFailed as exc:
            logger.warning(f"Delete failed (id={record_id}, error={exc.message})")
            self._notify(Notice.from_error(exc))
            return False

        remaining = self._analyzer.without(self._records, record_id)
        if len(remaining) == len(self._records):
            logger.debug(f"Delete ignored (reason=not_in_list, id={record_id})")
            return False

        self._records = remaining
        self._snapshot = self._analyzer.analyze(self._records)
        logger.info(f"Diagnostic removed from history (id={record_id}, remaining={len(remaining)})")
        return True

    def _notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        if self._on_notice is not None:
            self._on_notice(notice)
