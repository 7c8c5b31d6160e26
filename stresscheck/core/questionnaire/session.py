"""Questionnaire session state machine.

States:
    EMPTY              catalog has no category
    AT_CATEGORY(i)     user is on category i, 0 <= i < n
    SUBMITTING         result being computed (transient)
    COMPLETE           result available, session is done

Transitions (the only mutators):
    toggle(id)   AT_CATEGORY -> AT_CATEGORY, flips id in the selection
    next()       AT_CATEGORY(i) -> AT_CATEGORY(i+1)            if i < n-1
                 AT_CATEGORY(n-1) -> SUBMITTING -> COMPLETE    if selection not empty
                 AT_CATEGORY(n-1) stays, EmptySelectionError   if selection empty
    previous()   AT_CATEGORY(i) -> AT_CATEGORY(i-1)            if i > 0

One session holds one submission. A new diagnostic needs a new session.
"""

from __future__ import annotations

import logging

from stresscheck.core.analysis.engine import DiagnosticEngine, get_diagnostic_engine
from stresscheck.core.catalog.event_catalog import EventCatalog
from stresscheck.models.diagnostic import DiagnosticResult
from stresscheck.models.errors import EmptySelectionError, InvalidTransitionError
from stresscheck.models.event import Event
from stresscheck.models.session import SessionPhase, SessionState

logger = logging.getLogger(__name__)


class QuestionnaireSession:
    """Walk through the catalog categories and collect a selection.

    Usage:
        session = QuestionnaireSession(catalog, engine)
        session.toggle(3)
        while session.result is None:
            session.next()
    """

    def __init__(self, catalog: EventCatalog, engine: DiagnosticEngine | None = None) -> None:
        """Start a session on a loaded catalog.

        Args:
            catalog: Loaded event catalog
            engine: Diagnostic engine used at submission
        """
        self._catalog = catalog
        self._engine = engine or get_diagnostic_engine()
        self._categories = catalog.categories()
        self._selection: set[int] = set()
        self._result: DiagnosticResult | None = None

        if self._categories:
            self._state = SessionState.at_category(0)
        else:
            self._state = SessionState.empty()

        logger.debug(
            f"Questionnaire session started (categories={len(self._categories)}, "
            f"state={self._state.phase.value})"
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def catalog(self) -> EventCatalog:
        return self._catalog

    @property
    def result(self) -> DiagnosticResult | None:
        """Result of the submission, None until COMPLETE."""
        return self._result

    @property
    def selection(self) -> frozenset[int]:
        return frozenset(self._selection)

    @property
    def selected_count(self) -> int:
        return len(self._selection)

    @property
    def category_count(self) -> int:
        return len(self._categories)

    @property
    def current_category(self) -> str | None:
        """Category being shown, None outside AT_CATEGORY."""
        if not self._state.is_navigating:
            return None
        return self._categories[self._state.index]

    def current_events(self) -> list[Event]:
        """Events of the current category."""
        category = self.current_category
        if category is None:
            return []
        return self._catalog.events_in(category)

    def is_selected(self, event_id: int) -> bool:
        return event_id in self._selection

    def toggle(self, event_id: int) -> bool:
        """Flip the membership of an event in the selection.

        Ignored outside AT_CATEGORY and for ids unknown to the catalog.

        Args:
            event_id: Event id

        Returns:
            True if the event is selected after the call
        """
        if not self._state.is_navigating:
            logger.debug(f"Toggle ignored (state={self._state.phase.value}, id={event_id})")
            return event_id in self._selection
        if event_id not in self._catalog:
            logger.debug(f"Toggle ignored (reason=unknown_event, id={event_id})")
            return False

        if event_id in self._selection:
            self._selection.discard(event_id)
            return False
        self._selection.add(event_id)
        return True

    def next(self) -> SessionState:
        """Go to the next category, or submit from the last one.

        Returns:
            New state

        Raises:
            EmptySelectionError: Submitting with nothing selected (state unchanged)
            InvalidTransitionError: Called outside AT_CATEGORY
        """
        if not self._state.is_navigating:
            raise InvalidTransitionError(
                f"next() impossible depuis l'etat {self._state.phase.value}",
                details={"phase": self._state.phase.value},
            )

        index = self._state.index
        if index < len(self._categories) - 1:
            self._state = SessionState.at_category(index + 1)
            return self._state

        if not self._selection:
            logger.info("Submission refused (reason=empty_selection)")
            raise EmptySelectionError()

        self._submit()
        return self._state

    def previous(self) -> SessionState:
        """Go back one category. No-op on the first category.

        Returns:
            New state
        """
        if self._state.is_navigating and self._state.index > 0:
            self._state = SessionState.at_category(self._state.index - 1)
        return self._state

    def progress(self) -> float:
        """Progress in percent.

        (index + 1) / (n + 1) while navigating, so 100 is only reached once
        the submission is complete.
        """
        if self._state.phase == SessionPhase.COMPLETE:
            return 100.0
        if self._state.phase == SessionPhase.SUBMITTING:
            return len(self._categories) / (len(self._categories) + 1) * 100
        if not self._state.is_navigating:
            return 0.0
        return (self._state.index + 1) / (len(self._categories) + 1) * 100

    def category_position(self) -> tuple[int, int]:
        """Return (current position starting at 1, category count)."""
        if self._state.is_navigating:
            return self._state.index + 1, len(self._categories)
        if self._state.phase == SessionPhase.EMPTY:
            return 0, 0
        return len(self._categories), len(self._categories)

    def _submit(self) -> None:
        self._state = SessionState.submitting()
        self._result = self._engine.evaluate(self._catalog.events, self._selection)
        self._state = SessionState.complete()
        logger.info(
            f"Questionnaire complete (score={self._result.score}, "
            f"level={self._result.stress_level.value})"
        )
