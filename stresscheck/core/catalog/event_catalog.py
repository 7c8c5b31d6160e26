"""Event catalog: the categorized list of selectable life events.

Built once per session from a raw payload through the normalization adapter.
Categories keep their first-seen order, which is the navigation order of the
questionnaire.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Protocol

from stresscheck.core.catalog.normalization import normalize_events
from stresscheck.models.event import Event

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """Anything able to fetch the raw questions payload."""

    async def fetch_questions(self) -> Any:
        ...


class EventCatalog:
    """Immutable, categorized list of events.

    Usage:
        catalog = await EventCatalog.load(source)
        for category in catalog.categories():
            events = catalog.events_in(category)
    """

    def __init__(self, events: Iterable[Event] = ()) -> None:
        """Build a catalog from events.

        Duplicate ids keep their first occurrence. When every event carries
        an order, events are sorted by it (stable).

        Args:
            events: Normalized events
        """
        unique: list[Event] = []
        seen: set[int] = set()
        for event in events:
            if event.id in seen:
                logger.warning(f"Duplicate catalog event ignored (id={event.id})")
                continue
            seen.add(event.id)
            unique.append(event)

        if unique and all(e.order is not None for e in unique):
            unique.sort(key=lambda e: e.order)

        self._events: tuple[Event, ...] = tuple(unique)
        self._by_id: dict[int, Event] = {e.id: e for e in self._events}
        self._categories: tuple[str, ...] = tuple(dict.fromkeys(e.category for e in self._events))

    @classmethod
    def from_raw(cls, payload: Any) -> EventCatalog:
        """Build a catalog from a raw questions payload.

        A payload that carries no list gives an empty catalog.

        Args:
            payload: {"events": [...]} or a bare list of raw events

        Returns:
            EventCatalog
        """
        catalog = cls(normalize_events(payload))
        logger.info(
            f"Catalog loaded (events={len(catalog)}, categories={len(catalog.categories())})"
        )
        return catalog

    @classmethod
    async def load(cls, source: CatalogSource) -> EventCatalog:
        """Fetch the raw questions from a source and build the catalog.

        Transport failures raised by the source propagate to the caller.

        Args:
            source: Catalog source (e.g. the REST client)

        Returns:
            EventCatalog, possibly empty
        """
        payload = await source.fetch_questions()
        return cls.from_raw(payload)

    @property
    def events(self) -> tuple[Event, ...]:
        return self._events

    @property
    def is_empty(self) -> bool:
        return not self._events

    def categories(self) -> list[str]:
        """Return the distinct categories in first-seen order."""
        return list(self._categories)

    def events_in(self, category: str) -> list[Event]:
        """Return the events of a category, in catalog order."""
        return [e for e in self._events if e.category == category]

    def get(self, event_id: int) -> Event | None:
        """Return an event by id or None."""
        return self._by_id.get(event_id)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._by_id

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the questions payload shape."""
        return {
            "events": [e.to_dict() for e in self._events],
            "categories": self.categories(),
        }
