"""Scoring of a questionnaire selection.

score = sum of the weights of the selected events. Ids that are not in the
catalog are ignored. Weights are non-negative, so the score never decreases
when events are added to the selection.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Collection, Iterable

from stresscheck.models.event import Event

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round a non-negative number to the nearest int, halves going up."""
    return int(math.floor(value + 0.5))


class ScoringEngine:
    """Moteur de scoring des evenements selectionnes.

    Usage:
        engine = ScoringEngine()
        score = engine.score(catalog.events, {1, 4, 12})
    """

    def selected_events(
        self,
        events: Iterable[Event],
        selection: Collection[int],
    ) -> list[Event]:
        """Return the catalog events whose id is selected, once each.

        Args:
            events: Catalog events
            selection: Selected event ids

        Returns:
            Selected events in catalog order
        """
        seen: set[int] = set()
        selected: list[Event] = []
        for event in events:
            if event.id in selection and event.id not in seen:
                seen.add(event.id)
                selected.append(event)
        return selected

    def score(self, events: Iterable[Event], selection: Collection[int]) -> int:
        """Compute the score of a selection.

        Args:
            events: Catalog events
            selection: Selected event ids (unknown ids are ignored)

        Returns:
            Score (>= 0)
        """
        total = sum(event.weight for event in self.selected_events(events, selection))
        score = round_half_up(total)

        logger.debug(f"Score calculated (selected={len(selection)}, score={score})")
        return score
