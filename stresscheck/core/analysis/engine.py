"""Diagnostic engine: score -> classification -> recommendations.

Composes the three pure steps. The result is fully computed before anyone
persists it.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from typing import Any

from stresscheck.core.analysis.classification import (
    ClassificationPolicy,
    get_classification_policy,
)
from stresscheck.core.analysis.recommendations import RecommendationGenerator
from stresscheck.core.analysis.scoring import ScoringEngine
from stresscheck.models.diagnostic import DiagnosticResult
from stresscheck.models.event import Event

logger = logging.getLogger(__name__)


class DiagnosticEngine:
    """Evaluates a selection of events into a DiagnosticResult.

    Usage:
        engine = get_diagnostic_engine()
        result = engine.evaluate(catalog.events, selection)
    """

    def __init__(
        self,
        policy: ClassificationPolicy | None = None,
        scoring: ScoringEngine | None = None,
        recommender: RecommendationGenerator | None = None,
    ) -> None:
        self.policy = policy or ClassificationPolicy()
        self.scoring = scoring or ScoringEngine()
        self.recommender = recommender or RecommendationGenerator()

    def evaluate(
        self,
        events: Iterable[Event],
        selection: Collection[int],
    ) -> DiagnosticResult:
        """Compute the diagnostic result of a selection.

        Args:
            events: Catalog events
            selection: Selected event ids

        Returns:
            Immutable DiagnosticResult
        """
        events = list(events)
        selected = self.scoring.selected_events(events, selection)
        score = self.scoring.score(events, selection)
        classification = self.policy.classify(score)
        recommendations = self.recommender.recommend(classification.level)

        result = DiagnosticResult(
            score=score,
            stress_level=classification.level,
            interpretation=classification.interpretation,
            recommendations=recommendations,
            selected_events_count=len(selected),
        )

        logger.info(
            f"Diagnostic evaluated (score={score}, level={classification.level.value}, "
            f"events={len(selected)})"
        )
        return result


# Singleton instance
_diagnostic_engine: DiagnosticEngine | None = None


def get_diagnostic_engine(config: dict[str, Any] | None = None) -> DiagnosticEngine:
    """Return the singleton diagnostic engine.

    The engine shares the singleton classification policy so that fresh
    and stored results are classified by the same table.

    Args:
        config: Optional "classification" configuration (only used on first call)

    Returns:
        DiagnosticEngine singleton instance
    """
    global _diagnostic_engine
    if _diagnostic_engine is None:
        _diagnostic_engine = DiagnosticEngine(policy=get_classification_policy(config))
    return _diagnostic_engine


def reset_diagnostic_engine() -> None:
    """Reset le singleton (utile pour les tests)."""
    global _diagnostic_engine
    _diagnostic_engine = None
