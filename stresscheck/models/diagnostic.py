"""Diagnostic result models.

Defines the stress level enum, the classification of a score and the
immutable result of one questionnaire submission.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StressLevel(Enum):
    """Qualitative stress level.

    FAIBLE, MODERE and ELEVE are produced by the live classification.
    TRES_ELEVE only appears in stored submissions labelled by a server.
    """

    FAIBLE = "Faible"
    MODERE = "Modéré"
    ELEVE = "Élevé"
    TRES_ELEVE = "Très élevé"


@dataclass(frozen=True)
class Classification:
    """Level and interpretation text for a score.

    Attributes:
        level: Stress level of the band containing the score
        interpretation: Narrative interpretation of the band
    """

    level: StressLevel
    interpretation: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON response."""
        return {
            "stressLevel": self.level.value,
            "interpretation": self.interpretation,
        }


@dataclass(frozen=True)
class DiagnosticResult:
    """Result of one diagnostic submission.

    Created once per submission and never mutated.

    Attributes:
        score: Sum of the weights of the selected events
        stress_level: Level of the score
        interpretation: Interpretation text of the level
        recommendations: Advice, most important first
        selected_events_count: Number of selected events found in the catalog
    """

    score: int
    stress_level: StressLevel
    interpretation: str
    recommendations: tuple[str, ...] = field(default_factory=tuple)
    selected_events_count: int = 0

    def __post_init__(self) -> None:
        """Validate counters are non-negative."""
        if self.score < 0:
            raise ValueError(f"score must be >= 0, got {self.score}")
        if self.selected_events_count < 0:
            raise ValueError(
                f"selected_events_count must be >= 0, got {self.selected_events_count}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary using the submit response names.

        Returns:
            Dictionary representation of the result
        """
        return {
            "score": self.score,
            "stressLevel": self.stress_level.value,
            "interpretation": self.interpretation,
            "recommendations": list(self.recommendations),
            "selectedEventsCount": self.selected_events_count,
        }
