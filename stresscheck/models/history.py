"""Diagnostic history models.

A HistoryRecord is a persisted DiagnosticResult. Records are created on
submission, read many times and deleted individually; there is no update.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from stresscheck.models.diagnostic import DiagnosticResult, StressLevel


@dataclass(frozen=True)
class HistoryRecord:
    """Stored diagnostic.

    Attributes:
        id: Identifier assigned by the history store
        created_at: Submission timestamp (UTC)
        score: Score of the diagnostic
        stress_level: Level stored with the diagnostic
        interpretation: Interpretation text stored with the diagnostic
        recommendations: Advice stored with the diagnostic
        selected_events_count: Number of selected events
        selected_event_ids: Ids of the selected events, if known
    """

    id: int
    created_at: datetime
    score: int
    stress_level: StressLevel
    interpretation: str = ""
    recommendations: tuple[str, ...] = field(default_factory=tuple)
    selected_events_count: int = 0
    selected_event_ids: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_result(
        cls,
        record_id: int,
        created_at: datetime,
        result: DiagnosticResult,
        selected_event_ids: tuple[int, ...] = (),
    ) -> HistoryRecord:
        """Build a record for a freshly computed result."""
        return cls(
            id=record_id,
            created_at=created_at,
            score=result.score,
            stress_level=result.stress_level,
            interpretation=result.interpretation,
            recommendations=tuple(result.recommendations),
            selected_events_count=result.selected_events_count,
            selected_event_ids=tuple(selected_event_ids),
        )

    def to_result(self) -> DiagnosticResult:
        """Return the diagnostic result this record stores."""
        return DiagnosticResult(
            score=self.score,
            stress_level=self.stress_level,
            interpretation=self.interpretation,
            recommendations=self.recommendations,
            selected_events_count=self.selected_events_count,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON response and storage.

        Returns:
            Dictionary representation of the record
        """
        return {
            "id": self.id,
            "score": self.score,
            "stress_level": self.stress_level.value,
            "interpretation": self.interpretation,
            "recommendations": list(self.recommendations),
            "selected_events_count": self.selected_events_count,
            "selected_event_ids": list(self.selected_event_ids),
            "created_at": self.created_at.isoformat(),
        }
