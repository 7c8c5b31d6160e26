"""Statistics models for the diagnostic history.

A StatsSnapshot is derived from the current list of history records and is
never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from stresscheck.models.diagnostic import StressLevel


class Trend(Enum):
    """Recent evolution of the scores."""

    IMPROVING = "improving"
    STABLE = "stable"
    WORSENING = "worsening"
    INSUFFICIENT_DATA = "insufficient_data"


TREND_LABELS = {
    Trend.IMPROVING: "En amélioration",
    Trend.STABLE: "Stable",
    Trend.WORSENING: "En détérioration",
    Trend.INSUFFICIENT_DATA: "Données insuffisantes",
}


@dataclass(frozen=True)
class StatsSnapshot:
    """Aggregate view over a diagnostic history.

    Attributes:
        total_diagnostics: Number of records
        average_events_count: Rounded mean of selected events (None if empty)
        level_distribution: Count per level, in first-encounter order
        most_frequent_level: Level with the highest count (None if empty)
        recent_trend: Trend between the 3 latest and the 3 previous scores
        last_diagnostic_date: Timestamp of the most recent record
    """

    total_diagnostics: int = 0
    average_events_count: int | None = None
    level_distribution: dict[StressLevel, int] = field(default_factory=dict)
    most_frequent_level: StressLevel | None = None
    recent_trend: Trend = Trend.INSUFFICIENT_DATA
    last_diagnostic_date: datetime | None = None

    @property
    def is_empty(self) -> bool:
        """True when the snapshot was computed from an empty history."""
        return self.total_diagnostics == 0

    def level_percentages(self) -> dict[StressLevel, int]:
        """Return the rounded share of each level, in percent."""
        if not self.total_diagnostics:
            return {}
        return {
            level: int(count * 100 / self.total_diagnostics + 0.5)
            for level, count in self.level_distribution.items()
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON response.

        Returns:
            Dictionary representation of the snapshot
        """
        return {
            "totalDiagnostics": self.total_diagnostics,
            "averageEventsCount": self.average_events_count,
            "levelDistribution": {
                level.value: count for level, count in self.level_distribution.items()
            },
            "mostFrequentLevel": (
                self.most_frequent_level.value if self.most_frequent_level else None
            ),
            "recentTrend": self.recent_trend.value,
            "recentTrendLabel": TREND_LABELS[self.recent_trend],
            "lastDiagnosticDate": (
                self.last_diagnostic_date.isoformat() if self.last_diagnostic_date else None
            ),
        }
