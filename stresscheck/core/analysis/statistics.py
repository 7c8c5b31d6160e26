"""Statistics over the diagnostic history.

Input is a list of HistoryRecord ordered most recent first. All functions
are pure: the same list always yields an equal StatsSnapshot.

Trend rule:
    recent   = mean score of records[0:3]
    previous = mean score of records[3:6]
    diff = recent - previous
    diff < -20 -> improving, diff > 20 -> worsening, otherwise stable
Computed only with at least 6 records, insufficient_data otherwise.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any

from stresscheck.core.analysis.scoring import round_half_up
from stresscheck.models.diagnostic import StressLevel
from stresscheck.models.history import HistoryRecord
from stresscheck.models.statistics import StatsSnapshot, Trend

logger = logging.getLogger(__name__)


class StatisticsAnalyzer:
    """Computes a StatsSnapshot from a diagnostic history.

    Usage:
        analyzer = get_statistics_analyzer()
        snapshot = analyzer.analyze(records)
    """

    DEFAULT_CONFIG = {
        "trend_window": 3,
        "trend_delta": 20,
    }

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        """Initialize the analyzer.

        Args:
            config: Optional configuration dict. If None, uses defaults.
                    Keys: trend_window, trend_delta
        """
        self._trend_window = self.DEFAULT_CONFIG["trend_window"]
        self._trend_delta = self.DEFAULT_CONFIG["trend_delta"]

        if config:
            self._apply_config(config)

        if self._trend_window < 1:
            raise ValueError(f"trend_window must be >= 1, got {self._trend_window}")

        logger.debug(
            f"StatisticsAnalyzer initialized "
            f"(window={self._trend_window}, delta={self._trend_delta})"
        )

    def _apply_config(self, config: dict[str, Any]) -> None:
        if "trend_window" in config:
            self._trend_window = int(config["trend_window"])
        if "trend_delta" in config:
            try:
                delta = float(config["trend_delta"])
            except (TypeError, ValueError):
                raise ValueError(f"trend_delta must be a number, got {config['trend_delta']!r}") from None
            if not math.isfinite(delta) or delta < 0:
                raise ValueError(f"trend_delta must be >= 0, got {delta}")
            self._trend_delta = delta

    @property
    def min_records_for_trend(self) -> int:
        """Number of records needed before a trend is computed."""
        return self._trend_window * 2

    def analyze(self, records: Sequence[HistoryRecord]) -> StatsSnapshot:
        """Compute the statistics of a history.

        Args:
            records: History records, most recent first

        Returns:
            StatsSnapshot (empty snapshot for an empty history)
        """
        if not records:
            return StatsSnapshot()

        distribution = self.level_distribution(records)
        snapshot = StatsSnapshot(
            total_diagnostics=len(records),
            average_events_count=self.average_events_count(records),
            level_distribution=distribution,
            most_frequent_level=self.most_frequent_level(distribution),
            recent_trend=self.recent_trend(records),
            last_diagnostic_date=records[0].created_at,
        )

        logger.debug(
            f"Statistics computed (total={snapshot.total_diagnostics}, "
            f"trend={snapshot.recent_trend.value})"
        )
        return snapshot

    def average_events_count(self, records: Sequence[HistoryRecord]) -> int | None:
        """Rounded mean number of selected events, None for an empty history."""
        if not records:
            return None
        total = sum(record.selected_events_count for record in records)
        return round_half_up(total / len(records))

    def level_distribution(self, records: Sequence[HistoryRecord]) -> dict[StressLevel, int]:
        """Count records per level, keys in first-encounter order."""
        distribution: dict[StressLevel, int] = {}
        for record in records:
            distribution[record.stress_level] = distribution.get(record.stress_level, 0) + 1
        return distribution

    def most_frequent_level(self, distribution: dict[StressLevel, int]) -> StressLevel | None:
        """Return the level with the highest count.

        Ties go to the level met first in the distribution order, i.e. the
        level of the most recent record among the tied ones.
        """
        best: StressLevel | None = None
        best_count = 0
        for level, count in distribution.items():
            if count > best_count:
                best, best_count = level, count
        return best

    def recent_trend(self, records: Sequence[HistoryRecord]) -> Trend:
        """Compare the latest window of scores with the previous one."""
        window = self._trend_window
        if len(records) < window * 2:
            return Trend.INSUFFICIENT_DATA

        recent = records[:window]
        previous = records[window:window * 2]
        recent_avg = sum(r.score for r in recent) / window
        previous_avg = sum(r.score for r in previous) / window
        diff = recent_avg - previous_avg

        if diff < -self._trend_delta:
            return Trend.IMPROVING
        if diff > self._trend_delta:
            return Trend.WORSENING
        return Trend.STABLE

    @staticmethod
    def without(records: Sequence[HistoryRecord], record_id: int) -> list[HistoryRecord]:
        """Return the records minus the one with the given id."""
        return [record for record in records if record.id != record_id]


# Singleton instance
_statistics_analyzer: StatisticsAnalyzer | None = None


def get_statistics_analyzer(config: dict[str, Any] | None = None) -> StatisticsAnalyzer:
    """Return the singleton statistics analyzer.

    Args:
        config: Optional "statistics" configuration (only used on first call)

    Returns:
        StatisticsAnalyzer singleton instance
    """
    global _statistics_analyzer
    if _statistics_analyzer is None:
        _statistics_analyzer = StatisticsAnalyzer(config)
    return _statistics_analyzer


def reset_statistics_analyzer() -> None:
    """Reset the singleton (useful for tests)."""
    global _statistics_analyzer
    _statistics_analyzer = None
