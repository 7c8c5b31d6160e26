"""Classification of diagnostic scores into stress levels.

Single authority for both fresh results and stored history: the live path
calls classify(), the history ingestion calls parse_level() and falls back to
classify() when a stored label is missing or unknown.

Bands are half-open, inclusive on the lower bound:
    score < 150        -> Faible
    150 <= score < 300 -> Modéré
    score >= 300       -> Élevé

Thresholds can be overridden from the "classification" section of
stresscheck.yaml. The optional "very_high" threshold is disabled by default.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Any

from stresscheck.models.diagnostic import Classification, StressLevel

logger = logging.getLogger(__name__)


def _fold(label: str) -> str:
    """Lowercase, strip accents and separators for label matching."""
    decomposed = unicodedata.normalize("NFKD", label)
    ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
    cleaned = ascii_only.lower().replace("_", " ").replace("-", " ")
    return " ".join(cleaned.split())


class ClassificationPolicy:
    """Maps a score to a stress level and its interpretation.

    Usage:
        policy = get_classification_policy()
        classification = policy.classify(180)
        classification.level  # StressLevel.MODERE
    """

    DEFAULT_THRESHOLDS: dict[str, int | None] = {
        "moderate": 150,
        "high": 300,
        "very_high": None,
    }

    INTERPRETATIONS: dict[StressLevel, str] = {
        StressLevel.FAIBLE: "Risque faible de problème de santé lié au stress (moins de 30%)",
        StressLevel.MODERE: "Risque modéré de problème de santé lié au stress (30% à 50%)",
        StressLevel.ELEVE: "Risque élevé de problème de santé lié au stress (plus de 80%)",
        StressLevel.TRES_ELEVE: "Risque très élevé de problème de santé lié au stress",
    }

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        """Initialise la politique de classification.

        Args:
            config: Optional configuration dict. If None, uses defaults.
                    Keys: thresholds {"moderate": 150, "high": 300, "very_high": None}
        """
        self._thresholds = self.DEFAULT_THRESHOLDS.copy()

        if config:
            self._apply_config(config)

        self._validate_thresholds()
        logger.debug(f"ClassificationPolicy initialized (thresholds={self._thresholds})")

    def _apply_config(self, config: dict[str, Any]) -> None:
        """Apply configuration overrides.

        Args:
            config: Configuration dictionary with optional keys.
        """
        thresholds = config.get("thresholds")
        if thresholds:
            self._thresholds.update(thresholds)

    def _validate_thresholds(self) -> None:
        moderate = self._thresholds["moderate"]
        high = self._thresholds["high"]
        very_high = self._thresholds.get("very_high")

        if not 0 < moderate < high:
            raise ValueError(
                f"Invalid thresholds: expected 0 < moderate < high, got {moderate}, {high}"
            )
        if very_high is not None and very_high <= high:
            raise ValueError(
                f"Invalid thresholds: very_high must be > high, got {very_high}"
            )

    @property
    def thresholds(self) -> dict[str, int | None]:
        """Return a copy of the active thresholds."""
        return dict(self._thresholds)

    def bands(self) -> list[tuple[int, int | None, StressLevel]]:
        """Return the ordered bands as (lower, upper, level), upper exclusive.

        The last band has no upper bound.
        """
        moderate = self._thresholds["moderate"]
        high = self._thresholds["high"]
        very_high = self._thresholds.get("very_high")

        bands = [
            (0, moderate, StressLevel.FAIBLE),
            (moderate, high, StressLevel.MODERE),
        ]
        if very_high is None:
            bands.append((high, None, StressLevel.ELEVE))
        else:
            bands.append((high, very_high, StressLevel.ELEVE))
            bands.append((very_high, None, StressLevel.TRES_ELEVE))
        return bands

    def level_for(self, score: int) -> StressLevel:
        """Return the stress level of a score.

        Args:
            score: Diagnostic score (>= 0)

        Returns:
            StressLevel of the band containing the score

        Raises:
            ValueError: If score is negative
        """
        if score < 0:
            raise ValueError(f"score must be >= 0, got {score}")

        for lower, upper, level in self.bands():
            if upper is None or lower <= score < upper:
                return level
        # unreachable: the last band is unbounded
        raise AssertionError("classification bands are not contiguous")

    def interpretation_for(self, level: StressLevel) -> str:
        """Return the interpretation text of a level."""
        return self.INTERPRETATIONS[level]

    def classify(self, score: int) -> Classification:
        """Classify a score.

        Args:
            score: Diagnostic score (>= 0)

        Returns:
            Classification with level and interpretation
        """
        level = self.level_for(score)
        return Classification(level=level, interpretation=self.interpretation_for(level))

    def parse_level(self, label: Any) -> StressLevel | None:
        """Resolve a stored or server-supplied label to a stress level.

        Accepts enum values ("Modéré"), enum names ("TRES_ELEVE"), the
        "risque ..." variants and unaccented spellings.

        Args:
            label: Label as found in a payload

        Returns:
            StressLevel, or None if the label is not recognised
        """
        if isinstance(label, StressLevel):
            return label
        if not isinstance(label, str) or not label.strip():
            return None

        key = _fold(label)
        if "tres eleve" in key or "very high" in key:
            return StressLevel.TRES_ELEVE
        if "eleve" in key or key == "high":
            return StressLevel.ELEVE
        if "modere" in key or key == "moderate":
            return StressLevel.MODERE
        if "faible" in key or key == "low":
            return StressLevel.FAIBLE

        logger.debug(f"Unknown stress level label (label={label})")
        return None


# Singleton instance
_classification_policy: ClassificationPolicy | None = None


def get_classification_policy(config: dict[str, Any] | None = None) -> ClassificationPolicy:
    """Return the singleton classification policy.

    Args:
        config: Optional configuration (only used on first call)

    Returns:
        ClassificationPolicy singleton instance
    """
    global _classification_policy
    if _classification_policy is None:
        _classification_policy = ClassificationPolicy(config)
    return _classification_policy


def reset_classification_policy() -> None:
    """Reset the singleton (useful for tests)."""
    global _classification_policy
    _classification_policy = None
