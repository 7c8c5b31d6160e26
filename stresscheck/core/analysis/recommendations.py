"""Recommendations per stress level.

Fixed lookup table. Order is significant: the most important advice comes
first and must be shown to users as-is.
"""

from __future__ import annotations

import logging

from stresscheck.models.diagnostic import StressLevel

logger = logging.getLogger(__name__)


_FAIBLE = (
    "Maintenez vos habitudes saines actuelles",
    "Continuez à pratiquer des activités relaxantes",
    "Restez vigilant aux signes de stress",
    "Partagez vos bonnes pratiques avec votre entourage",
)

_MODERE = (
    "Pratiquez des techniques de relaxation quotidiennes",
    "Organisez mieux votre temps et vos priorités",
    "Parlez de vos préoccupations à un proche",
    "Considérez consulter un professionnel de santé",
    "Adoptez une routine d'exercice régulière",
)

_ELEVE = (
    "Consultez un professionnel de santé dans les plus brefs délais",
    "Pratiquez des techniques de gestion du stress intensives",
    "Réorganisez vos priorités et réduisez les sources de stress",
    "Cherchez du soutien auprès de votre famille et amis",
    "Envisagez un accompagnement psychologique",
)


class RecommendationGenerator:
    """Lookup of ordered advice for a stress level.

    Usage:
        generator = RecommendationGenerator()
        advice = generator.recommend(StressLevel.MODERE)
    """

    RECOMMENDATIONS: dict[StressLevel, tuple[str, ...]] = {
        StressLevel.FAIBLE: _FAIBLE,
        StressLevel.MODERE: _MODERE,
        StressLevel.ELEVE: _ELEVE,
        # Stored labels only, shares the most urgent advice
        StressLevel.TRES_ELEVE: _ELEVE,
    }

    def recommend(self, level: StressLevel) -> tuple[str, ...]:
        """Return the advice for a level, most important first.

        Args:
            level: Stress level

        Returns:
            Tuple of advice strings
        """
        return self.RECOMMENDATIONS[level]
