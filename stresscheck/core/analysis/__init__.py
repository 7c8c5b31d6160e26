# Diagnostic analysis: scoring, classification, recommendations, statistics

from stresscheck.core.analysis.scoring import ScoringEngine, round_half_up
from stresscheck.core.analysis.classification import (
    ClassificationPolicy,
    get_classification_policy,
    reset_classification_policy,
)
from stresscheck.core.analysis.recommendations import RecommendationGenerator
from stresscheck.core.analysis.engine import (
    DiagnosticEngine,
    get_diagnostic_engine,
    reset_diagnostic_engine,
)
from stresscheck.core.analysis.statistics import (
    StatisticsAnalyzer,
    get_statistics_analyzer,
    reset_statistics_analyzer,
)

__all__ = [
    "ScoringEngine",
    "round_half_up",
    # Classification
    "ClassificationPolicy",
    "get_classification_policy",
    "reset_classification_policy",
    "RecommendationGenerator",
    # Engine
    "DiagnosticEngine",
    "get_diagnostic_engine",
    "reset_diagnostic_engine",
    # Statistics
    "StatisticsAnalyzer",
    "get_statistics_analyzer",
    "reset_statistics_analyzer",
]
