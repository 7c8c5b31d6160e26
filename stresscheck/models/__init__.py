# Data models package

from stresscheck.models.event import (
    DEFAULT_CATEGORY,
    DEFAULT_EVENT_TEXT,
    Event,
)
from stresscheck.models.diagnostic import (
    Classification,
    DiagnosticResult,
    StressLevel,
)
from stresscheck.models.history import HistoryRecord
from stresscheck.models.session import SessionPhase, SessionState
from stresscheck.models.statistics import TREND_LABELS, StatsSnapshot, Trend
from stresscheck.models.errors import (
    CatalogUnavailable,
    DeleteFailed,
    DiagnosticError,
    EmptySelectionError,
    HistoryUnavailable,
    InvalidTransitionError,
    Notice,
    SubmissionFailed,
    CATALOG_INVALID,
    CATALOG_SAVE_FAILED,
    CATALOG_UNAVAILABLE,
    DIAGNOSTIC_EMPTY_SELECTION,
    DIAGNOSTIC_INVALID_SELECTION,
    HISTORY_DELETE_FAILED,
    HISTORY_UNAVAILABLE,
    SESSION_INVALID_TRANSITION,
    SUBMISSION_FAILED,
)

__all__ = [
    # Catalog
    "DEFAULT_CATEGORY",
    "DEFAULT_EVENT_TEXT",
    "Event",
    # Diagnostic
    "Classification",
    "DiagnosticResult",
    "StressLevel",
    "HistoryRecord",
    # Questionnaire
    "SessionPhase",
    "SessionState",
    # Statistics
    "TREND_LABELS",
    "StatsSnapshot",
    "Trend",
    # Errors
    "CatalogUnavailable",
    "DeleteFailed",
    "DiagnosticError",
    "EmptySelectionError",
    "HistoryUnavailable",
    "InvalidTransitionError",
    "Notice",
    "SubmissionFailed",
    "CATALOG_INVALID",
    "CATALOG_SAVE_FAILED",
    "CATALOG_UNAVAILABLE",
    "DIAGNOSTIC_EMPTY_SELECTION",
    "DIAGNOSTIC_INVALID_SELECTION",
    "HISTORY_DELETE_FAILED",
    "HISTORY_UNAVAILABLE",
    "SESSION_INVALID_TRANSITION",
    "SUBMISSION_FAILED",
]
