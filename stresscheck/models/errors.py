"""Error taxonomy for the stress diagnostic.

Every error carries a stable code so that the API layer and the client
notices can report it without parsing messages.

Transport errors (catalog, submit, history, delete) are retryable and local
to one query. Questionnaire errors are local to one session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


# Error code constants
CATALOG_UNAVAILABLE = "CATALOG_UNAVAILABLE"
CATALOG_INVALID = "CATALOG_INVALID"
CATALOG_SAVE_FAILED = "CATALOG_SAVE_FAILED"
DIAGNOSTIC_EMPTY_SELECTION = "DIAGNOSTIC_EMPTY_SELECTION"
DIAGNOSTIC_INVALID_SELECTION = "DIAGNOSTIC_INVALID_SELECTION"
SESSION_INVALID_TRANSITION = "SESSION_INVALID_TRANSITION"
SUBMISSION_FAILED = "SUBMISSION_FAILED"
HISTORY_UNAVAILABLE = "HISTORY_UNAVAILABLE"
HISTORY_DELETE_FAILED = "HISTORY_DELETE_FAILED"


class DiagnosticError(Exception):
    """Base exception for diagnostic errors.

    Attributes:
        code: Error code (e.g., 'CATALOG_UNAVAILABLE')
        message: Human-readable error message
        details: Additional error details
        retryable: True when the same call may succeed later
    """

    code = "DIAGNOSTIC_ERROR"
    retryable = False

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON error response."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class CatalogUnavailable(DiagnosticError):
    """Questions could not be fetched or parsed. No session is created."""

    code = CATALOG_UNAVAILABLE
    retryable = True


class EmptySelectionError(DiagnosticError):
    """Submission attempted with no selected event."""

    code = DIAGNOSTIC_EMPTY_SELECTION

    def __init__(self, message: str = "Veuillez sélectionner au moins un événement pour continuer."):
        super().__init__(message)


class InvalidTransitionError(DiagnosticError):
    """Transition not allowed from the current questionnaire state."""

    code = SESSION_INVALID_TRANSITION


class SubmissionFailed(DiagnosticError):
    """Transport failure while persisting a diagnostic."""

    code = SUBMISSION_FAILED
    retryable = True


class HistoryUnavailable(DiagnosticError):
    """History could not be fetched."""

    code = HISTORY_UNAVAILABLE
    retryable = True


class DeleteFailed(DiagnosticError):
    """A history record could not be deleted. The local list is left untouched."""

    code = HISTORY_DELETE_FAILED
    retryable = True


@dataclass(frozen=True)
class Notice:
    """User-visible notification for a failed remote operation.

    Attributes:
        code: Error code of the underlying failure
        message: Message shown to the user
        retryable: True if the user may retry the operation
    """

    code: str
    message: str
    retryable: bool = True

    @classmethod
    def from_error(cls, error: DiagnosticError) -> Notice:
        """Build a notice from a diagnostic error."""
        return cls(code=error.code, message=error.message, retryable=error.retryable)

    def to_dict(self) -> dict[str, Any]:
        """Serialisation JSON."""
        return {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }
