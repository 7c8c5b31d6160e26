"""Questionnaire session state.

The state is a tagged variant: AT_CATEGORY carries the category index, the
other phases carry none.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SessionPhase(Enum):
    """Phase of a questionnaire session."""

    EMPTY = "empty"
    AT_CATEGORY = "at_category"
    SUBMITTING = "submitting"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SessionState:
    """Current state of a questionnaire session.

    Attributes:
        phase: Session phase
        index: Category index, only set when phase is AT_CATEGORY
    """

    phase: SessionPhase
    index: int | None = None

    def __post_init__(self) -> None:
        """Validate that only AT_CATEGORY carries an index."""
        if self.phase == SessionPhase.AT_CATEGORY:
            if self.index is None or self.index < 0:
                raise ValueError(f"AT_CATEGORY requires an index >= 0, got {self.index}")
        elif self.index is not None:
            raise ValueError(f"{self.phase.value} does not carry an index")

    @classmethod
    def at_category(cls, index: int) -> SessionState:
        return cls(SessionPhase.AT_CATEGORY, index)

    @classmethod
    def empty(cls) -> SessionState:
        return cls(SessionPhase.EMPTY)

    @classmethod
    def submitting(cls) -> SessionState:
        return cls(SessionPhase.SUBMITTING)

    @classmethod
    def complete(cls) -> SessionState:
        return cls(SessionPhase.COMPLETE)

    @property
    def is_navigating(self) -> bool:
        return self.phase == SessionPhase.AT_CATEGORY

    def to_dict(self) -> dict[str, Any]:
        """Serialisation JSON."""
        return {"phase": self.phase.value, "index": self.index}
