"""Life event models.

An Event is one weighted life occurrence of the questionnaire, belonging to
exactly one category. Events are immutable once loaded for a session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_CATEGORY = "Général"
DEFAULT_EVENT_TEXT = "Question sans texte"


@dataclass(frozen=True)
class Event:
    """Evenement de vie pondere.

    Attributes:
        id: Unique event identifier
        text: Label shown to the user
        weight: Non-negative number of points
        category: Category the event belongs to
        description: Optional longer description
        order: Optional display order from the catalog source
    """

    id: int
    text: str
    weight: float
    category: str = DEFAULT_CATEGORY
    description: str = ""
    order: int | None = None

    def __post_init__(self) -> None:
        """Validate weight is non-negative."""
        if self.weight < 0:
            raise ValueError(f"weight must be >= 0, got {self.weight}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON response."""
        result = {
            "id": self.id,
            "question": self.text,
            "weight": self.weight,
            "category": self.category,
        }
        if self.description:
            result["description"] = self.description
        if self.order is not None:
            result["order"] = self.order
        return result
