"""Ingestion adapter for upstream payloads.

Upstream payloads are inconsistently shaped: lists come bare or wrapped in an
object, and fields come under several names. This module is the only place
that knows the aliases; everything downstream uses Event, HistoryRecord and
DiagnosticResult.

Field priority (first present, non-empty value wins):
    Event.text            question, title, event_text
    Event.weight          weight, points
    Event.category        category (default "Général")
    HistoryRecord.score   score, total_score
    stress level label    stress_level, stressLevel, result_category
    interpretation        interpretation, recommendation
    created_at            created_at, createdAt
    events count          selected_events_count, selectedEventsCount,
                          len(selected_event_ids | selectedEventIds |
                              selected_events | selectedEvents)

Malformed records are skipped with a warning, never raised.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any

from stresscheck.core.analysis.classification import ClassificationPolicy
from stresscheck.core.analysis.recommendations import RecommendationGenerator
from stresscheck.models.diagnostic import DiagnosticResult
from stresscheck.models.event import DEFAULT_CATEGORY, DEFAULT_EVENT_TEXT, Event
from stresscheck.models.history import HistoryRecord

logger = logging.getLogger(__name__)

EVENT_TEXT_KEYS = ("question", "title", "event_text")
EVENT_WEIGHT_KEYS = ("weight", "points")
SCORE_KEYS = ("score", "total_score")
LEVEL_KEYS = ("stress_level", "stressLevel", "result_category")
INTERPRETATION_KEYS = ("interpretation", "recommendation")
CREATED_AT_KEYS = ("created_at", "createdAt")
EVENTS_COUNT_KEYS = ("selected_events_count", "selectedEventsCount")
SELECTED_IDS_KEYS = ("selected_event_ids", "selectedEventIds", "selected_events", "selectedEvents")


def unwrap_collection(payload: Any, key: str) -> list[Any] | None:
    """Return the list carried by a payload, bare or wrapped under key.

    Args:
        payload: Decoded JSON payload
        key: Wrapping key (e.g. "events", "diagnostics")

    Returns:
        The list, or None if the payload carries no list
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        inner = payload.get(key)
        if isinstance(inner, list):
            return inner
    return None


def _first(raw: dict[str, Any], keys: tuple[str, ...]) -> Any:
    """Return the first value present under keys, skipping None and ''."""
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _as_int(value: Any) -> int | None:
    """Coerce an id-like value to int, None if not integral."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_number(value: Any) -> int | float | None:
    """Coerce a weight-like value to a number, None if not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if isinstance(number, float) and not math.isfinite(number):
        return None
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_event(raw: Any) -> Event | None:
    """Map one raw event record to an Event.

    Args:
        raw: Raw record from the catalog source

    Returns:
        Event, or None if the record has no usable id or weight
    """
    if not isinstance(raw, dict):
        logger.warning(f"Catalog record skipped (reason=not_an_object, type={type(raw).__name__})")
        return None

    event_id = _as_int(raw.get("id"))
    if event_id is None:
        logger.warning(f"Catalog record skipped (reason=invalid_id, id={raw.get('id')!r})")
        return None

    raw_weight = _first(raw, EVENT_WEIGHT_KEYS)
    weight = 0 if raw_weight is None else _as_number(raw_weight)
    if weight is None or weight < 0:
        logger.warning(f"Catalog record skipped (reason=invalid_weight, id={event_id}, weight={raw_weight!r})")
        return None

    text = _first(raw, EVENT_TEXT_KEYS)
    category = raw.get("category")
    if not isinstance(category, str) or not category.strip():
        category = DEFAULT_CATEGORY
    description = raw.get("description")

    return Event(
        id=event_id,
        text=str(text).strip() if text is not None else DEFAULT_EVENT_TEXT,
        weight=weight,
        category=category.strip(),
        description=description.strip() if isinstance(description, str) else "",
        order=_as_int(raw.get("order")),
    )


def normalize_events(payload: Any) -> list[Event]:
    """Map a questions payload to events.

    Args:
        payload: {"events": [...]} or a bare list

    Returns:
        List of events (empty if the payload carries no list)
    """
    raw_events = unwrap_collection(payload, "events")
    if raw_events is None:
        logger.warning(f"Unexpected questions payload (type={type(payload).__name__})")
        return []

    events = [e for e in (normalize_event(raw) for raw in raw_events) if e is not None]
    if len(events) != len(raw_events):
        logger.info(f"Catalog normalized (kept={len(events)}, skipped={len(raw_events) - len(events)})")
    return events


def _selected_ids(raw: dict[str, Any]) -> list[int] | None:
    value = _first(raw, SELECTED_IDS_KEYS)
    if not isinstance(value, list):
        return None
    ids = []
    for item in value:
        # Some servers send the selected events as objects
        if isinstance(item, dict):
            item = item.get("id")
        item_id = _as_int(item)
        if item_id is not None:
            ids.append(item_id)
    return ids


def normalize_history_record(
    raw: Any,
    policy: ClassificationPolicy,
    recommender: RecommendationGenerator | None = None,
) -> HistoryRecord | None:
    """Map one raw history record to a HistoryRecord.

    The stored level label wins when the policy recognises it; otherwise the
    level is derived from the score with the same policy.

    Args:
        raw: Raw history record
        policy: Classification authority
        recommender: Used when the record carries no recommendations

    Returns:
        HistoryRecord, or None if id, score or timestamp is unusable
    """
    if not isinstance(raw, dict):
        logger.warning(f"History record skipped (reason=not_an_object, type={type(raw).__name__})")
        return None

    record_id = _as_int(raw.get("id"))
    score = _as_int(_first(raw, SCORE_KEYS))
    created_at = parse_timestamp(_first(raw, CREATED_AT_KEYS))
    if record_id is None or score is None or score < 0 or created_at is None:
        logger.warning(
            f"History record skipped (reason=missing_fields, id={raw.get('id')!r})"
        )
        return None

    level = policy.parse_level(_first(raw, LEVEL_KEYS))
    if level is None:
        level = policy.level_for(score)

    interpretation = _first(raw, INTERPRETATION_KEYS)
    if not isinstance(interpretation, str):
        interpretation = policy.interpretation_for(level)

    recommendations = raw.get("recommendations")
    if isinstance(recommendations, list) and recommendations:
        recommendations = tuple(str(r) for r in recommendations)
    else:
        recommendations = (recommender or RecommendationGenerator()).recommend(level)

    selected_ids = _selected_ids(raw)
    count = _as_int(_first(raw, EVENTS_COUNT_KEYS))
    if count is None or count < 0:
        count = len(selected_ids) if selected_ids is not None else 0

    return HistoryRecord(
        id=record_id,
        created_at=created_at,
        score=score,
        stress_level=level,
        interpretation=interpretation,
        recommendations=recommendations,
        selected_events_count=count,
        selected_event_ids=tuple(selected_ids or ()),
    )


def normalize_history(
    payload: Any,
    policy: ClassificationPolicy,
    recommender: RecommendationGenerator | None = None,
) -> list[HistoryRecord] | None:
    """Map a history payload to records, keeping the payload order.

    Args:
        payload: {"diagnostics": [...]} or a bare list
        policy: Classification authority

    Returns:
        List of records, or None if the payload carries no list
    """
    raw_records = unwrap_collection(payload, "diagnostics")
    if raw_records is None:
        logger.warning(f"Unexpected history payload (type={type(payload).__name__})")
        return None

    recommender = recommender or RecommendationGenerator()
    records = [
        r for r in (normalize_history_record(raw, policy, recommender) for raw in raw_records)
        if r is not None
    ]
    return records


def normalize_submit_response(
    raw: Any,
    policy: ClassificationPolicy,
    selected_events_count: int,
    recommender: RecommendationGenerator | None = None,
) -> DiagnosticResult | None:
    """Map a submit response to a DiagnosticResult.

    Args:
        raw: {"score", "stressLevel" | "result_category", "interpretation" | "recommendation"}
        policy: Classification authority
        selected_events_count: Number of events submitted

    Returns:
        DiagnosticResult, or None if the response has no usable score
    """
    if not isinstance(raw, dict):
        return None
    score = _as_int(_first(raw, SCORE_KEYS))
    if score is None or score < 0:
        return None

    level = policy.parse_level(_first(raw, LEVEL_KEYS)) or policy.level_for(score)
    interpretation = _first(raw, INTERPRETATION_KEYS)
    if not isinstance(interpretation, str):
        interpretation = policy.interpretation_for(level)

    recommendations = raw.get("recommendations")
    if isinstance(recommendations, list) and recommendations:
        recommendations = tuple(str(r) for r in recommendations)
    else:
        recommendations = (recommender or RecommendationGenerator()).recommend(level)

    count = _as_int(_first(raw, EVENTS_COUNT_KEYS))
    return DiagnosticResult(
        score=score,
        stress_level=level,
        interpretation=interpretation,
        recommendations=recommendations,
        selected_events_count=count if count is not None and count >= 0 else selected_events_count,
    )
