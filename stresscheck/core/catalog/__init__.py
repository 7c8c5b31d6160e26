# Event catalog and payload normalization

from stresscheck.core.catalog.event_catalog import CatalogSource, EventCatalog
from stresscheck.core.catalog.normalization import (
    normalize_event,
    normalize_events,
    normalize_history,
    normalize_history_record,
    normalize_submit_response,
    parse_timestamp,
    unwrap_collection,
)

__all__ = [
    "CatalogSource",
    "EventCatalog",
    "normalize_event",
    "normalize_events",
    "normalize_history",
    "normalize_history_record",
    "normalize_submit_response",
    "parse_timestamp",
    "unwrap_collection",
]
