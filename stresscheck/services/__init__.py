# Server-side stores

from .catalog_store import (
    CatalogStore,
    get_catalog_store,
    reset_catalog_store,
)
from .history_store import (
    HistoryStore,
    get_history_store,
    reset_history_store,
)

__all__ = [
    # Catalog
    "CatalogStore",
    "get_catalog_store",
    "reset_catalog_store",
    # History
    "HistoryStore",
    "get_history_store",
    "reset_history_store",
]
