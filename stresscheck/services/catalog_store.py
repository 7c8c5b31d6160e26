"""Catalog store: serves the event catalog from a JSON file.

The file holds raw records ({"events": [...]} or a bare list) and goes
through the same normalization adapter as remote payloads.

replace() swaps the whole question list: the new file is written next to
the old one and renamed over it, the cache only changes once that worked.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any

from stresscheck.core.catalog.event_catalog import EventCatalog
from stresscheck.core.catalog.normalization import normalize_events, unwrap_collection

logger = logging.getLogger(__name__)

STORE_VERSION = "1.0"


class CatalogStore:
    """Loads and caches the event catalog.

    Usage:
        store = get_catalog_store()
        catalog = store.get_catalog()
    """

    def __init__(self, filepath: str | Path) -> None:
        self._filepath = Path(filepath)
        self._catalog: EventCatalog | None = None
        self._lock = Lock()

    @property
    def filepath(self) -> Path:
        return self._filepath

    def load(self) -> EventCatalog:
        """(Re)load the catalog from disk.

        A missing or unreadable file gives an empty catalog.

        Returns:
            EventCatalog
        """
        if not self._filepath.exists():
            logger.warning(f"Catalog file not found (path={self._filepath})")
            self._catalog = EventCatalog()
            return self._catalog

        try:
            payload = json.loads(self._filepath.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Erreur chargement catalogue (path={self._filepath}, error={exc})")
            self._catalog = EventCatalog()
            return self._catalog

        self._catalog = EventCatalog.from_raw(payload)
        return self._catalog

    def get_catalog(self) -> EventCatalog:
        """Return the cached catalog, loading it on first use."""
        if self._catalog is None:
            return self.load()
        return self._catalog

    def replace(self, payload: Any) -> EventCatalog:
        """Replace the question list.

        Args:
            payload: {"events": [...]} or a bare list of raw events

        Returns:
            The new EventCatalog

        Raises:
            ValueError: No event list, or no usable event in it
            OSError: The file could not be written (previous catalog kept)
        """
        if unwrap_collection(payload, "events") is None:
            raise ValueError("Liste d'evenements requise")
        catalog = EventCatalog(normalize_events(payload))
        if catalog.is_empty:
            raise ValueError("Aucun evenement valide")

        data = {
            **catalog.to_dict(),
            "version": STORE_VERSION,
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }
        with self._lock:
            self._filepath.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._filepath.with_name(self._filepath.name + ".tmp")
            try:
                tmp_path.write_text(
                    json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
                )
                os.replace(tmp_path, self._filepath)
            except OSError:
                tmp_path.unlink(missing_ok=True)
                raise
            self._catalog = catalog

        logger.info(
            f"Catalog replaced (events={len(catalog)}, categories={len(catalog.categories())})"
        )
        return catalog


# Singleton
_instance: CatalogStore | None = None


def get_catalog_store() -> CatalogStore:
    """Return the singleton CatalogStore.

    The file path comes from STRESSCHECK_CATALOG_PATH in the app config,
    defaulting to data/catalog/events.json.
    """
    global _instance
    if _instance is None:
        from flask import current_app

        filepath = current_app.config.get("STRESSCHECK_CATALOG_PATH") or (
            Path(current_app.root_path).parent / "data" / "catalog" / "events.json"
        )
        _instance = CatalogStore(filepath)
    return _instance


def reset_catalog_store() -> None:
    """Reset le singleton (utile pour les tests)."""
    global _instance
    _instance = None
