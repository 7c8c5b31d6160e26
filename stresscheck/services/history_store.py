"""Diagnostic history store with JSON persistence.

Server-side HistoryRepository:
- Records persisted in data/history/diagnostics.json
- Ids never reused (next_id persisted with the records)
- Listing is most recent first
- delete() is idempotent: deleting a missing id returns None

Singleton accessor get_history_store()/reset_history_store() like the other
services.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock

from stresscheck.core.analysis.classification import (
    ClassificationPolicy,
    get_classification_policy,
)
from stresscheck.core.catalog.normalization import normalize_history
from stresscheck.models.diagnostic import DiagnosticResult
from stresscheck.models.history import HistoryRecord

logger = logging.getLogger(__name__)

STORE_VERSION = "1.0"


class HistoryStore:
    """Stockage JSON de l'historique des diagnostics.

    Usage:
        store = get_history_store()
        record = store.add(result, selected_event_ids=[1, 4])
        records = store.list_records()
        store.delete(record.id)
    """

    def __init__(
        self,
        filepath: str | Path,
        policy: ClassificationPolicy | None = None,
    ) -> None:
        self._filepath = Path(filepath)
        self._policy = policy or get_classification_policy()
        self._records: list[HistoryRecord] = []
        self._next_id = 1
        self._lock = Lock()
        self.load()

    def load(self) -> None:
        """Charge les diagnostics depuis le fichier JSON."""
        if not self._filepath.exists():
            self._records = []
            self._next_id = 1
            return
        try:
            data = json.loads(self._filepath.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.error(f"Erreur chargement historique (error={exc})")
            self._records = []
            self._next_id = 1
            return

        records = normalize_history(data, self._policy) or []
        self._records = records
        highest = max((r.id for r in records), default=0)
        stored_next = data.get("next_id") if isinstance(data, dict) else None
        self._next_id = max(highest + 1, stored_next if isinstance(stored_next, int) else 1)
        logger.info(f"Historique charge ({len(self._records)} diagnostics)")

    def save(self) -> None:
        """Sauvegarde les diagnostics vers le fichier JSON."""
        data = {
            "diagnostics": [r.to_dict() for r in self._records],
            "next_id": self._next_id,
            "version": STORE_VERSION,
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }
        self._filepath.parent.mkdir(parents=True, exist_ok=True)
        self._filepath.write_text(
            json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    def add(
        self,
        result: DiagnosticResult,
        selected_event_ids: Iterable[int] = (),
    ) -> HistoryRecord:
        """Persist a computed result.

        Args:
            result: Diagnostic result
            selected_event_ids: Ids submitted with the result

        Returns:
            The created HistoryRecord
        """
        with self._lock:
            record = HistoryRecord.from_result(
                record_id=self._next_id,
                created_at=datetime.now(timezone.utc),
                result=result,
                selected_event_ids=tuple(sorted(set(selected_event_ids))),
            )
            self._records.append(record)
            self._next_id += 1
            try:
                self.save()
            except OSError:
                self._records.pop()
                self._next_id -= 1
                raise

        logger.info(
            f"Diagnostic recorded (id={record.id}, score={record.score}, "
            f"level={record.stress_level.value}, history_size={len(self._records)})"
        )
        return record

    def list_records(self) -> list[HistoryRecord]:
        """Return all records, most recent first."""
        return sorted(self._records, key=lambda r: (r.created_at, r.id), reverse=True)

    def get(self, record_id: int) -> HistoryRecord | None:
        """Return a record by id or None."""
        return next((r for r in self._records if r.id == record_id), None)

    def delete(self, record_id: int) -> HistoryRecord | None:
        """Delete a record by id.

        Args:
            record_id: Record id

        Returns:
            The removed record, or None if it was already gone
        """
        with self._lock:
            for i, record in enumerate(self._records):
                if record.id == record_id:
                    removed = self._records.pop(i)
                    try:
                        self.save()
                    except OSError:
                        self._records.insert(i, removed)
                        raise
                    logger.info(f"Diagnostic deleted (id={record_id})")
                    return removed

        logger.debug(f"Diagnostic already deleted (id={record_id})")
        return None

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        """Remove every record (ids are not reused)."""
        with self._lock:
            self._records.clear()
            self.save()
        logger.debug("Diagnostic history cleared")


# Singleton
_instance: HistoryStore | None = None


def get_history_store() -> HistoryStore:
    """Return the singleton HistoryStore.

    The file path comes from STRESSCHECK_HISTORY_PATH in the app config,
    defaulting to data/history/diagnostics.json.
    """
    global _instance
    if _instance is None:
        from flask import current_app

        filepath = current_app.config.get("STRESSCHECK_HISTORY_PATH") or (
            Path(current_app.root_path).parent / "data" / "history" / "diagnostics.json"
        )
        _instance = HistoryStore(filepath)
    return _instance


def reset_history_store() -> None:
    """Reset le singleton (utile pour les tests)."""
    global _instance
    _instance = None
