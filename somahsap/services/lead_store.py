# somahsap/services/lead_store.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError

from somahsap.core.errors import StorageError
from somahsap.schemas.lead import LeadEntry
from somahsap.services.storage import atomic_write_text, dump_json

logger = logging.getLogger(__name__)


def _lead_id(item) -> str:
    return str(item.get("id", "?")) if isinstance(item, dict) else "?"


class LeadStore:
    """
    Alle leads in één JSON-array (nieuwste eerst).
    Geen index/paginering: lineaire scan, verwacht aantal is klein.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _ensure_exists(self) -> None:
        if not self.path.exists():
            atomic_write_text(self.path, "[]")

    def _read_raw(self) -> list:
        try:
            self._ensure_exists()
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"read failed: {self.path}: {e}") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"leads file is not valid JSON: {e}") from e
        if not isinstance(data, list):
            return []
        return data

    def _write_raw(self, items: list) -> None:
        try:
            atomic_write_text(self.path, dump_json(items))
        except OSError as e:
            raise StorageError(f"write failed: {self.path}: {e}") from e

    def list(self) -> List[LeadEntry]:
        leads = []
        for it in self._read_raw():
            try:
                leads.append(LeadEntry.model_validate(it))
            except ValidationError as e:
                # één kapotte regel mag de admin-lijst niet blokkeren
                logger.warning("skipping invalid lead id=%s: %s", _lead_id(it), e.errors(include_url=False))
        return leads

    def append(self, entry: LeadEntry) -> LeadEntry:
        items = self._read_raw()
        items.insert(0, entry.model_dump(exclude_none=True))
        self._write_raw(items)
        logger.info("lead appended id=%s type=%s total=%s", entry.id, entry.type, len(items))
        return entry

    def remove(self, lead_id: str) -> bool:
        items = self._read_raw()
        remaining = [it for it in items if not (isinstance(it, dict) and it.get("id") == lead_id)]
        self._write_raw(remaining)
        removed = len(remaining) != len(items)
        logger.info("lead removed id=%s found=%s", lead_id, removed)
        return removed
