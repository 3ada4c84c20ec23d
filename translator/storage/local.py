from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import List

from ..errors import HistoryEntryNotFound, PersistenceFailure
from ..models import HistoryDraft, HistoryEntry
from ..utils.time_utils import MonotonicClock
from .base import DEFAULT_MAX_ENTRIES, HistoryStore
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_KEY = "translation_history"


class LocalHistoryStore(HistoryStore):
    """History kept as a JSON array (newest first) in a single key-value slot."""

    name = "local"

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = DEFAULT_HISTORY_KEY,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        self.kv = kv
        self.key = key
        self.max_entries = max_entries
        self._lock = asyncio.Lock()

    def _load(self) -> List[HistoryEntry]:
        raw = self.kv.get(self.key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
            return [HistoryEntry.from_dict(item) for item in items]
        except (json.JSONDecodeError, TypeError, KeyError, ValueError) as exc:
            logger.warning("Local history slot %s is corrupt: %s", self.key, exc)
            raise PersistenceFailure(f"Corrupt history slot {self.key}") from exc

    def _save(self, entries: List[HistoryEntry]) -> None:
        self.kv.set(self.key, json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False))

    async def append(self, draft: HistoryDraft) -> HistoryEntry:
        entry = HistoryEntry.from_draft(draft, entry_id=uuid.uuid4().hex, created_at=MonotonicClock.utc_now())
        async with self._lock:
            entries = [entry, *self._load()][: self.max_entries]
            self._save(entries)
        logger.info("History append id=%s size=%s", entry.id, len(entries))
        return entry

    async def list(self) -> List[HistoryEntry]:
        async with self._lock:
            return self._load()[: self.max_entries]

    async def set_favorite(self, entry_id: str, value: bool) -> None:
        async with self._lock:
            entries = self._load()
            for index, entry in enumerate(entries):
                if entry.id == entry_id:
                    entries[index] = entry.with_favorite(value)
                    break
            else:
                raise HistoryEntryNotFound(entry_id)
            self._save(entries)

    async def clear_all(self) -> None:
        async with self._lock:
            self.kv.delete(self.key)
        logger.info("Local history cleared")
