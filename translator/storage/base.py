from __future__ import annotations

import abc
from typing import List

from ..errors import HistoryEntryNotFound
from ..models import HistoryDraft, HistoryEntry

DEFAULT_MAX_ENTRIES = 50


class HistoryStore(abc.ABC):
    """Bounded, newest-first translation history.

    Implementations assign ``id`` and ``created_at`` on append, keep at most
    ``max_entries`` entries (oldest by insertion evicted first) and wrap
    backend errors in `PersistenceFailure`.
    """

    name: str
    max_entries: int = DEFAULT_MAX_ENTRIES

    @abc.abstractmethod
    async def append(self, draft: HistoryDraft) -> HistoryEntry:  # pragma: no cover - interface
        ...

    @abc.abstractmethod
    async def list(self) -> List[HistoryEntry]:  # pragma: no cover - interface
        """Return entries newest first."""

    @abc.abstractmethod
    async def set_favorite(self, entry_id: str, value: bool) -> None:  # pragma: no cover - interface
        """Raise `HistoryEntryNotFound` when ``entry_id`` is not visible to this store."""

    @abc.abstractmethod
    async def clear_all(self) -> None:  # pragma: no cover - interface
        ...

    async def get(self, entry_id: str) -> HistoryEntry:
        for entry in await self.list():
            if entry.id == entry_id:
                return entry
        raise HistoryEntryNotFound(entry_id)

    async def toggle_favorite(self, entry_id: str) -> bool:
        """Flip the favourite flag and return the new value."""
        entry = await self.get(entry_id)
        value = not entry.is_favorite
        await self.set_favorite(entry_id, value)
        return value

    async def close(self) -> None:
        return None
