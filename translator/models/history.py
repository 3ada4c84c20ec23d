from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class HistoryDraft:
    """A translation to be persisted; the store assigns identity and timestamp."""

    source_text: str
    translation: str
    source_language: str
    target_language: str
    is_favorite: bool = False


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    created_at: datetime
    source_text: str
    translation: str
    source_language: str
    target_language: str
    is_favorite: bool = False

    @classmethod
    def from_draft(cls, draft: HistoryDraft, *, entry_id: str, created_at: datetime) -> "HistoryEntry":
        return cls(
            id=entry_id,
            created_at=created_at,
            source_text=draft.source_text,
            translation=draft.translation,
            source_language=draft.source_language,
            target_language=draft.target_language,
            is_favorite=draft.is_favorite,
        )

    def with_favorite(self, value: bool) -> "HistoryEntry":
        return replace(self, is_favorite=value)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible layout used by the local key-value slot."""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "source_text": self.source_text,
            "translation": self.translation,
            "source_language": self.source_language,
            "target_language": self.target_language,
            "is_favorite": self.is_favorite,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            id=str(data["id"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            source_text=data.get("source_text", ""),
            translation=data.get("translation", ""),
            source_language=data.get("source_language", ""),
            target_language=data.get("target_language", ""),
            is_favorite=bool(data.get("is_favorite", False)),
        )
