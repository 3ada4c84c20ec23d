"""Backend-agnostic translation history persistence."""
from __future__ import annotations

from .base import DEFAULT_MAX_ENTRIES, HistoryStore
from .factory import create_history_store
from .kv import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from .local import LocalHistoryStore
from .mongo import MongoDBClient, MongoHistoryStore

__all__ = [
    "DEFAULT_MAX_ENTRIES",
    "HistoryStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "LocalHistoryStore",
    "MongoDBClient",
    "MongoHistoryStore",
    "create_history_store",
]
