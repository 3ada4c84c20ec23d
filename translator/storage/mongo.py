"""Per-user history stored in MongoDB through the async motor driver."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from ..errors import HistoryEntryNotFound, PersistenceFailure
from ..models import HistoryDraft, HistoryEntry, Identity
from ..utils.time_utils import MonotonicClock
from .base import DEFAULT_MAX_ENTRIES, HistoryStore

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


class MongoDBClient:
    """Async MongoDB client owning the history collection.

    Example:
        >>> client = MongoDBClient("mongodb://localhost:27017", "translator")
        >>> await client.create_indexes()
        >>> store = MongoHistoryStore(client.history, Identity(user_id="u1"))
        >>> await client.close()
    """

    def __init__(self, connection_string: str, database: str, collection: str = "history") -> None:
        self.connection_string = connection_string
        self.database_name = database

        self.client: AsyncIOMotorClient = AsyncIOMotorClient(
            connection_string,
            server_api=ServerApi("1"),
            tz_aware=True,
        )
        self.db: AsyncIOMotorDatabase = self.client[database]
        self.history: AsyncIOMotorCollection = self.db[collection]

        logger.info("MongoDB client initialized for database: %s", database)

    async def create_indexes(self) -> None:
        """Index ``(user_id, created_at desc)`` for the per-user newest-first listing."""
        await self.history.create_index([("user_id", 1), ("created_at", -1)])
        logger.info("MongoDB history indexes ensured")

    async def close(self) -> None:
        self.client.close()
        logger.info("MongoDB client closed")


def _to_entry(document: Dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        id=str(document["_id"]),
        created_at=document["created_at"],
        source_text=document.get("source_text", ""),
        translation=document.get("translation_text", ""),
        source_language=document.get("source_lang", ""),
        target_language=document.get("target_lang", ""),
        is_favorite=bool(document.get("is_favorite", False)),
    )


class MongoHistoryStore(HistoryStore):
    """History scoped to one identity; other users' documents are never matched."""

    name = "remote"

    def __init__(
        self,
        collection: "AsyncIOMotorCollection",
        identity: Identity,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        self.collection = collection
        self.identity = identity
        self.max_entries = max_entries

    @property
    def _scope(self) -> Dict[str, Any]:
        return {"user_id": self.identity.user_id}

    async def append(self, draft: HistoryDraft) -> HistoryEntry:
        document = {
            "user_id": self.identity.user_id,
            "created_at": MonotonicClock.utc_now(),
            "source_text": draft.source_text,
            "translation_text": draft.translation,
            "source_lang": draft.source_language,
            "target_lang": draft.target_language,
            "is_favorite": draft.is_favorite,
        }
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as exc:
            logger.warning("History append failed user=%s: %s", self.identity.user_id, exc)
            raise PersistenceFailure("Remote history append failed") from exc
        document["_id"] = result.inserted_id
        try:
            await self._evict_overflow()
        except PyMongoError as exc:
            # The entry is stored; overflow is trimmed again on the next append.
            logger.warning("History eviction failed user=%s: %s", self.identity.user_id, exc)
        logger.info("History append id=%s user=%s", document["_id"], self.identity.user_id)
        return _to_entry(document)

    async def _evict_overflow(self) -> None:
        cursor = self.collection.find(self._scope, {"_id": 1}).sort(NEWEST_FIRST).skip(self.max_entries)
        stale = [doc["_id"] for doc in await cursor.to_list(length=None)]
        if stale:
            await self.collection.delete_many({"_id": {"$in": stale}, **self._scope})
            logger.debug("Evicted %s history entries user=%s", len(stale), self.identity.user_id)

    async def list(self) -> List[HistoryEntry]:
        try:
            cursor = self.collection.find(self._scope).sort(NEWEST_FIRST).limit(self.max_entries)
            documents = await cursor.to_list(length=self.max_entries)
        except PyMongoError as exc:
            logger.warning("History fetch failed user=%s: %s", self.identity.user_id, exc)
            raise PersistenceFailure("Remote history fetch failed") from exc
        return [_to_entry(doc) for doc in documents]

    async def set_favorite(self, entry_id: str, value: bool) -> None:
        if not ObjectId.is_valid(entry_id):
            raise HistoryEntryNotFound(entry_id)
        try:
            result = await self.collection.update_one(
                {"_id": ObjectId(entry_id), **self._scope},
                {"$set": {"is_favorite": value}},
            )
        except PyMongoError as exc:
            logger.warning("Favorite update failed id=%s: %s", entry_id, exc)
            raise PersistenceFailure("Remote favorite update failed") from exc
        if result.matched_count == 0:
            raise HistoryEntryNotFound(entry_id)

    async def clear_all(self) -> None:
        try:
            result = await self.collection.delete_many(self._scope)
        except PyMongoError as exc:
            logger.warning("History clear failed user=%s: %s", self.identity.user_id, exc)
            raise PersistenceFailure("Remote history clear failed") from exc
        logger.info("Remote history cleared user=%s deleted=%s", self.identity.user_id, result.deleted_count)


__all__ = ["MongoDBClient", "MongoHistoryStore"]
