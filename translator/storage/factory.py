from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..config import HistoryConfig
from ..models import Identity
from .base import HistoryStore
from .kv import KeyValueStore
from .local import LocalHistoryStore
from .mongo import MongoHistoryStore

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection

logger = logging.getLogger(__name__)


def create_history_store(
    config: HistoryConfig,
    identity: Optional[Identity],
    *,
    kv: KeyValueStore,
    collection: Optional["AsyncIOMotorCollection"] = None,
) -> HistoryStore:
    """Remote backend whenever an identity is present, local backend otherwise."""
    if identity is not None:
        if collection is None:
            raise ValueError("Remote history requires a MongoDB collection")
        logger.info("Using remote history store for %s", identity)
        return MongoHistoryStore(collection, identity, max_entries=config.max_entries)

    logger.info("Using local history store key=%s", config.local_key)
    return LocalHistoryStore(kv, key=config.local_key, max_entries=config.max_entries)
