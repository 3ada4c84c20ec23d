"""Composition root wiring providers, identity, history and the session controllers."""
from __future__ import annotations

import logging
from typing import List, Optional

from pymongo.errors import PyMongoError

from .audio import AudioOutput, SoundDeviceOutput
from .config import Config
from .errors import HistoryEntryNotFound, PersistenceFailure
from .identity import IdentityProvider, StaticIdentityProvider
from .models import EditState, HistoryEntry, Identity
from .preferences import ThemePreference
from .providers import (
    SpeechCapability,
    TranslationCapability,
    create_speech_provider,
    create_translation_provider,
)
from .session import NoticeBoard, SpeechPlaybackController, TranslationOrchestrator
from .session.playback import OutputFactory
from .storage import HistoryStore, JsonFileKeyValueStore, KeyValueStore, MongoDBClient, create_history_store

logger = logging.getLogger(__name__)


def sounddevice_output_factory(device: Optional[str] = None) -> OutputFactory:
    def _factory(sample_rate_hz: int, channels: int) -> AudioOutput:
        return SoundDeviceOutput(sample_rate_hz, channels, device=device)

    return _factory


class TranslatorApp:
    """What a UI talks to: submit edits, read the view, speak, manage history.

    The history backend follows the identity: remote (MongoDB) while signed in,
    local key-value slot otherwise. Every identity change resets the
    orchestrator and reloads the history list.
    """

    def __init__(
        self,
        config: Config,
        *,
        translator: TranslationCapability,
        speech: SpeechCapability,
        identity_provider: IdentityProvider,
        kv: KeyValueStore,
        mongo: Optional[MongoDBClient] = None,
        output_factory: Optional[OutputFactory] = None,
    ) -> None:
        self.config = config
        self.translator = translator
        self.speech = speech
        self.identity_provider = identity_provider
        self.kv = kv
        self.mongo = mongo

        self.notices = NoticeBoard(default_ttl_ms=config.notices.default_ttl_ms)
        self.theme = ThemePreference(kv)
        self.history_store: Optional[HistoryStore] = None
        self.history: List[HistoryEntry] = []

        self.orchestrator = TranslationOrchestrator(
            translator,
            notices=self.notices,
            debounce_ms=config.orchestrator.local_debounce_ms,
            error_notice=config.orchestrator.error_notice,
        )
        self.orchestrator.add_commit_listener(self._on_commit)

        self.playback = SpeechPlaybackController(
            speech,
            output_factory or sounddevice_output_factory(config.playback.device),
            notices=self.notices,
            sample_rate_hz=config.playback.sample_rate_hz,
            channels=config.playback.channels,
            speaking_notice=config.playback.speaking_notice,
            error_notice=config.playback.error_notice,
        )

        identity_provider.add_listener(self._apply_identity)

    @classmethod
    def from_config(
        cls,
        config: Config,
        identity_provider: Optional[IdentityProvider] = None,
        output_factory: Optional[OutputFactory] = None,
    ) -> "TranslatorApp":
        return cls(
            config,
            translator=create_translation_provider(config.providers.translation),
            speech=create_speech_provider(config.providers.speech),
            identity_provider=identity_provider or StaticIdentityProvider(),
            kv=JsonFileKeyValueStore(config.history.resolved_local_path()),
            mongo=MongoDBClient(
                config.storage.connection_string,
                config.storage.database,
                collection=config.storage.collection,
            ),
            output_factory=output_factory,
        )

    @property
    def identity(self) -> Optional[Identity]:
        return self.identity_provider.current_identity()

    @property
    def cloud(self) -> bool:
        return self.identity is not None

    async def start(self) -> None:
        if self.mongo is not None and self.identity is not None:
            try:
                await self.mongo.create_indexes()
            except PyMongoError as exc:
                logger.warning("Could not ensure history indexes: %s", exc)
        await self._apply_identity(self.identity)

    async def _apply_identity(self, identity: Optional[Identity]) -> None:
        self.orchestrator.reset()
        self.history_store = create_history_store(
            self.config.history,
            identity,
            kv=self.kv,
            collection=self.mongo.history if self.mongo is not None else None,
        )
        self.orchestrator.history = self.history_store
        self.orchestrator.debounce_ms = self.config.orchestrator.debounce_ms(cloud=identity is not None)
        self.orchestrator.enabled = identity is not None or not self.config.history.require_identity
        logger.info(
            "Session mode=%s debounce_ms=%s history=%s",
            "cloud" if identity is not None else "local",
            self.orchestrator.debounce_ms,
            self.history_store.name,
        )
        await self.refresh_history()

    # ---- translation ----

    def submit(self, edit_state: EditState) -> None:
        self.orchestrator.submit(edit_state)

    def type_text(self, text: str) -> None:
        self.orchestrator.submit(self.orchestrator.edit_state.with_text(text))

    async def speak(self, text: Optional[str] = None) -> bool:
        """Speak ``text``, or the current translation when omitted."""
        if text is None:
            view = self.orchestrator.view
            text = view.result.tts.speak_text if view.result and view.result.tts.speak_text else view.translation
        return await self.playback.speak(text)

    # ---- history ----

    async def refresh_history(self) -> List[HistoryEntry]:
        store = self.history_store
        if store is None:
            return []
        try:
            entries = await store.list()
        except PersistenceFailure as exc:
            logger.warning("Could not load history: %s", exc)
            entries = []
        if store is self.history_store:
            self.history = entries
        return self.history

    def _on_commit(self, entry: HistoryEntry, store: HistoryStore) -> None:
        if store is not self.history_store:
            logger.debug("Dropping commit id=%s from a previous %s store", entry.id, store.name)
            return
        self.history = [entry, *self.history][: self.config.history.max_entries]

    async def toggle_favorite(self, entry_id: str) -> Optional[bool]:
        if self.history_store is None:
            return None
        try:
            value = await self.history_store.toggle_favorite(entry_id)
        except (PersistenceFailure, HistoryEntryNotFound) as exc:
            logger.warning("Error toggling favorite id=%s: %r", entry_id, exc)
            return None
        self.history = [entry.with_favorite(value) if entry.id == entry_id else entry for entry in self.history]
        return value

    async def clear_history(self) -> bool:
        if self.history_store is None:
            return False
        try:
            await self.history_store.clear_all()
        except PersistenceFailure as exc:
            logger.warning("Error clearing history: %s", exc)
            return False
        self.history = []
        self.notices.post("History Cleared", ttl_ms=self.config.notices.short_ttl_ms)
        return True

    async def shutdown(self) -> None:
        await self.orchestrator.shutdown()
        self.playback.close()
        await self.translator.close()
        await self.speech.close()
        if self.mongo is not None:
            await self.mongo.close()
        logger.info("Translator app shut down")
