"""Hand-written collaborators shared by the test modules."""
from __future__ import annotations

import asyncio
import copy
import json
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from translator.audio import AudioOutput, PlayableBuffer
from translator.errors import PersistenceFailure, RemoteFailure
from translator.models import HistoryDraft, HistoryEntry, TranslationRequest
from translator.providers.base import SpeechCapability, TranslationCapability
from translator.storage import LocalHistoryStore


def translation_payload(text: str, **overrides: Any) -> str:
    payload = {
        "detected_language": "en",
        "source_country": "",
        "source_language": "auto",
        "target_country": "FR",
        "target_language": "fr",
        "translation": text.upper(),
        "alternatives": [f"alt {text}"],
        "notes": f"notes for {text}",
        "tts": {"enabled": True, "voice_language_code": "fr-FR", "speak_text": text.upper()},
    }
    payload.update(overrides)
    return json.dumps(payload)


class GatedTranslator(TranslationCapability):
    """Each request blocks until the test releases (or fails) it."""

    name = "gated"

    def __init__(self) -> None:
        self.requests: List[TranslationRequest] = []
        self._gates: Dict[int, asyncio.Future] = {}

    async def translate(self, request: TranslationRequest) -> str:
        self.requests.append(request)
        gate = asyncio.get_running_loop().create_future()
        self._gates[request.request_id] = gate
        return await gate

    def release(self, request_id: int, raw: Optional[str] = None) -> None:
        request = next(r for r in self.requests if r.request_id == request_id)
        self._gates[request_id].set_result(raw if raw is not None else translation_payload(request.source_text))

    def fail(self, request_id: int, exc: Exception) -> None:
        self._gates[request_id].set_exception(exc)


class InstantTranslator(TranslationCapability):
    name = "instant"

    def __init__(self, responder: Optional[Callable[[TranslationRequest], str]] = None) -> None:
        self.requests: List[TranslationRequest] = []
        self.responder = responder or (lambda request: translation_payload(request.source_text))

    async def translate(self, request: TranslationRequest) -> str:
        self.requests.append(request)
        await asyncio.sleep(0)
        return self.responder(request)


class FailingTranslator(TranslationCapability):
    name = "failing"

    def __init__(self, exc: Optional[Exception] = None) -> None:
        self.exc = exc or RemoteFailure("network down")
        self.calls = 0

    async def translate(self, request: TranslationRequest) -> str:
        self.calls += 1
        raise self.exc


class StubSpeech(SpeechCapability):
    name = "stub"

    def __init__(self, audio: bytes = b"\x00\x40" * 240, exc: Optional[Exception] = None, delay: float = 0.0) -> None:
        self.audio = audio
        self.exc = exc
        self.delay = delay
        self.calls: List[str] = []

    async def synthesize(self, text: str) -> bytes:
        self.calls.append(text)
        await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.audio


class RecordingOutput(AudioOutput):
    """Records buffers; playback completes when the test releases it (or immediately)."""

    def __init__(self, sample_rate_hz: int, channels: int, hold: bool = False) -> None:
        self.sample_rate_hz = sample_rate_hz
        self.channels = channels
        self.hold = hold
        self.played: List[PlayableBuffer] = []
        self.closed = False
        self.finished = asyncio.Event()

    async def play(self, buffer: PlayableBuffer) -> None:
        self.played.append(buffer)
        if self.hold:
            await self.finished.wait()

    def close(self) -> None:
        self.closed = True


class OutputFactorySpy:
    def __init__(self, hold: bool = False) -> None:
        self.hold = hold
        self.created: List[RecordingOutput] = []

    def __call__(self, sample_rate_hz: int, channels: int) -> RecordingOutput:
        output = RecordingOutput(sample_rate_hz, channels, hold=self.hold)
        self.created.append(output)
        return output


class BrokenHistoryStore(LocalHistoryStore):
    async def append(self, draft: HistoryDraft) -> HistoryEntry:
        raise PersistenceFailure("backend unavailable")

    async def list(self) -> List[HistoryEntry]:
        raise PersistenceFailure("backend unavailable")


# ---- in-memory stand-in for the motor collection API ----


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, expected in query.items():
        if isinstance(expected, dict) and "$in" in expected:
            if document.get(key) not in expected["$in"]:
                return False
        elif document.get(key) != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]) -> None:
        self._documents = documents
        self._skip = 0
        self._limit: Optional[int] = None

    def sort(self, keys):
        for field, direction in reversed(keys):
            self._documents.sort(key=lambda doc: doc[field], reverse=direction < 0)
        return self

    def skip(self, count: int):
        self._skip = count
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        documents = self._documents[self._skip :]
        if self._limit is not None:
            documents = documents[: self._limit]
        if length is not None:
            documents = documents[:length]
        return documents


class FakeCollection:
    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []

    async def insert_one(self, document: Dict[str, Any]):
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    def find(self, query: Dict[str, Any], projection: Optional[Dict[str, int]] = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(doc) for doc in self.documents if _matches(doc, query)])

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]):
        for document in self.documents:
            if _matches(document, query):
                document.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_many(self, query: Dict[str, Any]):
        before = len(self.documents)
        self.documents = [doc for doc in self.documents if not _matches(doc, query)]
        return SimpleNamespace(deleted_count=before - len(self.documents))


class UnreachableCollection(FakeCollection):
    async def insert_one(self, document):
        raise ServerSelectionTimeoutError("no servers")

    def find(self, query, projection=None):
        raise ServerSelectionTimeoutError("no servers")

    async def delete_many(self, query):
        raise ServerSelectionTimeoutError("no servers")


class FakeMongoClient:
    """Duck-types the parts of `MongoDBClient` the app uses."""

    def __init__(self) -> None:
        self.history = FakeCollection()
        self.closed = False
        self.indexed = False

    async def create_indexes(self) -> None:
        self.indexed = True

    async def close(self) -> None:
        self.closed = True


async def wait_for(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


class HeldHistoryStore(LocalHistoryStore):
    """Local store whose appends wait until the test sets `release`."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.appending = asyncio.Event()
        self.release = asyncio.Event()

    async def append(self, draft: HistoryDraft) -> HistoryEntry:
        self.appending.set()
        await self.release.wait()
        return await super().append(draft)


class HeldCollection(FakeCollection):
    def __init__(self) -> None:
        super().__init__()
        self.appending = asyncio.Event()
        self.release = asyncio.Event()

    async def insert_one(self, document: Dict[str, Any]):
        self.appending.set()
        await self.release.wait()
        return await super().insert_one(document)


class EvictionFailingCollection(FakeCollection):
    async def delete_many(self, query):
        raise ServerSelectionTimeoutError("no servers")
