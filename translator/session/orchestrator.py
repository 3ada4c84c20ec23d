from __future__ import annotations

import asyncio
import itertools
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from ..contract import ResponseValidator
from ..errors import MalformedResponse, PersistenceFailure, RemoteFailure
from ..models import (
    AUTO_DETECT,
    EMPTY_VIEW,
    EditState,
    HistoryDraft,
    HistoryEntry,
    TranslationRequest,
    TranslationResult,
    TranslationView,
)
from ..providers.base import TranslationCapability
from ..storage.base import HistoryStore
from ..utils.time_utils import MonotonicClock
from .notices import NoticeBoard

logger = logging.getLogger(__name__)

ViewListener = Callable[["TranslationOrchestrator"], None]
CommitListener = Callable[[HistoryEntry, HistoryStore], None]


class RequestPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"
    DISCARDED = "discarded"
    FAILED = "failed"


class TranslationOrchestrator:
    """
    Turns a stream of edits into the minimal set of translation requests.

    Lifecycle per edit session: idle -> pending (debounce armed) -> in_flight ->
    settled | failed | discarded.

    - `submit()` is fire-and-forget and meant to be called on every edit.
    - Blank input cancels the pending timer, invalidates in-flight requests and
      clears the view without issuing anything.
    - When the quiet period elapses exactly one request is issued for the edit
      state current at that moment.
    - A settling request whose id is not the latest issued id is discarded:
      no view change, no history append.
    - In-flight calls are never aborted; staleness is decided when they settle.
    """

    def __init__(
        self,
        translator: TranslationCapability,
        *,
        history: Optional[HistoryStore] = None,
        validator: Optional[ResponseValidator] = None,
        notices: Optional[NoticeBoard] = None,
        debounce_ms: int = 200,
        error_notice: str = "Error translating text.",
    ) -> None:
        self.translator = translator
        self.history = history
        self.validator = validator or ResponseValidator()
        self.notices = notices or NoticeBoard()
        self.debounce_ms = debounce_ms
        self.error_notice = error_notice
        # False while issuing is not allowed (e.g. cloud mode without an identity).
        self.enabled = True

        self.edit_state = EditState()
        self.view: TranslationView = EMPTY_VIEW
        self.phase = RequestPhase.IDLE

        self._ids = itertools.count(1)
        self._latest_issued_id: Optional[int] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._unsettled: Set[int] = set()
        self._tasks: Dict[int, asyncio.Task] = {}
        self._view_listeners: List[ViewListener] = []
        self._commit_listeners: List[CommitListener] = []

    # ---- observers ----

    def add_listener(self, listener: ViewListener) -> None:
        """Called after any change to `view`, `phase` or `loading`."""
        self._view_listeners.append(listener)

    def add_commit_listener(self, listener: CommitListener) -> None:
        """Called with each history entry persisted for a settled request and the store that holds it."""
        self._commit_listeners.append(listener)

    @property
    def latest_issued_id(self) -> Optional[int]:
        return self._latest_issued_id

    @property
    def loading(self) -> bool:
        return self._latest_issued_id is not None and self._latest_issued_id in self._unsettled

    @property
    def pending(self) -> bool:
        return self._timer is not None

    # ---- edits ----

    def submit(self, edit_state: EditState) -> None:
        self.edit_state = edit_state
        self._cancel_timer()

        if edit_state.is_blank or not self.enabled:
            self._invalidate()
            self.view = EMPTY_VIEW
            self.phase = RequestPhase.IDLE
            self._notify()
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_ms / 1000, self._fire)
        self.phase = RequestPhase.PENDING
        self._notify()

    def clear(self) -> None:
        self.submit(self.edit_state.with_text(""))

    def swap(self) -> EditState:
        """Exchange source and target (text, language, country) and submit the result."""
        state = self.edit_state
        target_language = state.source_language
        if target_language == AUTO_DETECT:
            target_language = self.view.detected_language or state.target_language

        swapped = EditState(
            source_text=self.view.translation,
            source_language=state.target_language,
            source_country=state.target_country,
            target_language=target_language,
            target_country=state.source_country or state.target_country,
        )
        self.submit(swapped)
        return swapped

    def reset(self) -> None:
        """Drop all pending/in-flight work and empty the input and view."""
        self.edit_state = self.edit_state.with_text("")
        self._cancel_timer()
        self._invalidate()
        self.view = EMPTY_VIEW
        self.phase = RequestPhase.IDLE
        self._notify()

    async def settle(self) -> None:
        """Wait until no timer is armed and no request is in flight."""
        loop = asyncio.get_running_loop()
        while True:
            if self._timer is not None:
                await asyncio.sleep(max(0.0, self._timer.when() - loop.time()) + 0.001)
                continue
            tasks = list(self._tasks.values())
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    async def shutdown(self) -> None:
        self._cancel_timer()
        self._invalidate()
        await asyncio.gather(*self._tasks.values(), return_exceptions=True)

    # ---- request lifecycle ----

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _invalidate(self) -> None:
        if self._latest_issued_id is not None:
            logger.debug("Invalidated request id=%s", self._latest_issued_id)
        self._latest_issued_id = None

    def _fire(self) -> None:
        self._timer = None
        state = self.edit_state
        if state.is_blank or not self.enabled:
            return

        request = TranslationRequest.from_edit_state(next(self._ids), state)
        self._latest_issued_id = request.request_id
        self._unsettled.add(request.request_id)
        self.phase = RequestPhase.IN_FLIGHT
        logger.info(
            "Issuing translation id=%s chars=%s %s/%s -> %s/%s",
            request.request_id,
            len(request.source_text),
            request.source_language,
            request.source_country or "-",
            request.target_language,
            request.target_country,
        )

        task = asyncio.create_task(self._run(request), name=f"translate-{request.request_id}")
        self._tasks[request.request_id] = task
        task.add_done_callback(lambda _t, rid=request.request_id: self._tasks.pop(rid, None))
        self._notify()

    def _is_latest(self, request_id: int) -> bool:
        return request_id == self._latest_issued_id

    async def _run(self, request: TranslationRequest) -> RequestPhase:
        started = MonotonicClock.now()
        try:
            raw = await self.translator.translate(request)
            result = self.validator.validate(raw)
        except (RemoteFailure, MalformedResponse) as exc:
            return self._fail(request, exc)
        except Exception as exc:
            logger.exception("Unexpected translation failure id=%s", request.request_id)
            return self._fail(request, exc)

        self._unsettled.discard(request.request_id)
        if not self._is_latest(request.request_id):
            return self._discard(request)

        self.view = TranslationView.from_result(request.request_id, result)
        self.phase = RequestPhase.SETTLED
        logger.info(
            "Translation settled id=%s detected=%s elapsed_ms=%s",
            request.request_id,
            result.detected_language,
            MonotonicClock.elapsed_ms_from(started),
        )
        self._notify()

        await self._commit(request, result)
        return RequestPhase.SETTLED

    def _fail(self, request: TranslationRequest, exc: Exception) -> RequestPhase:
        self._unsettled.discard(request.request_id)
        if not self._is_latest(request.request_id):
            return self._discard(request)

        logger.error("Translation failed id=%s: %s", request.request_id, exc)
        self.phase = RequestPhase.FAILED
        self.notices.post(self.error_notice)
        self._notify()
        return RequestPhase.FAILED

    def _discard(self, request: TranslationRequest) -> RequestPhase:
        logger.info("Discarding stale response id=%s latest=%s", request.request_id, self._latest_issued_id)
        # Only the loading flag can have changed.
        self._notify()
        return RequestPhase.DISCARDED

    async def _commit(self, request: TranslationRequest, result: TranslationResult) -> None:
        store = self.history
        if store is None:
            return
        draft = HistoryDraft(
            source_text=request.source_text,
            translation=result.translation,
            source_language=result.history_source_language,
            target_language=result.target_language or request.target_language,
        )
        try:
            entry = await store.append(draft)
        except PersistenceFailure as exc:
            logger.warning("History append failed for id=%s; translation kept: %s", request.request_id, exc)
            return

        for listener in list(self._commit_listeners):
            try:
                listener(entry, store)
            except Exception:
                logger.exception("Commit listener failed")

    def _notify(self) -> None:
        for listener in list(self._view_listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Orchestrator listener failed")


__all__ = ["RequestPhase", "TranslationOrchestrator"]
