from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

NoticeListener = Callable[[str], None]


class NoticeBoard:
    """Single transient, user-visible notice line.

    A newer notice replaces the current one. Notices posted with a TTL clear
    themselves unless replaced first; ``ttl_ms=0`` keeps the notice until it is
    cleared explicitly.
    """

    def __init__(self, default_ttl_ms: int = 3_000) -> None:
        self.default_ttl_ms = default_ttl_ms
        self.current: str = ""
        self._expiry: Optional[asyncio.TimerHandle] = None
        self._listeners: List[NoticeListener] = []

    def add_listener(self, listener: NoticeListener) -> None:
        self._listeners.append(listener)

    def post(self, message: str, ttl_ms: Optional[int] = None) -> None:
        self._cancel_expiry()
        self._set(message)

        ttl_ms = self.default_ttl_ms if ttl_ms is None else ttl_ms
        if ttl_ms <= 0:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._expiry = loop.call_later(ttl_ms / 1000, self.clear, message)

    def clear(self, message: Optional[str] = None) -> None:
        """Clear the notice; with ``message`` only if that notice is still showing."""
        if message is not None and self.current != message:
            return
        self._cancel_expiry()
        self._set("")

    def _cancel_expiry(self) -> None:
        if self._expiry is not None:
            self._expiry.cancel()
            self._expiry = None

    def _set(self, message: str) -> None:
        if message == self.current:
            return
        self.current = message
        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception:
                logger.exception("Notice listener failed")
