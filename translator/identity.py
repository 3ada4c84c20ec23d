"""Identity provider contract plus an in-process implementation."""
from __future__ import annotations

import abc
import logging
from typing import Awaitable, Callable, List, Optional

from .models import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity]], Awaitable[None]]


class IdentityProvider(abc.ABC):
    @abc.abstractmethod
    def current_identity(self) -> Optional[Identity]:  # pragma: no cover - interface
        ...

    @abc.abstractmethod
    def add_listener(self, listener: IdentityListener) -> None:  # pragma: no cover - interface
        """Register a coroutine called with the new identity after every change."""


class StaticIdentityProvider(IdentityProvider):
    """Identity set explicitly by the host (e.g. after its own sign-in screen)."""

    def __init__(self, identity: Optional[Identity] = None) -> None:
        self._identity = identity
        self._listeners: List[IdentityListener] = []

    def current_identity(self) -> Optional[Identity]:
        return self._identity

    def add_listener(self, listener: IdentityListener) -> None:
        self._listeners.append(listener)

    async def sign_in(self, identity: Identity) -> None:
        await self._set(identity)

    async def sign_out(self) -> None:
        await self._set(None)

    async def _set(self, identity: Optional[Identity]) -> None:
        if identity == self._identity:
            return
        logger.info("Identity changed %s -> %s", self._identity, identity)
        self._identity = identity
        for listener in list(self._listeners):
            try:
                await listener(identity)
            except Exception:
                logger.exception("Identity listener failed")
