from __future__ import annotations

import abc

from ..models import TranslationRequest


class TranslationCapability(abc.ABC):
    """Remote translation model. Returns the raw response text, unvalidated."""

    name: str

    @abc.abstractmethod
    async def translate(self, request: TranslationRequest) -> str:  # pragma: no cover - interface
        ...

    async def close(self) -> None:
        return None


class SpeechCapability(abc.ABC):
    """Remote text-to-speech returning raw PCM16 bytes in the declared format."""

    name: str
    sample_rate_hz: int = 24_000
    channels: int = 1

    @abc.abstractmethod
    async def synthesize(self, text: str) -> bytes:  # pragma: no cover - interface
        ...

    async def close(self) -> None:
        return None
