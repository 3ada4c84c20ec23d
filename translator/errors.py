"""Error taxonomy shared by the translator core."""
from __future__ import annotations


class TranslatorError(Exception):
    """Base class for translator failures."""


class MalformedResponse(TranslatorError):
    """Raised when a translation payload cannot be interpreted as a result."""

    def __init__(self, message: str, raw_text: str | None = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class RemoteFailure(TranslatorError):
    """Raised when a remote capability (translation or speech) fails."""


class NoAudioProduced(TranslatorError):
    """Raised when speech synthesis completes without any audio."""


class PersistenceFailure(TranslatorError):
    """Raised when the history backend cannot be read or written."""


class HistoryEntryNotFound(KeyError):
    """Raised when a history entry id is unknown to the active backend."""


class AudioDecodingError(TranslatorError):
    """Raised when an audio payload cannot be turned into PCM samples."""


__all__ = [
    "AudioDecodingError",
    "HistoryEntryNotFound",
    "MalformedResponse",
    "NoAudioProduced",
    "PersistenceFailure",
    "RemoteFailure",
    "TranslatorError",
]
