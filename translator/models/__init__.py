"""Value objects shared across the translator core."""

from .history import HistoryDraft, HistoryEntry
from .identity import Identity
from .translation import (
    AUTO_DETECT,
    EMPTY_VIEW,
    EditState,
    TranslationRequest,
    TranslationResult,
    TranslationView,
    TtsConfig,
    UiSuggestions,
)

__all__ = [
    "AUTO_DETECT",
    "EMPTY_VIEW",
    "EditState",
    "HistoryDraft",
    "HistoryEntry",
    "Identity",
    "TranslationRequest",
    "TranslationResult",
    "TranslationView",
    "TtsConfig",
    "UiSuggestions",
]
