from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

AUTO_DETECT = "auto"


@dataclass(frozen=True)
class EditState:
    """Everything the user can edit that affects a translation."""

    source_text: str = ""
    source_language: str = AUTO_DETECT
    source_country: str = ""
    target_language: str = "en"
    target_country: str = "US"

    @property
    def is_blank(self) -> bool:
        return not self.source_text.strip()

    def with_text(self, text: str) -> "EditState":
        return replace(self, source_text=text)


@dataclass(frozen=True)
class TranslationRequest:
    """Immutable request handed to the translation capability.

    ``request_id`` is strictly increasing per orchestrator instance.
    """

    request_id: int
    source_text: str
    source_language: str
    source_country: str
    target_language: str
    target_country: str

    @classmethod
    def from_edit_state(cls, request_id: int, state: EditState) -> "TranslationRequest":
        return cls(
            request_id=request_id,
            source_text=state.source_text,
            source_language=state.source_language or AUTO_DETECT,
            source_country=state.source_country,
            target_language=state.target_language,
            target_country=state.target_country,
        )


@dataclass(frozen=True)
class TtsConfig:
    enabled: bool = False
    voice_language_code: str = ""
    speak_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "voice_language_code": self.voice_language_code,
            "speak_text": self.speak_text,
        }


@dataclass(frozen=True)
class UiSuggestions:
    primary_actions: List[str] = field(default_factory=list)
    microcopy: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"primary_actions": list(self.primary_actions), "microcopy": list(self.microcopy)}


@dataclass(frozen=True)
class TranslationResult:
    """Validated translation payload."""

    detected_language: str
    source_language: str
    translation: str
    tts: TtsConfig
    source_country: str = ""
    target_country: str = ""
    target_language: str = ""
    alternatives: List[str] = field(default_factory=list)
    notes: str = ""
    ui_suggestions: UiSuggestions = field(default_factory=UiSuggestions)

    @property
    def history_source_language(self) -> str:
        """Language recorded in history: the detected one when known."""
        return self.detected_language or self.source_language

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detected_language": self.detected_language,
            "source_country": self.source_country,
            "source_language": self.source_language,
            "target_country": self.target_country,
            "target_language": self.target_language,
            "translation": self.translation,
            "alternatives": list(self.alternatives),
            "notes": self.notes,
            "ui_suggestions": self.ui_suggestions.to_dict(),
            "tts": self.tts.to_dict(),
        }


@dataclass(frozen=True)
class TranslationView:
    """Snapshot of what the UI should currently display for a translation."""

    translation: str = ""
    detected_language: str = ""
    alternatives: List[str] = field(default_factory=list)
    notes: str = ""
    result: Optional[TranslationResult] = None
    request_id: Optional[int] = None

    @classmethod
    def from_result(cls, request_id: int, result: TranslationResult) -> "TranslationView":
        return cls(
            translation=result.translation,
            detected_language=result.detected_language,
            alternatives=list(result.alternatives),
            notes=result.notes,
            result=result,
            request_id=request_id,
        )

    @property
    def is_empty(self) -> bool:
        return self.result is None and not self.translation


EMPTY_VIEW = TranslationView()
