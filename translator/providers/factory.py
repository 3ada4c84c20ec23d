from __future__ import annotations

from ..config import ProviderConfig
from .base import SpeechCapability, TranslationCapability
from .mock import MockSpeechProvider, MockTranslationProvider

_OPENAI_TYPES = ("openai", "azure_openai")


def create_translation_provider(config: ProviderConfig) -> TranslationCapability:
    normalized = config.type.lower()
    if normalized == "mock":
        return MockTranslationProvider(latency_ms=int(config.settings.get("latency_ms", 50)))
    if normalized in _OPENAI_TYPES:
        from .openai_provider import OpenAITranslationProvider

        return OpenAITranslationProvider(config)
    raise ValueError(f"Unknown translation provider {config.type}")


def create_speech_provider(config: ProviderConfig) -> SpeechCapability:
    normalized = config.type.lower()
    if normalized == "mock":
        return MockSpeechProvider(latency_ms=int(config.settings.get("latency_ms", 20)))
    if normalized in _OPENAI_TYPES:
        from .openai_provider import OpenAISpeechProvider

        return OpenAISpeechProvider(config)
    raise ValueError(f"Unknown speech provider {config.type}")
