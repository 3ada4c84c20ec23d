from .base import SpeechCapability, TranslationCapability
from .factory import create_speech_provider, create_translation_provider
from .mock import MockSpeechProvider, MockTranslationProvider

__all__ = [
    "MockSpeechProvider",
    "MockTranslationProvider",
    "SpeechCapability",
    "TranslationCapability",
    "create_speech_provider",
    "create_translation_provider",
]
