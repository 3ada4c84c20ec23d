from __future__ import annotations

import asyncio
import json
import logging

import numpy as np

from ..models import AUTO_DETECT, TranslationRequest
from .base import SpeechCapability, TranslationCapability

logger = logging.getLogger(__name__)


class MockTranslationProvider(TranslationCapability):
    """Offline stand-in that "translates" by tagging the input with the target language."""

    name = "mock"

    def __init__(self, latency_ms: int = 50) -> None:
        self.latency_ms = latency_ms
        self.requests: list[TranslationRequest] = []

    async def translate(self, request: TranslationRequest) -> str:
        self.requests.append(request)
        logger.debug("MockTranslationProvider request id=%s chars=%s", request.request_id, len(request.source_text))
        await asyncio.sleep(self.latency_ms / 1000)

        detected = "en" if request.source_language == AUTO_DETECT else request.source_language
        translation = f"[{request.target_language}] {request.source_text.strip()}"
        return json.dumps(
            {
                "detected_language": detected,
                "source_country": request.source_country,
                "source_language": request.source_language,
                "target_country": request.target_country,
                "target_language": request.target_language,
                "translation": translation,
                "alternatives": [],
                "notes": "mock translation",
                "tts": {
                    "enabled": True,
                    "voice_language_code": f"{request.target_language}-{request.target_country}",
                    "speak_text": translation,
                },
            }
        )


class MockSpeechProvider(SpeechCapability):
    """Synthesizes a short sine tone whose length follows the text length."""

    name = "mock"

    def __init__(self, sample_rate_hz: int = 24_000, latency_ms: int = 20, ms_per_char: int = 40) -> None:
        self.sample_rate_hz = sample_rate_hz
        self.channels = 1
        self.latency_ms = latency_ms
        self.ms_per_char = ms_per_char

    async def synthesize(self, text: str) -> bytes:
        await asyncio.sleep(self.latency_ms / 1000)
        duration_s = max(1, len(text)) * self.ms_per_char / 1000
        t = np.arange(int(self.sample_rate_hz * duration_s)) / self.sample_rate_hz
        tone = 0.2 * np.sin(2 * np.pi * 440.0 * t)
        return (tone * 32767).astype("<i2").tobytes()
