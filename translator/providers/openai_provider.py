"""Translation and speech capabilities backed by the OpenAI API (or Azure OpenAI)."""
from __future__ import annotations

import logging
from typing import Optional, Union

from openai import AsyncAzureOpenAI, AsyncOpenAI, OpenAIError

from ..audio import Base64AudioCodec
from ..config import ProviderConfig
from ..errors import NoAudioProduced, RemoteFailure
from ..models import TranslationRequest
from .base import SpeechCapability, TranslationCapability
from .prompts import SYSTEM_INSTRUCTION, build_translation_prompt

logger = logging.getLogger(__name__)

DEFAULT_TRANSLATION_MODEL = "gpt-4o-mini"
DEFAULT_SPEECH_MODEL = "gpt-4o-mini-tts"
DEFAULT_CHAT_AUDIO_MODEL = "gpt-4o-audio-preview"
DEFAULT_VOICE = "coral"
DEFAULT_AZURE_API_VERSION = "2024-10-01-preview"

# The "pcm" speech format is fixed by the API: 24 kHz, 16-bit signed little-endian, mono.
OPENAI_PCM_SAMPLE_RATE_HZ = 24_000

AsyncClient = Union[AsyncOpenAI, AsyncAzureOpenAI]


def build_client(config: ProviderConfig) -> AsyncClient:
    """Create the async SDK client for a provider block."""
    if config.type == "azure_openai":
        return AsyncAzureOpenAI(
            api_key=config.api_key,
            azure_endpoint=config.endpoint,
            api_version=config.api_version or DEFAULT_AZURE_API_VERSION,
        )
    return AsyncOpenAI(api_key=config.api_key, base_url=config.endpoint)


class _OpenAIBase:
    def __init__(self, config: ProviderConfig, client: Optional[AsyncClient] = None) -> None:
        self.config = config
        self._client = client

    def _get_client(self) -> AsyncClient:
        """Lazy-load the SDK client."""
        if self._client is None:
            self._client = build_client(self.config)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


class OpenAITranslationProvider(_OpenAIBase, TranslationCapability):
    name = "openai"

    def __init__(self, config: ProviderConfig, client: Optional[AsyncClient] = None) -> None:
        super().__init__(config, client)
        self.model = config.model or DEFAULT_TRANSLATION_MODEL
        self.temperature = float(config.settings.get("temperature", 0.2))

    async def translate(self, request: TranslationRequest) -> str:
        logger.debug(
            "Translation request id=%s chars=%s %s->%s",
            request.request_id,
            len(request.source_text),
            request.source_language,
            request.target_language,
        )
        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTION},
                    {"role": "user", "content": build_translation_prompt(request)},
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.error("Translation API request failed id=%s: %s", request.request_id, exc)
            raise RemoteFailure(f"Translation request failed: {exc}") from exc

        if not response.choices:
            raise RemoteFailure("Translation response contained no choices")
        content = response.choices[0].message.content or ""
        logger.debug("Translation response id=%s chars=%s", request.request_id, len(content))
        return content


class OpenAISpeechProvider(_OpenAIBase, SpeechCapability):
    """Text-to-speech through ``audio.speech`` or, with ``settings.mode: chat_audio``,
    through chat completions with audio output (base64 PCM16 in the message)."""

    name = "openai"
    sample_rate_hz = OPENAI_PCM_SAMPLE_RATE_HZ
    channels = 1

    def __init__(self, config: ProviderConfig, client: Optional[AsyncClient] = None) -> None:
        super().__init__(config, client)
        self.mode = config.settings.get("mode", "speech")
        default_model = DEFAULT_CHAT_AUDIO_MODEL if self.mode == "chat_audio" else DEFAULT_SPEECH_MODEL
        self.model = config.model or default_model
        self.voice = config.voice or DEFAULT_VOICE

    async def synthesize(self, text: str) -> bytes:
        try:
            if self.mode == "chat_audio":
                audio = await self._synthesize_chat_audio(text)
            else:
                response = await self._get_client().audio.speech.create(
                    model=self.model,
                    voice=self.voice,
                    input=text,
                    response_format="pcm",
                )
                audio = response.content
        except OpenAIError as exc:
            logger.error("TTS API request failed: %s", exc)
            raise RemoteFailure(f"Speech synthesis failed: {exc}") from exc

        if not audio:
            raise NoAudioProduced("TTS generation failed")
        logger.debug("TTS response chars=%s bytes=%s", len(text), len(audio))
        return audio

    async def _synthesize_chat_audio(self, text: str) -> bytes:
        response = await self._get_client().chat.completions.create(
            model=self.model,
            modalities=["text", "audio"],
            audio={"voice": self.voice, "format": "pcm16"},
            messages=[
                {"role": "system", "content": "Read the user's text aloud exactly as written."},
                {"role": "user", "content": text},
            ],
        )
        message = response.choices[0].message if response.choices else None
        if message is None or message.audio is None or not message.audio.data:
            raise NoAudioProduced("TTS generation failed")
        return Base64AudioCodec.decode(message.audio.data)


__all__ = ["OpenAISpeechProvider", "OpenAITranslationProvider", "build_client"]
