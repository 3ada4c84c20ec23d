from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from ..audio import AudioOutput, Pcm16Decoder
from ..errors import NoAudioProduced
from ..providers.base import SpeechCapability
from .notices import NoticeBoard

logger = logging.getLogger(__name__)

OutputFactory = Callable[[int, int], AudioOutput]
PlaybackListener = Callable[["PlaybackSession"], None]


class PlaybackStatus(str, Enum):
    IDLE = "idle"
    SYNTHESIZING = "synthesizing"
    PLAYING = "playing"
    ERROR = "error"

    def is_idle(self) -> bool:
        return self == PlaybackStatus.IDLE


@dataclass(frozen=True)
class PlaybackSession:
    text: str = ""
    status: PlaybackStatus = PlaybackStatus.IDLE
    error: Optional[str] = None


IDLE_SESSION = PlaybackSession()


class SpeechPlaybackController:
    """
    Exclusive speak-one-utterance-at-a-time controller.

    idle -> synthesizing -> playing -> idle on success; any failure passes
    through `error` straight back to `idle`. A `speak()` while not idle is
    rejected, never queued.

    The audio output is built by ``output_factory`` on the first `speak()` and
    reused until `close()`.
    """

    def __init__(
        self,
        speech: SpeechCapability,
        output_factory: OutputFactory,
        *,
        notices: Optional[NoticeBoard] = None,
        decoder: Optional[Pcm16Decoder] = None,
        sample_rate_hz: int = 24_000,
        channels: int = 1,
        speaking_notice: str = "Speaking...",
        error_notice: str = "Error generating speech.",
    ) -> None:
        self.speech = speech
        self.notices = notices or NoticeBoard()
        self.decoder = decoder or Pcm16Decoder()
        self.sample_rate_hz = sample_rate_hz
        self.channels = channels
        self.speaking_notice = speaking_notice
        self.error_notice = error_notice

        self.session: PlaybackSession = IDLE_SESSION
        self._output_factory = output_factory
        self._output: Optional[AudioOutput] = None
        self._listeners: List[PlaybackListener] = []

    def add_listener(self, listener: PlaybackListener) -> None:
        self._listeners.append(listener)

    @property
    def status(self) -> PlaybackStatus:
        return self.session.status

    async def speak(self, text: str) -> bool:
        """Synthesize and play ``text``. Returns False when rejected or failed."""
        if not text or not text.strip():
            return False
        if not self.session.status.is_idle():
            logger.debug("Speak rejected, controller is %s", self.session.status.value)
            return False

        # Claimed before the first await so a concurrent speak() sees a non-idle state.
        self._transition(PlaybackSession(text=text, status=PlaybackStatus.SYNTHESIZING))
        self.notices.post(self.speaking_notice, ttl_ms=0)

        try:
            output = self._ensure_output()
            audio = await self.speech.synthesize(text)
            if not audio:
                raise NoAudioProduced("TTS generation failed")
            buffer = self.decoder.decode(audio, self.sample_rate_hz, self.channels)
            if not buffer.frame_count:
                raise NoAudioProduced("TTS audio contained no complete frames")

            self._transition(PlaybackSession(text=text, status=PlaybackStatus.PLAYING))
            await output.play(buffer)
        except asyncio.CancelledError:
            self._transition(IDLE_SESSION)
            self.notices.clear(self.speaking_notice)
            raise
        except Exception as exc:
            logger.error("Speech playback failed: %s", exc, exc_info=not isinstance(exc, NoAudioProduced))
            self._transition(PlaybackSession(text=text, status=PlaybackStatus.ERROR, error=str(exc)))
            self._transition(IDLE_SESSION)
            self.notices.post(self.error_notice)
            return False

        self._transition(IDLE_SESSION)
        self.notices.clear(self.speaking_notice)
        return True

    def close(self) -> None:
        if self._output is not None:
            self._output.close()
            self._output = None

    def _ensure_output(self) -> AudioOutput:
        if self._output is None:
            self._output = self._output_factory(self.sample_rate_hz, self.channels)
        return self._output

    def _transition(self, session: PlaybackSession) -> None:
        logger.debug("Playback %s -> %s", self.session.status.value, session.status.value)
        self.session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Playback listener failed")


__all__ = ["IDLE_SESSION", "PlaybackSession", "PlaybackStatus", "SpeechPlaybackController"]
