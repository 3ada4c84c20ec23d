"""Audio output port and the sounddevice-backed implementation."""
from __future__ import annotations

import abc
import asyncio
import logging
from typing import Optional

from .types import PlayableBuffer, UnsupportedAudioFormatError

try:
    import sounddevice as sd
except Exception:  # pragma: no cover - PortAudio missing on the host
    sd = None

logger = logging.getLogger(__name__)


class AudioOutput(abc.ABC):
    """A long-lived output resource fixed to one sample rate."""

    sample_rate_hz: int

    @abc.abstractmethod
    async def play(self, buffer: PlayableBuffer) -> None:  # pragma: no cover - interface
        """Play ``buffer`` and return once playback has completed."""

    @abc.abstractmethod
    def close(self) -> None:  # pragma: no cover - interface
        ...


class SoundDeviceOutput(AudioOutput):
    """Plays buffers through one reusable ``sounddevice.OutputStream``."""

    def __init__(self, sample_rate_hz: int, channels: int = 1, device: Optional[str] = None) -> None:
        if sd is None:
            raise RuntimeError(
                "sounddevice is required for audio playback. "
                "Install it with: pip install sounddevice (requires PortAudio)"
            )
        self.sample_rate_hz = sample_rate_hz
        self.channels = channels
        self._stream = sd.OutputStream(
            samplerate=sample_rate_hz,
            channels=channels,
            dtype="float32",
            device=device,
        )
        self._stream.start()
        logger.info("Audio output opened rate=%s channels=%s device=%s", sample_rate_hz, channels, device)

    async def play(self, buffer: PlayableBuffer) -> None:
        if buffer.sample_rate_hz != self.sample_rate_hz or buffer.channel_count != self.channels:
            raise UnsupportedAudioFormatError(
                f"Buffer {buffer.sample_rate_hz}Hz/{buffer.channel_count}ch does not match "
                f"output {self.sample_rate_hz}Hz/{self.channels}ch"
            )
        if not buffer.frame_count:
            return
        # write() blocks until the frames are queued; the remaining latency is the device tail.
        await asyncio.to_thread(self._stream.write, buffer.interleaved())
        await asyncio.sleep(self._stream.latency)

    def close(self) -> None:
        self._stream.stop()
        self._stream.close()
        logger.info("Audio output closed")
