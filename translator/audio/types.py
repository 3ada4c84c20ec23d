from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np

SampleFormat = Literal["pcm16"]

PCM16_FULL_SCALE = 32768.0


class UnsupportedAudioFormatError(ValueError):
    """Raised when audio is not in a supported format (expected PCM16)."""


@dataclass(frozen=True)
class AudioFormat:
    """Describes raw PCM audio."""

    sample_rate_hz: int
    channels: int
    sample_format: SampleFormat = "pcm16"

    def bytes_per_sample(self) -> int:
        """Return bytes per sample (PCM16 = 2)."""
        if self.sample_format != "pcm16":
            raise UnsupportedAudioFormatError(f"Unsupported audio sample format: {self.sample_format}")
        return 2

    def bytes_per_frame(self) -> int:
        """Return bytes per frame = bytes_per_sample * channels."""
        return self.bytes_per_sample() * self.channels

    def validate(self) -> None:
        if self.channels < 1:
            raise UnsupportedAudioFormatError(f"Unsupported channel count: {self.channels}")
        if self.sample_rate_hz <= 0:
            raise UnsupportedAudioFormatError(f"Unsupported sample rate: {self.sample_rate_hz}")
        self.bytes_per_sample()


@dataclass(frozen=True, eq=False)
class PlayableBuffer:
    """Channel-separated float32 samples in [-1.0, 1.0), tagged with a sample rate."""

    sample_rate_hz: int
    channels: Tuple[np.ndarray, ...]

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def frame_count(self) -> int:
        return int(self.channels[0].shape[0]) if self.channels else 0

    def duration_ms(self) -> int:
        if not self.frame_count:
            return 0
        return int((self.frame_count / self.sample_rate_hz) * 1000)

    def interleaved(self) -> np.ndarray:
        """Return a ``(frames, channels)`` float32 array ready for an output stream."""
        if not self.channels:
            return np.zeros((0, 0), dtype=np.float32)
        return np.stack(self.channels, axis=1).astype(np.float32, copy=False)
