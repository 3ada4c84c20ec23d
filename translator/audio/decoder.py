from __future__ import annotations

import numpy as np

from .types import PCM16_FULL_SCALE, AudioFormat, PlayableBuffer


class Pcm16Decoder:
    """Decode interleaved signed 16-bit little-endian PCM into a `PlayableBuffer`.

    Each sample is divided by 32768, so output lies in [-1.0, 1.0). A partial
    trailing frame (and a dangling odd byte) is dropped. No resampling and no
    channel mixing: ``sample_rate_hz`` and ``channels`` must describe the source.
    """

    def decode(self, raw: bytes, sample_rate_hz: int, channels: int) -> PlayableBuffer:
        fmt = AudioFormat(sample_rate_hz=sample_rate_hz, channels=channels)
        fmt.validate()

        frame_bytes = fmt.bytes_per_frame()
        usable = len(raw) - (len(raw) % frame_bytes)
        samples = np.frombuffer(raw[:usable], dtype="<i2").reshape(-1, channels)
        normalized = samples.astype(np.float32) / PCM16_FULL_SCALE

        return PlayableBuffer(
            sample_rate_hz=sample_rate_hz,
            channels=tuple(np.ascontiguousarray(normalized[:, ch]) for ch in range(channels)),
        )


def decode_pcm16(raw: bytes, sample_rate_hz: int, channels: int) -> PlayableBuffer:
    return Pcm16Decoder().decode(raw, sample_rate_hz, channels)
