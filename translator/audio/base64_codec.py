from __future__ import annotations

import base64
import binascii

from ..errors import AudioDecodingError


class Base64AudioCodec:
    """Base64 encode/decode helpers for audio payloads."""

    @staticmethod
    def encode(data: bytes) -> str:
        """Encode raw bytes to base64 string (standard alphabet, padded)."""
        return base64.b64encode(data).decode("ascii")

    @staticmethod
    def decode(b64: str) -> bytes:
        """Decode base64 string into raw bytes. Raises AudioDecodingError on invalid input."""
        try:
            return base64.b64decode(b64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AudioDecodingError(f"Invalid base64 audio payload: {exc}") from exc
