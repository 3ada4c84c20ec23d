from .base64_codec import Base64AudioCodec
from .decoder import Pcm16Decoder, decode_pcm16
from .output import AudioOutput, SoundDeviceOutput
from .types import AudioFormat, PlayableBuffer, UnsupportedAudioFormatError

__all__ = [
    "AudioFormat",
    "AudioOutput",
    "Base64AudioCodec",
    "Pcm16Decoder",
    "PlayableBuffer",
    "SoundDeviceOutput",
    "UnsupportedAudioFormatError",
    "decode_pcm16",
]
