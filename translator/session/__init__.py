from .notices import NoticeBoard
from .orchestrator import RequestPhase, TranslationOrchestrator
from .playback import IDLE_SESSION, PlaybackSession, PlaybackStatus, SpeechPlaybackController

__all__ = [
    "IDLE_SESSION",
    "NoticeBoard",
    "PlaybackSession",
    "PlaybackStatus",
    "RequestPhase",
    "SpeechPlaybackController",
    "TranslationOrchestrator",
]
