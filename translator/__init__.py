"""Near-real-time text translation with speech playback and translation history."""

__version__ = "0.1.0"
