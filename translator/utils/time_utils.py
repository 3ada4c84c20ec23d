from __future__ import annotations

import time
from datetime import datetime, timezone


class MonotonicClock:
    """Utility class combining wall-clock and monotonic time helpers.

    - Wall-clock time is for timestamps that get persisted.
    - Monotonic time is for measuring elapsed durations.
    """

    # ---- monotonic ----

    @staticmethod
    def now() -> float:
        """Return monotonic time in seconds."""
        return time.monotonic()

    @staticmethod
    def elapsed_ms_from(start: float) -> int:
        """Return elapsed milliseconds from a monotonic start time."""
        return int((time.monotonic() - start) * 1000)

    # ---- wall clock ----

    @staticmethod
    def utc_now() -> datetime:
        """Return the current timezone-aware UTC instant."""
        return datetime.now(timezone.utc)


__all__ = ["MonotonicClock"]
