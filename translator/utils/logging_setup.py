"""Logging helpers for the translator application."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Send every record at ``level`` and above to the current stdout."""
    logging_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    # Replaces handlers from an earlier call, which may point at a stale stdout.
    logging.basicConfig(level=logging_level, handlers=[handler], force=True)


__all__ = ["configure_logging"]
