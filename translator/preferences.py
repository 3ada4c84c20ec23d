from __future__ import annotations

import logging
from typing import Literal

from .storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark"]

THEME_KEY = "theme"
_THEMES = ("light", "dark")


class ThemePreference:
    """Display theme persisted in the same key-value slots as local history."""

    def __init__(self, kv: KeyValueStore, default: Theme = "light") -> None:
        self.kv = kv
        self.default = default

    def get(self) -> Theme:
        saved = self.kv.get(THEME_KEY)
        return saved if saved in _THEMES else self.default  # type: ignore[return-value]

    def set(self, theme: Theme) -> None:
        if theme not in _THEMES:
            raise ValueError(f"Unknown theme {theme!r}")
        self.kv.set(THEME_KEY, theme)

    def toggle(self) -> Theme:
        theme: Theme = "dark" if self.get() == "light" else "light"
        self.set(theme)
        logger.debug("Theme toggled to %s", theme)
        return theme
