"""Durable string slots (the local-mode equivalent of browser local storage)."""
from __future__ import annotations

import abc
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from ..errors import PersistenceFailure

logger = logging.getLogger(__name__)


class KeyValueStore(abc.ABC):
    @abc.abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None when the slot is empty."""

    @abc.abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Empty the slot (no-op when already empty)."""


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def delete(self, key: str) -> None:
        self._slots.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """All slots live in one JSON object on disk; writes replace the file atomically."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not load key-value file %s: %s", self.path, exc)
            raise PersistenceFailure(f"Unreadable state file {self.path}") from exc
        if not isinstance(data, dict):
            raise PersistenceFailure(f"State file {self.path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, slots: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(slots, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.warning("Could not write key-value file %s: %s", self.path, exc)
            raise PersistenceFailure(f"Unwritable state file {self.path}") from exc

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        slots = self._load()
        slots[key] = value
        self._write(slots)

    def delete(self, key: str) -> None:
        slots = self._load()
        if slots.pop(key, None) is not None:
            self._write(slots)
