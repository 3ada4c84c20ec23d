from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Opaque handle for an authenticated user."""

    user_id: str
    email: Optional[str] = None

    def __str__(self) -> str:
        return self.email or self.user_id
