from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserSummary:
    """Public profile fragment shared with other users."""

    id: str
    name: str
    avatar: str | None = None
