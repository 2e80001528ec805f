from __future__ import annotations

from typing import Protocol

from barter_realtime.domain.entities.user import UserSummary


class UserDirectory(Protocol):
    async def get_summary(self, user_id: str) -> UserSummary | None:
        """Return the public summary of an active user, ``None`` if unknown or deactivated."""
        ...
