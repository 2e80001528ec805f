"""In-process table of online users."""
from __future__ import annotations

from datetime import datetime

from barter_realtime.domain.entities.presence import PresenceEntry
from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.domain.value_objects.enums import UserStatus


class PresenceTable:
    """One entry per online user, pointing at the connection that registered last."""

    def __init__(self) -> None:
        self._entries: dict[str, PresenceEntry] = {}

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, user_id: str) -> PresenceEntry | None:
        return self._entries.get(user_id)

    def entries(self) -> list[PresenceEntry]:
        return list(self._entries.values())

    def put(
        self,
        user_id: str,
        connection_id: str,
        user: UserSummary,
        now: datetime,
    ) -> PresenceEntry | None:
        """Insert or overwrite the entry for ``user_id``; return the replaced entry.

        The new entry starts without a status.
        """
        previous = self._entries.get(user_id)
        self._entries[user_id] = PresenceEntry(
            user_id=user_id,
            connection_id=connection_id,
            user=user,
            last_seen_at=now,
        )
        return previous

    def remove(self, user_id: str, connection_id: str) -> PresenceEntry | None:
        """Drop the entry only if it still belongs to ``connection_id``."""
        entry = self._entries.get(user_id)
        if entry is None or entry.connection_id != connection_id:
            return None
        del self._entries[user_id]
        return entry

    def set_status(self, user_id: str, status: UserStatus) -> bool:
        entry = self._entries.get(user_id)
        if entry is None:
            return False
        entry.status = status
        return True

    def touch(self, user_id: str, now: datetime) -> None:
        entry = self._entries.get(user_id)
        if entry is not None:
            entry.last_seen_at = now
