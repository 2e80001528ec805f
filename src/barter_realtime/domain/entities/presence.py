from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.domain.value_objects.enums import UserStatus


@dataclass(slots=True)
class PresenceEntry:
    user_id: str
    connection_id: str
    user: UserSummary
    last_seen_at: datetime
    status: UserStatus | None = None
