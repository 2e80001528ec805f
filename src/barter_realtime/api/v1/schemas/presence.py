from __future__ import annotations

from datetime import datetime

from barter_realtime.domain.value_objects.enums import UserStatus
from barter_realtime.infrastructure.ws.protocol import CamelModel


class UserPresenceResponse(CamelModel):
    user_id: str
    online: bool
    status: UserStatus | None = None
    last_seen_at: datetime | None = None
