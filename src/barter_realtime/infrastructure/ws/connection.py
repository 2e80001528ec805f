from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from barter_realtime.application.dto.principal import Principal
from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.domain.value_objects.ids import new_connection_id


class TextSocket(Protocol):
    async def send_text(self, data: str) -> None: ...


@dataclass(eq=False, slots=True)
class Connection:
    """One authenticated live socket."""

    socket: TextSocket
    principal: Principal
    user: UserSummary
    id: str = field(default_factory=new_connection_id)
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def user_id(self) -> str:
        return self.principal.user_id
