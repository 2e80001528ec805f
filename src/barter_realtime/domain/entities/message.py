from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.domain.value_objects.enums import MessageType


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """Message as fanned out to a conversation room."""

    id: str
    conversation_id: str
    content: str
    type: MessageType
    sender: UserSummary
    created_at: datetime
    is_read: bool = False
