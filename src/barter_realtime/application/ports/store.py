from __future__ import annotations

from typing import Protocol

from barter_realtime.domain.entities.message import ChatMessage


class ConversationAccess(Protocol):
    async def is_participant(self, conversation_id: str, user_id: str) -> bool: ...


class MessageStore(Protocol):
    async def record_message(self, message: ChatMessage) -> None: ...

    async def mark_read(
        self,
        conversation_id: str,
        message_ids: list[str],
        reader_id: str,
    ) -> int: ...
