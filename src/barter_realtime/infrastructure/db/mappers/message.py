from __future__ import annotations

from barter_realtime.domain.entities.message import ChatMessage
from barter_realtime.infrastructure.db.models.message import MessageModel


def entity_to_model(entity: ChatMessage) -> MessageModel:
    return MessageModel(
        id=entity.id,
        conversation_id=entity.conversation_id,
        sender_id=entity.sender.id,
        type=entity.type.value,
        content=entity.content,
        created_at=entity.created_at,
    )
