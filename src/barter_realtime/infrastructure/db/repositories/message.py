from __future__ import annotations

from datetime import datetime

from sqlalchemy import literal, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from barter_realtime.domain.entities.message import ChatMessage
from barter_realtime.infrastructure.db.mappers import message as mapper
from barter_realtime.infrastructure.db.models.conversation import ConversationModel
from barter_realtime.infrastructure.db.models.message import MessageModel
from barter_realtime.infrastructure.db.models.message_read import MessageReadModel


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, message: ChatMessage) -> None:
        self._session.add(mapper.entity_to_model(message))
        await self._session.flush()

    async def touch_conversation(self, conversation_id: str, message_id: str, ts: datetime) -> None:
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            .values(last_message_id=message_id, last_message_at=ts)
        )
        await self._session.execute(stmt)

    async def mark_read(
        self,
        conversation_id: str,
        message_ids: list[str],
        reader_id: str,
    ) -> int:
        """Record read markers for messages of ``conversation_id`` not sent by the reader.

        Ids that do not exist or belong to another conversation are ignored.
        """
        if not message_ids:
            return 0
        source = select(MessageModel.id, literal(reader_id)).where(
            MessageModel.id.in_(message_ids),
            MessageModel.conversation_id == conversation_id,
            MessageModel.sender_id != reader_id,
        )
        stmt = (
            pg_insert(MessageReadModel)
            .from_select(["message_id", "user_id"], source)
            .on_conflict_do_nothing(index_elements=["message_id", "user_id"])
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
