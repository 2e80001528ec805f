from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from barter_realtime.domain.value_objects.enums import ConversationStatus
from barter_realtime.infrastructure.db.models.conversation import ConversationModel
from barter_realtime.infrastructure.db.models.participant import ParticipantModel

# Blocked and deleted conversations no longer accept live traffic.
JOINABLE_STATUSES = (ConversationStatus.ACTIVE.value, ConversationStatus.ARCHIVED.value)


class ParticipantReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def is_participant(self, conversation_id: str, user_id: str) -> bool:
        stmt = (
            select(ParticipantModel.id)
            .join(ConversationModel, ConversationModel.id == ParticipantModel.conversation_id)
            .where(
                ParticipantModel.conversation_id == conversation_id,
                ParticipantModel.user_id == user_id,
                ParticipantModel.is_active.is_(True),
                ConversationModel.status.in_(JOINABLE_STATUSES),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None
