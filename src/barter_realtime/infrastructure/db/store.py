"""Session-per-call adapters exposing the repositories through the application ports."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from barter_realtime.domain.entities.message import ChatMessage
from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.infrastructure.db.repositories.message import MessageWriterRepo
from barter_realtime.infrastructure.db.repositories.participant import ParticipantReaderRepo
from barter_realtime.infrastructure.db.repositories.user import UserReaderRepo


class SqlAlchemyUserDirectory:
    """Implements application.ports.directory.UserDirectory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_summary(self, user_id: str) -> UserSummary | None:
        async with self._session_factory() as session:
            return await UserReaderRepo(session).get_active_summary(user_id)


class SqlAlchemyConversationAccess:
    """Implements application.ports.store.ConversationAccess."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def is_participant(self, conversation_id: str, user_id: str) -> bool:
        async with self._session_factory() as session:
            return await ParticipantReaderRepo(session).is_participant(conversation_id, user_id)


class SqlAlchemyMessageStore:
    """Implements application.ports.store.MessageStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def record_message(self, message: ChatMessage) -> None:
        async with self._session_factory() as session:
            repo = MessageWriterRepo(session)
            await repo.add(message)
            await repo.touch_conversation(message.conversation_id, message.id, message.created_at)
            await session.commit()

    async def mark_read(
        self,
        conversation_id: str,
        message_ids: list[str],
        reader_id: str,
    ) -> int:
        async with self._session_factory() as session:
            count = await MessageWriterRepo(session).mark_read(conversation_id, message_ids, reader_id)
            await session.commit()
            return count
