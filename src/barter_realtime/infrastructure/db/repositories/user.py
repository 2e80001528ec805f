from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.infrastructure.db.mappers import user as mapper
from barter_realtime.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_active_summary(self, user_id: str) -> UserSummary | None:
        stmt = select(UserModel).where(
            UserModel.id == user_id,
            UserModel.is_active.is_(True),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_summary(model) if model else None
