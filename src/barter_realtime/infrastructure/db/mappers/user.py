from __future__ import annotations

from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.infrastructure.db.models.user import UserModel


def model_to_summary(model: UserModel) -> UserSummary:
    return UserSummary(id=model.id, name=model.name, avatar=model.avatar)
