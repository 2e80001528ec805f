from __future__ import annotations

from datetime import datetime

from sqlalchemy import Index, String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from barter_realtime.domain.value_objects.enums import ConversationStatus
from barter_realtime.infrastructure.db.base import Base

class ConversationModel(Base):
    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ConversationStatus.ACTIVE.value)
    publication_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_message_id: Mapped[str | None] = mapped_column(String(26), nullable=True)
    last_message_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    __table_args__ = (
        Index("ix_conversations_status_last_message", "status", last_message_at.desc()),
    )
