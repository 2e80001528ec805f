"""Import all models so Alembic can discover them via Base.metadata."""
from barter_realtime.infrastructure.db.models.conversation import ConversationModel
from barter_realtime.infrastructure.db.models.message import MessageModel
from barter_realtime.infrastructure.db.models.message_read import MessageReadModel
from barter_realtime.infrastructure.db.models.participant import ParticipantModel
from barter_realtime.infrastructure.db.models.user import UserModel

__all__ = [
    "ConversationModel",
    "MessageModel",
    "MessageReadModel",
    "ParticipantModel",
    "UserModel",
]
