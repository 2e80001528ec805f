"""WebSocket message envelope and payload models.

Frames are JSON objects ``{"type": <event>, "data": {...}}``. Payload field
names are camelCase on the wire and snake_case in Python.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from barter_realtime.domain.value_objects.enums import MessageType, UserStatus


class WsInbound(BaseModel):
    """Client → Server."""

    type: str
    data: dict[str, Any] = {}


class WsOutbound(BaseModel):
    """Server → Client."""

    type: str
    data: dict[str, Any] = {}


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# -- inbound payloads -------------------------------------------------------


class JoinConversationsData(CamelModel):
    conversation_ids: list[str]


class ConversationRefData(CamelModel):
    conversation_id: str = Field(min_length=1)


class SendMessageData(CamelModel):
    conversation_id: str = Field(min_length=1)
    content: str
    type: MessageType = MessageType.TEXT


class MarkMessagesReadData(CamelModel):
    conversation_id: str = Field(min_length=1)
    message_ids: list[str]


class UpdateStatusData(CamelModel):
    status: UserStatus


# -- outbound payloads ------------------------------------------------------


class UserSummaryOut(CamelModel):
    id: str
    name: str
    avatar: str | None = None


class TypingUserOut(CamelModel):
    id: str
    name: str


class UserOnlineData(CamelModel):
    user_id: str
    user: UserSummaryOut


class UserOfflineData(CamelModel):
    user_id: str
    last_seen_at: datetime


class NewMessageData(CamelModel):
    id: str
    content: str
    type: MessageType
    sender: UserSummaryOut
    conversation_id: str
    created_at: datetime
    is_read: bool = False


class UserTypingData(CamelModel):
    user_id: str
    user: TypingUserOut | None = None
    conversation_id: str


class MessagesReadData(CamelModel):
    conversation_id: str
    message_ids: list[str]
    read_by: str


class UserStatusUpdateData(CamelModel):
    user_id: str
    status: UserStatus


class MessageErrorData(CamelModel):
    error: str
    message_id: str | None = None


class ConnectedUserOut(CamelModel):
    user_id: str
    name: str
    avatar: str | None = None
    last_seen_at: datetime
    status: UserStatus | None = None
