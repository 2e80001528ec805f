"""In-memory stand-ins for sockets and external collaborators."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from barter_realtime.application.dto.principal import Principal
from barter_realtime.config import settings
from barter_realtime.domain.entities.message import ChatMessage
from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.infrastructure.ws.connection import Connection

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeSocket:
    """Collects outbound frames as decoded ``{"type", "data"}`` dicts."""

    def __init__(self, *, fail: bool = False) -> None:
        self.frames: list[dict[str, Any]] = []
        self.fail = fail

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket is closed")
        self.frames.append(json.loads(data))

    def types(self) -> list[str]:
        return [f["type"] for f in self.frames]

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [f["data"] for f in self.frames if f["type"] == event_type]

    def clear(self) -> None:
        self.frames.clear()


class ScriptedWebSocket(FakeSocket):
    """Plays back ASGI receive messages, then reports a client disconnect."""

    def __init__(self, messages: list[dict[str, Any]] | None = None) -> None:
        super().__init__()
        self._messages = list(messages or [])
        self.accepted = False
        self.close_code: int | None = None

    async def accept(self) -> None:
        self.accepted = True

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.close_code = code

    async def receive(self) -> dict[str, Any]:
        if self._messages:
            return self._messages.pop(0)
        return {"type": "websocket.disconnect", "code": 1000}


class FixedClock:
    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current


@dataclass
class FakeUserDirectory:
    users: dict[str, UserSummary] = field(default_factory=dict)

    def add(self, user_id: str, name: str, avatar: str | None = None) -> UserSummary:
        summary = UserSummary(id=user_id, name=name, avatar=avatar)
        self.users[user_id] = summary
        return summary

    async def get_summary(self, user_id: str) -> UserSummary | None:
        return self.users.get(user_id)


@dataclass
class FakeMessageStore:
    messages: list[ChatMessage] = field(default_factory=list)
    reads: list[tuple[str, list[str], str]] = field(default_factory=list)
    fail: bool = False

    async def record_message(self, message: ChatMessage) -> None:
        if self.fail:
            raise ConnectionError("database unavailable")
        self.messages.append(message)

    async def mark_read(self, conversation_id: str, message_ids: list[str], reader_id: str) -> int:
        if self.fail:
            raise ConnectionError("database unavailable")
        self.reads.append((conversation_id, list(message_ids), reader_id))
        return len(message_ids)


@dataclass
class FakeConversationAccess:
    members: set[tuple[str, str]] = field(default_factory=set)

    async def is_participant(self, conversation_id: str, user_id: str) -> bool:
        return (conversation_id, user_id) in self.members


def make_connection(
    user_id: str,
    name: str | None = None,
    *,
    avatar: str | None = None,
    connected_at: datetime = T0,
    socket: FakeSocket | None = None,
) -> Connection:
    return Connection(
        socket=socket or FakeSocket(),
        principal=Principal(user_id=user_id),
        user=UserSummary(id=user_id, name=name or user_id.capitalize(), avatar=avatar),
        connected_at=connected_at,
    )


def make_token(user_id: str = "alice", roles: list[str] | None = None, claim: str = "id") -> str:
    return jwt.encode(
        {claim: user_id, "roles": roles or []},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
