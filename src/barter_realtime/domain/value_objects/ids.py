from __future__ import annotations

from typing import NewType

from ulid import ULID

ConnectionId = NewType("ConnectionId", str)
MessageId = NewType("MessageId", str)


def new_message_id() -> MessageId:
    """Unique, lexicographically time-sortable message id."""
    return MessageId(str(ULID()))


def new_connection_id() -> ConnectionId:
    return ConnectionId(str(ULID()))
