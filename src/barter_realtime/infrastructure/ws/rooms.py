"""Connection ↔ room index used to address broadcasts."""
from __future__ import annotations

CONVERSATION_ROOM_PREFIX = "conversation:"
NOTIFICATION_ROOM_PREFIX = "notifications:"


def conversation_room(conversation_id: str) -> str:
    return f"{CONVERSATION_ROOM_PREFIX}{conversation_id}"


def notification_room(user_id: str) -> str:
    return f"{NOTIFICATION_ROOM_PREFIX}{user_id}"


class RoomRegistry:
    def __init__(self) -> None:
        self._members: dict[str, set[str]] = {}
        self._rooms_by_connection: dict[str, set[str]] = {}

    def join(self, connection_id: str, room: str) -> bool:
        """Add membership; return False if it already existed."""
        members = self._members.setdefault(room, set())
        if connection_id in members:
            return False
        members.add(connection_id)
        self._rooms_by_connection.setdefault(connection_id, set()).add(room)
        return True

    def leave(self, connection_id: str, room: str) -> bool:
        members = self._members.get(room)
        if not members or connection_id not in members:
            return False
        members.discard(connection_id)
        if not members:
            del self._members[room]
        rooms = self._rooms_by_connection.get(connection_id)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._rooms_by_connection[connection_id]
        return True

    def remove_connection(self, connection_id: str) -> set[str]:
        """Drop every membership of ``connection_id``; return the rooms it was in."""
        rooms = self._rooms_by_connection.pop(connection_id, set())
        for room in rooms:
            members = self._members.get(room)
            if members is None:
                continue
            members.discard(connection_id)
            if not members:
                del self._members[room]
        return rooms

    def members(self, room: str) -> set[str]:
        return set(self._members.get(room, ()))

    def rooms_of(self, connection_id: str) -> set[str]:
        return set(self._rooms_by_connection.get(connection_id, ()))

    def is_member(self, connection_id: str, room: str) -> bool:
        return connection_id in self._members.get(room, ())
