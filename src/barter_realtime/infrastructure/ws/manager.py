"""In-process WebSocket connection manager."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from barter_realtime.application.ports.clock import Clock, SystemClock
from barter_realtime.domain.entities.presence import PresenceEntry
from barter_realtime.domain.value_objects.enums import ServerEvent
from barter_realtime.infrastructure.ws.connection import Connection
from barter_realtime.infrastructure.ws.presence import PresenceTable
from barter_realtime.infrastructure.ws.protocol import ConnectedUserOut, WsOutbound
from barter_realtime.infrastructure.ws.rooms import (
    RoomRegistry,
    conversation_room,
    notification_room,
)

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks live connections, user presence and room memberships.

    All bookkeeping is synchronous; only socket writes await. Writes that fail
    are dropped for that recipient, the reader loop of the dead socket is
    responsible for its cleanup.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._connections: dict[str, Connection] = {}
        self.presence = PresenceTable()
        self.rooms = RoomRegistry()

    @property
    def clock(self) -> Clock:
        return self._clock

    # -- registration -------------------------------------------------------

    def register(self, connection: Connection) -> PresenceEntry | None:
        """Track ``connection`` and make it the user's presence entry.

        Returns the entry it replaced when the same user was already online.
        """
        self._connections[connection.id] = connection
        previous = self.presence.put(
            connection.user_id, connection.id, connection.user, self._clock.now(),
        )
        logger.debug(
            "WS registered: user=%s conn=%s (connections=%d, online=%d)",
            connection.user_id, connection.id, len(self._connections), len(self.presence),
        )
        return previous

    def unregister(self, connection: Connection) -> PresenceEntry | None:
        """Remove ``connection`` with all of its memberships.

        Returns the removed presence entry when the user has gone offline.
        When the entry belongs to another still-open connection of the same
        user nothing is returned. When it belonged to ``connection`` and the
        user has another open connection, presence is handed over to it.
        """
        self._connections.pop(connection.id, None)
        self.rooms.remove_connection(connection.id)
        now = self._clock.now()
        removed = self.presence.remove(connection.user_id, connection.id)
        if removed is None:
            return None
        removed.last_seen_at = now

        survivor = self._latest_connection_of(connection.user_id)
        if survivor is not None:
            self.presence.put(survivor.user_id, survivor.id, survivor.user, now)
            if removed.status is not None:
                self.presence.set_status(survivor.user_id, removed.status)
            logger.debug("WS presence for %s moved to conn=%s", connection.user_id, survivor.id)
            return None
        logger.debug("WS unregistered: user=%s conn=%s", connection.user_id, connection.id)
        return removed

    def _latest_connection_of(self, user_id: str) -> Connection | None:
        candidates = [c for c in self._connections.values() if c.user_id == user_id]
        if not candidates:
            return None
        return max(candidates, key=lambda c: c.connected_at)

    def get(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def connections(self) -> list[Connection]:
        return list(self._connections.values())

    # -- rooms --------------------------------------------------------------

    def join(self, connection: Connection, room: str) -> bool:
        if connection.id not in self._connections:
            return False
        return self.rooms.join(connection.id, room)

    def leave(self, connection: Connection, room: str) -> bool:
        return self.rooms.leave(connection.id, room)

    # -- sending ------------------------------------------------------------

    async def send(
        self,
        connection: Connection,
        event_type: str,
        data: dict[str, Any],
    ) -> bool:
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        return await self._deliver([connection], raw) == 1

    async def send_to_room(
        self,
        room: str,
        event_type: str,
        data: dict[str, Any],
        *,
        exclude: str | None = None,
    ) -> int:
        """Send to every connection in ``room`` except connection id ``exclude``."""
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        targets = [
            conn
            for cid in self.rooms.members(room)
            if cid != exclude and (conn := self._connections.get(cid)) is not None
        ]
        return await self._deliver(targets, raw)

    async def broadcast(
        self,
        event_type: str,
        data: dict[str, Any],
        *,
        exclude: str | None = None,
    ) -> int:
        """Send to every live connection except connection id ``exclude``."""
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        targets = [c for c in self._connections.values() if c.id != exclude]
        return await self._deliver(targets, raw)

    async def _deliver(self, targets: Iterable[Connection], raw: str) -> int:
        delivered = 0
        for conn in targets:
            try:
                await conn.socket.send_text(raw)
            except Exception:
                logger.debug("WS send to conn=%s failed, dropping", conn.id, exc_info=True)
                continue
            delivered += 1
        return delivered

    # -- collaborator API ---------------------------------------------------

    async def send_notification_to_user(self, user_id: str, payload: dict[str, Any]) -> int:
        return await self.send_to_room(
            notification_room(user_id), ServerEvent.NEW_NOTIFICATION, payload,
        )

    async def send_message_to_conversation(
        self,
        conversation_id: str,
        message: dict[str, Any],
    ) -> int:
        return await self.send_to_room(
            conversation_room(conversation_id), ServerEvent.NEW_MESSAGE, message,
        )

    def list_connected_users(self) -> list[ConnectedUserOut]:
        return [
            ConnectedUserOut(
                user_id=entry.user_id,
                name=entry.user.name,
                avatar=entry.user.avatar,
                last_seen_at=entry.last_seen_at,
                status=entry.status,
            )
            for entry in self.presence.entries()
        ]

    def is_user_online(self, user_id: str) -> bool:
        return user_id in self.presence
