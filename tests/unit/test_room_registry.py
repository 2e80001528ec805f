from __future__ import annotations

from barter_realtime.infrastructure.ws.rooms import (
    RoomRegistry,
    conversation_room,
    notification_room,
)


def test_room_names_are_deterministic():
    assert conversation_room("c1") == "conversation:c1"
    assert notification_room("u1") == "notifications:u1"
    assert conversation_room("u1") != notification_room("u1")


def test_join_is_idempotent():
    rooms = RoomRegistry()

    assert rooms.join("conn1", "conversation:c1") is True
    assert rooms.join("conn1", "conversation:c1") is False
    assert rooms.members("conversation:c1") == {"conn1"}


def test_leave_unknown_room_is_not_an_error():
    rooms = RoomRegistry()

    assert rooms.leave("conn1", "conversation:nope") is False

    rooms.join("conn1", "conversation:c1")
    assert rooms.leave("conn1", "conversation:c1") is True
    assert rooms.members("conversation:c1") == set()
    assert rooms.rooms_of("conn1") == set()


def test_remove_connection_drops_all_memberships():
    rooms = RoomRegistry()
    rooms.join("conn1", "conversation:c1")
    rooms.join("conn1", "conversation:c2")
    rooms.join("conn2", "conversation:c1")

    removed = rooms.remove_connection("conn1")

    assert removed == {"conversation:c1", "conversation:c2"}
    assert rooms.rooms_of("conn1") == set()
    assert rooms.members("conversation:c1") == {"conn2"}
    assert rooms.members("conversation:c2") == set()
    assert not rooms.is_member("conn1", "conversation:c1")


def test_members_returns_a_copy():
    rooms = RoomRegistry()
    rooms.join("conn1", "conversation:c1")

    snapshot = rooms.members("conversation:c1")
    rooms.join("conn2", "conversation:c1")

    assert snapshot == {"conn1"}
