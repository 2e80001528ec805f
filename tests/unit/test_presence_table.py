from __future__ import annotations

from datetime import timedelta

from barter_realtime.domain.entities.user import UserSummary
from barter_realtime.domain.value_objects.enums import UserStatus
from barter_realtime.infrastructure.ws.presence import PresenceTable
from tests.fakes import T0

ALICE = UserSummary(id="alice", name="Alice")


def test_put_returns_replaced_entry():
    table = PresenceTable()

    assert table.put("alice", "c1", ALICE, T0) is None
    previous = table.put("alice", "c2", ALICE, T0)

    assert previous is not None
    assert previous.connection_id == "c1"
    assert table.get("alice").connection_id == "c2"
    assert len(table) == 1


def test_overwrite_resets_status():
    table = PresenceTable()
    table.put("alice", "c1", ALICE, T0)
    table.set_status("alice", UserStatus.INVISIBLE)

    previous = table.put("alice", "c2", ALICE, T0)

    assert previous.status == UserStatus.INVISIBLE
    assert table.get("alice").status is None


def test_remove_ignores_foreign_connection():
    table = PresenceTable()
    table.put("alice", "c2", ALICE, T0)

    assert table.remove("alice", "c1") is None
    assert "alice" in table

    removed = table.remove("alice", "c2")
    assert removed is not None
    assert "alice" not in table


def test_set_status_for_offline_user():
    assert PresenceTable().set_status("ghost", UserStatus.AWAY) is False


def test_touch_updates_last_seen():
    table = PresenceTable()
    table.put("alice", "c1", ALICE, T0)

    table.touch("alice", T0 + timedelta(minutes=5))
    table.touch("ghost", T0)

    assert table.get("alice").last_seen_at == T0 + timedelta(minutes=5)
    assert table.get("ghost") is None
