"""Shared test fixtures."""
from __future__ import annotations

import pytest

from barter_realtime.infrastructure.ws.manager import ConnectionManager
from barter_realtime.services.realtime_service import RealtimeContext
from tests.fakes import FakeMessageStore, FixedClock, make_connection


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def manager(clock) -> ConnectionManager:
    return ConnectionManager(clock=clock)


@pytest.fixture
def store() -> FakeMessageStore:
    return FakeMessageStore()


@pytest.fixture
def ctx(manager, store) -> RealtimeContext:
    return RealtimeContext(manager=manager, store=store)


@pytest.fixture
def alice():
    return make_connection("alice", "Alice", avatar="https://cdn.example/alice.png")


@pytest.fixture
def bob():
    return make_connection("bob", "Bob")


@pytest.fixture
def carol():
    return make_connection("carol", "Carol")
