from __future__ import annotations

import asyncio

import pytest

from barter_realtime.api.v1.routers import ws as ws_router
from barter_realtime.config import settings
from barter_realtime.infrastructure.auth.hs256_verifier import HS256Verifier
from barter_realtime.services import realtime_service
from tests.fakes import FakeUserDirectory, ScriptedWebSocket, make_token


@pytest.fixture
def verifier() -> HS256Verifier:
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


@pytest.fixture
def directory() -> FakeUserDirectory:
    d = FakeUserDirectory()
    d.add("alice", "Alice")
    return d


async def _run(socket, manager, verifier, directory):
    await ws_router.ws_chat(
        socket,
        manager,
        verifier,
        directory,
        None,
        None,
        token=make_token("alice"),
        authorization=None,
    )


@pytest.mark.asyncio
async def test_cancel_during_connect_still_cleans_up(manager, verifier, directory, monkeypatch):
    async def register_then_cancel(ctx, connection):
        ctx.manager.register(connection)
        raise asyncio.CancelledError

    monkeypatch.setattr(realtime_service, "connect", register_then_cancel)

    with pytest.raises(asyncio.CancelledError):
        await _run(ScriptedWebSocket(), manager, verifier, directory)

    assert not manager.is_user_online("alice")
    assert manager.connections() == []


@pytest.mark.asyncio
async def test_binary_frame_is_rejected_without_closing(manager, verifier, directory):
    socket = ScriptedWebSocket([
        {"type": "websocket.receive", "bytes": b"\x00\x01"},
        {"type": "websocket.receive", "text": '{"type": "ping"}'},
    ])

    await _run(socket, manager, verifier, directory)

    assert socket.accepted
    assert socket.frames == [
        {"type": "error", "data": {"code": "invalid_payload"}},
        {"type": "pong", "data": {}},
    ]
    assert not manager.is_user_online("alice")


@pytest.mark.asyncio
async def test_missing_token_closes_before_accept(manager, verifier, directory):
    socket = ScriptedWebSocket()

    await ws_router.ws_chat(
        socket, manager, verifier, directory, None, None, token=None, authorization=None,
    )

    assert not socket.accepted
    assert socket.close_code == ws_router.WS_AUTH_FAILED
    assert manager.connections() == []
