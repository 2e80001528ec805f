from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Header, Query, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from barter_realtime.api.deps import (
    ConversationAccessDep,
    DirectoryDep,
    ManagerDep,
    MessageStoreDep,
    VerifierDep,
)
from barter_realtime.application.exceptions import AuthenticationError
from barter_realtime.config import settings
from barter_realtime.domain.value_objects.enums import ServerEvent
from barter_realtime.infrastructure.ws.connection import Connection
from barter_realtime.infrastructure.ws.protocol import WsInbound, WsOutbound
from barter_realtime.services import handshake_service, realtime_service
from barter_realtime.services.realtime_service import RealtimeContext

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

WS_AUTH_FAILED = 4001


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    manager: ManagerDep,
    verifier: VerifierDep,
    directory: DirectoryDep,
    store: MessageStoreDep,
    access: ConversationAccessDep,
    token: str | None = Query(None),
    authorization: str | None = Header(None),
) -> None:
    credential = handshake_service.extract_token(token, authorization)
    try:
        principal, user = await handshake_service.authenticate(credential, verifier, directory)
    except AuthenticationError as exc:
        await websocket.close(code=WS_AUTH_FAILED, reason=exc.detail)
        return
    except Exception:
        logger.exception("WS handshake error")
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR, reason="Authentication unavailable")
        return

    await websocket.accept()
    connection = Connection(socket=websocket, principal=principal, user=user)
    ctx = RealtimeContext(manager=manager, store=store, access=access)

    heartbeat_task: asyncio.Task[None] | None = None
    try:
        await realtime_service.connect(ctx, connection)
        logger.info("WS connected: user=%s conn=%s", connection.user_id, connection.id)
        heartbeat_task = asyncio.create_task(
            _heartbeat(websocket), name=f"ws-heartbeat-{connection.id}",
        )
        await _read_loop(websocket, ctx, connection)
    except WebSocketDisconnect as exc:
        logger.info("WS disconnected: user=%s conn=%s code=%s", connection.user_id, connection.id, exc.code)
    except Exception:
        logger.exception("WS error for %s", connection.user_id)
    finally:
        if heartbeat_task is not None:
            heartbeat_task.cancel()
        await realtime_service.disconnect(ctx, connection)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type=ServerEvent.PONG, data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        pass


async def _read_loop(ws: WebSocket, ctx: RealtimeContext, connection: Connection) -> None:
    while True:
        message = await ws.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
        raw = message.get("text")
        if raw is None:
            await ctx.manager.send(connection, ServerEvent.ERROR, {"code": "invalid_payload"})
            continue
        try:
            msg = WsInbound.model_validate_json(raw)
        except ValidationError:
            await ctx.manager.send(connection, ServerEvent.ERROR, {"code": "invalid_payload"})
            continue
        await realtime_service.dispatch(ctx, connection, msg)
