"""Handlers for inbound real-time events.

Each handler performs the in-memory state change on the connection manager
and fans the resulting event out. Persistence, when configured, happens after
the broadcast and never blocks delivery.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError as PayloadError

from barter_realtime.application.ports.store import ConversationAccess, MessageStore
from barter_realtime.domain.entities.message import ChatMessage
from barter_realtime.domain.value_objects.enums import ClientEvent, ServerEvent, UserStatus
from barter_realtime.domain.value_objects.ids import new_message_id
from barter_realtime.infrastructure.ws.connection import Connection
from barter_realtime.infrastructure.ws.manager import ConnectionManager
from barter_realtime.infrastructure.ws.protocol import (
    ConversationRefData,
    JoinConversationsData,
    MarkMessagesReadData,
    MessageErrorData,
    MessagesReadData,
    NewMessageData,
    SendMessageData,
    TypingUserOut,
    UpdateStatusData,
    UserOfflineData,
    UserOnlineData,
    UserStatusUpdateData,
    UserSummaryOut,
    UserTypingData,
    WsInbound,
)
from barter_realtime.infrastructure.ws.rooms import conversation_room, notification_room

logger = logging.getLogger(__name__)

SEND_FAILED = "Error sending message"
PERSIST_FAILED = "Message was delivered but could not be saved"
NOT_A_MEMBER = "Not a member of this conversation"


@dataclass(slots=True)
class RealtimeContext:
    manager: ConnectionManager
    store: MessageStore | None = None
    access: ConversationAccess | None = None


def _summary_out(connection: Connection) -> UserSummaryOut:
    user = connection.user
    return UserSummaryOut(id=user.id, name=user.name, avatar=user.avatar)


def message_to_wire(message: ChatMessage) -> NewMessageData:
    return NewMessageData(
        id=message.id,
        content=message.content,
        type=message.type,
        sender=UserSummaryOut(
            id=message.sender.id,
            name=message.sender.name,
            avatar=message.sender.avatar,
        ),
        conversation_id=message.conversation_id,
        created_at=message.created_at,
        is_read=message.is_read,
    )


# -- connection lifecycle -----------------------------------------------------


async def connect(ctx: RealtimeContext, connection: Connection) -> None:
    previous = ctx.manager.register(connection)
    if previous is not None:
        logger.info(
            "User %s reconnected, presence moved from conn=%s to conn=%s",
            connection.user_id, previous.connection_id, connection.id,
        )
    data = UserOnlineData(user_id=connection.user_id, user=_summary_out(connection))
    await ctx.manager.broadcast(ServerEvent.USER_ONLINE, data.to_wire(), exclude=connection.id)


async def disconnect(ctx: RealtimeContext, connection: Connection) -> None:
    removed = ctx.manager.unregister(connection)
    if removed is None:
        return
    data = UserOfflineData(user_id=removed.user_id, last_seen_at=removed.last_seen_at)
    await ctx.manager.broadcast(ServerEvent.USER_OFFLINE, data.to_wire(), exclude=connection.id)


# -- rooms --------------------------------------------------------------------


async def join_conversations(
    ctx: RealtimeContext,
    connection: Connection,
    conversation_ids: list[str],
) -> list[str]:
    """Join each conversation room; return the ids the connection is now a member of."""
    joined: list[str] = []
    for conversation_id in dict.fromkeys(conversation_ids):
        if not conversation_id:
            continue
        if ctx.access is not None and not await ctx.access.is_participant(
            conversation_id, connection.user_id,
        ):
            logger.info(
                "User %s refused room for conversation %s", connection.user_id, conversation_id,
            )
            await ctx.manager.send(
                connection,
                ServerEvent.ERROR,
                {"code": "forbidden", "conversationId": conversation_id},
            )
            continue
        ctx.manager.join(connection, conversation_room(conversation_id))
        joined.append(conversation_id)
    logger.debug("User %s joined %d conversations", connection.user_id, len(joined))
    return joined


async def join_conversation(
    ctx: RealtimeContext,
    connection: Connection,
    conversation_id: str,
) -> bool:
    return bool(await join_conversations(ctx, connection, [conversation_id]))


def _may_post(ctx: RealtimeContext, connection: Connection, conversation_id: str) -> bool:
    """With room access enforced, only connections that joined the room may act on it."""
    if ctx.access is None:
        return True
    return ctx.manager.rooms.is_member(connection.id, conversation_room(conversation_id))


def leave_conversation(ctx: RealtimeContext, connection: Connection, conversation_id: str) -> None:
    ctx.manager.leave(connection, conversation_room(conversation_id))


def subscribe_notifications(ctx: RealtimeContext, connection: Connection) -> None:
    ctx.manager.join(connection, notification_room(connection.user_id))


# -- messaging ------------------------------------------------------------------


async def send_message(
    ctx: RealtimeContext,
    connection: Connection,
    data: SendMessageData,
) -> ChatMessage | None:
    if not _may_post(ctx, connection, data.conversation_id):
        logger.info(
            "User %s tried to post to conversation %s without membership",
            connection.user_id, data.conversation_id,
        )
        await ctx.manager.send(
            connection, ServerEvent.MESSAGE_ERROR, MessageErrorData(error=NOT_A_MEMBER).to_wire(),
        )
        return None

    message = ChatMessage(
        id=new_message_id(),
        conversation_id=data.conversation_id,
        content=data.content,
        type=data.type,
        sender=connection.user,
        created_at=ctx.manager.clock.now(),
    )
    try:
        await ctx.manager.send_to_room(
            conversation_room(message.conversation_id),
            ServerEvent.NEW_MESSAGE,
            message_to_wire(message).to_wire(),
        )
    except Exception:
        logger.exception("Failed to broadcast message in conversation %s", message.conversation_id)
        await ctx.manager.send(
            connection, ServerEvent.MESSAGE_ERROR, MessageErrorData(error=SEND_FAILED).to_wire(),
        )
        return None

    if ctx.store is not None:
        try:
            await ctx.store.record_message(message)
        except Exception:
            logger.exception("Failed to persist message %s", message.id)
            await ctx.manager.send(
                connection,
                ServerEvent.MESSAGE_ERROR,
                MessageErrorData(error=PERSIST_FAILED, message_id=message.id).to_wire(),
            )
    return message


async def set_typing(
    ctx: RealtimeContext,
    connection: Connection,
    conversation_id: str,
    *,
    active: bool,
) -> None:
    if not _may_post(ctx, connection, conversation_id):
        return
    if active:
        event = ServerEvent.USER_TYPING
        data = UserTypingData(
            user_id=connection.user_id,
            user=TypingUserOut(id=connection.user.id, name=connection.user.name),
            conversation_id=conversation_id,
        )
    else:
        event = ServerEvent.USER_STOP_TYPING
        data = UserTypingData(user_id=connection.user_id, conversation_id=conversation_id)
    try:
        await ctx.manager.send_to_room(
            conversation_room(conversation_id), event, data.to_wire(), exclude=connection.id,
        )
    except Exception:
        logger.debug("Typing indicator dropped for %s", conversation_id, exc_info=True)


async def mark_messages_read(
    ctx: RealtimeContext,
    connection: Connection,
    data: MarkMessagesReadData,
) -> None:
    if not _may_post(ctx, connection, data.conversation_id):
        await ctx.manager.send(
            connection,
            ServerEvent.ERROR,
            {"code": "forbidden", "conversationId": data.conversation_id},
        )
        return

    receipt = MessagesReadData(
        conversation_id=data.conversation_id,
        message_ids=data.message_ids,
        read_by=connection.user_id,
    )
    try:
        await ctx.manager.send_to_room(
            conversation_room(data.conversation_id),
            ServerEvent.MESSAGES_READ,
            receipt.to_wire(),
            exclude=connection.id,
        )
    except Exception:
        logger.warning("Read receipt broadcast failed for %s", data.conversation_id, exc_info=True)

    if ctx.store is not None and data.message_ids:
        try:
            await ctx.store.mark_read(data.conversation_id, data.message_ids, connection.user_id)
        except Exception:
            logger.exception("mark_read failed for conversation %s", data.conversation_id)


async def update_status(ctx: RealtimeContext, connection: Connection, status: UserStatus) -> bool:
    if not ctx.manager.presence.set_status(connection.user_id, status):
        return False
    data = UserStatusUpdateData(user_id=connection.user_id, status=status)
    await ctx.manager.broadcast(
        ServerEvent.USER_STATUS_UPDATE, data.to_wire(), exclude=connection.id,
    )
    return True


# -- dispatch -------------------------------------------------------------------


async def dispatch(ctx: RealtimeContext, connection: Connection, msg: WsInbound) -> None:
    """Route one inbound frame to its handler.

    Exceptions never propagate: a failing event is logged and, where the
    client expects it, answered with an error event on this connection only.
    """
    ctx.manager.presence.touch(connection.user_id, ctx.manager.clock.now())
    try:
        await _dispatch(ctx, connection, msg)
    except PayloadError as exc:
        logger.debug("Invalid %s payload from %s: %s", msg.type, connection.user_id, exc)
        if msg.type == ClientEvent.SEND_MESSAGE:
            await ctx.manager.send(
                connection, ServerEvent.MESSAGE_ERROR, MessageErrorData(error=SEND_FAILED).to_wire(),
            )
        elif msg.type == ClientEvent.UPDATE_STATUS:
            await ctx.manager.send(connection, ServerEvent.ERROR, {"code": "invalid_status"})
        else:
            await ctx.manager.send(
                connection, ServerEvent.ERROR, {"code": "invalid_data", "type": msg.type},
            )
    except Exception:
        logger.exception("Unhandled error processing %s from %s", msg.type, connection.user_id)


async def _dispatch(ctx: RealtimeContext, connection: Connection, msg: WsInbound) -> None:
    if msg.type == ClientEvent.PING:
        await ctx.manager.send(connection, ServerEvent.PONG, {})

    elif msg.type == ClientEvent.JOIN_CONVERSATIONS:
        data = JoinConversationsData.model_validate(msg.data)
        await join_conversations(ctx, connection, data.conversation_ids)

    elif msg.type == ClientEvent.JOIN_CONVERSATION:
        ref = ConversationRefData.model_validate(msg.data)
        await join_conversation(ctx, connection, ref.conversation_id)

    elif msg.type == ClientEvent.LEAVE_CONVERSATION:
        ref = ConversationRefData.model_validate(msg.data)
        leave_conversation(ctx, connection, ref.conversation_id)

    elif msg.type == ClientEvent.SEND_MESSAGE:
        await send_message(ctx, connection, SendMessageData.model_validate(msg.data))

    elif msg.type in (ClientEvent.TYPING_START, ClientEvent.TYPING_STOP):
        ref = ConversationRefData.model_validate(msg.data)
        await set_typing(
            ctx, connection, ref.conversation_id, active=msg.type == ClientEvent.TYPING_START,
        )

    elif msg.type == ClientEvent.MARK_MESSAGES_READ:
        await mark_messages_read(ctx, connection, MarkMessagesReadData.model_validate(msg.data))

    elif msg.type == ClientEvent.SUBSCRIBE_NOTIFICATIONS:
        subscribe_notifications(ctx, connection)

    elif msg.type == ClientEvent.UPDATE_STATUS:
        data = UpdateStatusData.model_validate(msg.data)
        await update_status(ctx, connection, data.status)

    else:
        await ctx.manager.send(
            connection, ServerEvent.ERROR, {"code": "unknown_type", "type": msg.type},
        )
