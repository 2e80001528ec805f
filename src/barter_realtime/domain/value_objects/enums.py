from __future__ import annotations

from enum import StrEnum


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"


class UserStatus(StrEnum):
    ONLINE = "online"
    AWAY = "away"
    BUSY = "busy"
    INVISIBLE = "invisible"


class ConversationStatus(StrEnum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    BLOCKED = "blocked"
    DELETED = "deleted"


class ClientEvent(StrEnum):
    """Client → Server event types."""

    PING = "ping"
    JOIN_CONVERSATIONS = "join_conversations"
    JOIN_CONVERSATION = "join_conversation"
    LEAVE_CONVERSATION = "leave_conversation"
    SEND_MESSAGE = "send_message"
    TYPING_START = "typing_start"
    TYPING_STOP = "typing_stop"
    MARK_MESSAGES_READ = "mark_messages_read"
    SUBSCRIBE_NOTIFICATIONS = "subscribe_notifications"
    UPDATE_STATUS = "update_status"


class ServerEvent(StrEnum):
    """Server → Client event types."""

    PONG = "pong"
    ERROR = "error"
    USER_ONLINE = "user_online"
    USER_OFFLINE = "user_offline"
    NEW_MESSAGE = "new_message"
    USER_TYPING = "user_typing"
    USER_STOP_TYPING = "user_stop_typing"
    MESSAGES_READ = "messages_read"
    USER_STATUS_UPDATE = "user_status_update"
    NEW_NOTIFICATION = "new_notification"
    MESSAGE_ERROR = "message_error"
