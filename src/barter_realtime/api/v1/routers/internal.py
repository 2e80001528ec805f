"""Push endpoints used by the REST side of the marketplace (reviews, exchanges, messages)."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body

from barter_realtime.api.deps import CurrentService, ManagerDep
from barter_realtime.api.v1.schemas.internal import DeliveryResponse, PushNotificationRequest
from barter_realtime.domain.entities.notification import NotificationEnvelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/internal", tags=["internal"])


@router.post("/notifications", response_model=DeliveryResponse)
async def push_notification(
    body: PushNotificationRequest,
    principal: CurrentService,
    manager: ManagerDep,
) -> DeliveryResponse:
    envelope = NotificationEnvelope(recipient_id=body.recipient_id, payload=body.payload)
    delivered = await manager.send_notification_to_user(envelope.recipient_id, envelope.payload)
    logger.debug(
        "Notification from %s to %s delivered to %d connections",
        principal.user_id, envelope.recipient_id, delivered,
    )
    return DeliveryResponse(delivered=delivered)


@router.post("/conversations/{conversation_id}/messages", response_model=DeliveryResponse)
async def push_conversation_message(
    conversation_id: str,
    principal: CurrentService,
    manager: ManagerDep,
    message: dict[str, Any] = Body(...),
) -> DeliveryResponse:
    message.setdefault("conversationId", conversation_id)
    delivered = await manager.send_message_to_conversation(conversation_id, message)
    return DeliveryResponse(delivered=delivered)
