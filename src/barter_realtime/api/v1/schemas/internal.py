from __future__ import annotations

from typing import Any

from pydantic import Field

from barter_realtime.infrastructure.ws.protocol import CamelModel


class PushNotificationRequest(CamelModel):
    recipient_id: str = Field(min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)


class DeliveryResponse(CamelModel):
    delivered: int
