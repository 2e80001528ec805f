from __future__ import annotations

from fastapi import APIRouter

from barter_realtime.api.deps import CurrentPrincipal, ManagerDep
from barter_realtime.api.v1.schemas.presence import UserPresenceResponse
from barter_realtime.infrastructure.ws.protocol import ConnectedUserOut

router = APIRouter(prefix="/api/v1/presence", tags=["presence"])


@router.get("/online", response_model=list[ConnectedUserOut])
async def list_online_users(
    _principal: CurrentPrincipal,
    manager: ManagerDep,
) -> list[ConnectedUserOut]:
    return manager.list_connected_users()


@router.get("/{user_id}", response_model=UserPresenceResponse)
async def get_user_presence(
    user_id: str,
    _principal: CurrentPrincipal,
    manager: ManagerDep,
) -> UserPresenceResponse:
    entry = manager.presence.get(user_id)
    if entry is None:
        return UserPresenceResponse(user_id=user_id, online=False)
    return UserPresenceResponse(
        user_id=user_id,
        online=True,
        status=entry.status,
        last_seen_at=entry.last_seen_at,
    )
