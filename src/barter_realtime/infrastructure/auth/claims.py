from __future__ import annotations

from typing import Any

import jwt

from barter_realtime.application.dto.principal import Principal


def principal_from_claims(payload: dict[str, Any], user_claim: str = "id") -> Principal:
    user_id = payload.get(user_claim) or payload.get("sub")
    if not user_id:
        raise jwt.InvalidTokenError(f"Token has no '{user_claim}' or 'sub' claim")
    roles = payload.get("roles") or []
    role = payload.get("role")
    if role and role not in roles:
        roles = [*roles, role]
    return Principal(user_id=str(user_id), roles=list(roles))
