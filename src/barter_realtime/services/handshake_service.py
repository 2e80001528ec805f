from __future__ import annotations

import logging

from barter_realtime.application.dto.principal import Principal
from barter_realtime.application.exceptions import AuthenticationError
from barter_realtime.application.ports.auth import TokenVerifier
from barter_realtime.application.ports.directory import UserDirectory
from barter_realtime.domain.entities.user import UserSummary

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_token(auth_token: str | None, authorization: str | None) -> str | None:
    """Pick the bearer credential from the handshake auth field or Authorization header."""
    if auth_token and auth_token.strip():
        return auth_token.strip()
    if authorization:
        value = authorization.strip()
        scheme, _, credential = value.partition(" ")
        if scheme.lower() == BEARER_SCHEME:
            value = credential.strip()
        return value or None
    return None


async def authenticate(
    token: str | None,
    verifier: TokenVerifier,
    directory: UserDirectory,
) -> tuple[Principal, UserSummary]:
    """Resolve a handshake credential into a principal and its public summary."""
    if not token:
        raise AuthenticationError("Authentication token required")

    try:
        principal = await verifier.verify(token)
    except Exception as exc:
        logger.debug("WS token rejected: %s", exc)
        raise AuthenticationError("Invalid token") from exc

    user = await directory.get_summary(principal.user_id)
    if user is None:
        logger.info("WS handshake for unknown or inactive user %s", principal.user_id)
        raise AuthenticationError("User not found")

    return principal, user
