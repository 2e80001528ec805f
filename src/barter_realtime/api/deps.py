"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.requests import HTTPConnection
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from barter_realtime.application.dto.principal import Principal
from barter_realtime.application.exceptions import AuthenticationError, ForbiddenError
from barter_realtime.application.ports.auth import TokenVerifier
from barter_realtime.application.ports.directory import UserDirectory
from barter_realtime.application.ports.store import ConversationAccess, MessageStore
from barter_realtime.config import settings
from barter_realtime.infrastructure.auth.hs256_verifier import HS256Verifier
from barter_realtime.infrastructure.auth.jwks_verifier import JWKSVerifier
from barter_realtime.infrastructure.ws.manager import ConnectionManager

_bearer_scheme = HTTPBearer()


def _get_verifier() -> TokenVerifier:
    if settings.JWT_VERIFY_MODE == "jwks":
        assert settings.JWKS_URL, "JWKS_URL must be set when JWT_VERIFY_MODE=jwks"
        return JWKSVerifier(settings.JWKS_URL, settings.JWT_USER_CLAIM)
    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM, settings.JWT_USER_CLAIM)


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = _get_verifier()
    return _verifier


def get_user_directory() -> UserDirectory:
    from barter_realtime.infrastructure.db.session import AsyncSessionLocal
    from barter_realtime.infrastructure.db.store import SqlAlchemyUserDirectory

    return SqlAlchemyUserDirectory(AsyncSessionLocal)


def get_message_store() -> MessageStore | None:
    if not settings.MESSAGE_PERSISTENCE_ENABLED:
        return None
    from barter_realtime.infrastructure.db.session import AsyncSessionLocal
    from barter_realtime.infrastructure.db.store import SqlAlchemyMessageStore

    return SqlAlchemyMessageStore(AsyncSessionLocal)


def get_conversation_access() -> ConversationAccess | None:
    if not settings.WS_ENFORCE_ROOM_ACCESS:
        return None
    from barter_realtime.infrastructure.db.session import AsyncSessionLocal
    from barter_realtime.infrastructure.db.store import SqlAlchemyConversationAccess

    return SqlAlchemyConversationAccess(AsyncSessionLocal)


def get_manager(conn: HTTPConnection) -> ConnectionManager:
    return conn.app.state.manager


VerifierDep = Annotated[TokenVerifier, Depends(get_verifier)]
DirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]
MessageStoreDep = Annotated[MessageStore | None, Depends(get_message_store)]
ConversationAccessDep = Annotated[ConversationAccess | None, Depends(get_conversation_access)]
ManagerDep = Annotated[ConnectionManager, Depends(get_manager)]


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
    verifier: VerifierDep,
) -> Principal:
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        raise AuthenticationError(str(exc)) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def get_current_service(principal: CurrentPrincipal) -> Principal:
    if not principal.is_service:
        raise ForbiddenError("Service access required")
    return principal


CurrentService = Annotated[Principal, Depends(get_current_service)]
