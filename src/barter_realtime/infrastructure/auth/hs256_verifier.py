from __future__ import annotations

import jwt

from barter_realtime.application.dto.principal import Principal
from barter_realtime.infrastructure.auth.claims import principal_from_claims


class HS256Verifier:
    """Verify JWTs signed with a shared HS256 secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", user_claim: str = "id") -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._user_claim = user_claim

    async def verify(self, token: str) -> Principal:
        payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        return principal_from_claims(payload, self._user_claim)
