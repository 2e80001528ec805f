from __future__ import annotations

import asyncio

import jwt
from jwt import PyJWKClient

from barter_realtime.application.dto.principal import Principal
from barter_realtime.infrastructure.auth.claims import principal_from_claims


class JWKSVerifier:
    """Verify JWTs using a remote JWKS endpoint."""

    def __init__(self, jwks_url: str, user_claim: str = "id") -> None:
        self._jwks_url = jwks_url
        self._jwk_client = PyJWKClient(jwks_url)
        self._user_claim = user_claim

    async def verify(self, token: str) -> Principal:
        # PyJWKClient fetches keys over blocking HTTP.
        signing_key = await asyncio.to_thread(self._jwk_client.get_signing_key_from_jwt, token)
        payload = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256", "ES256"],
        )
        return principal_from_claims(payload, self._user_claim)
