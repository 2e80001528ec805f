from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from barter_realtime.infrastructure.auth.claims import principal_from_claims
from barter_realtime.infrastructure.auth.hs256_verifier import HS256Verifier

SECRET = "unit-test-secret-unit-test-secret-0123"


def test_principal_prefers_configured_claim():
    principal = principal_from_claims({"id": "u1", "sub": "other", "roles": ["admin"]})

    assert principal.user_id == "u1"
    assert principal.is_admin
    assert principal.is_service


def test_principal_falls_back_to_sub_and_merges_role():
    principal = principal_from_claims({"sub": 42, "role": "service"})

    assert principal.user_id == "42"
    assert principal.roles == ["service"]
    assert principal.is_service
    assert not principal.is_admin


def test_principal_requires_subject():
    with pytest.raises(jwt.InvalidTokenError):
        principal_from_claims({"roles": []})


@pytest.mark.asyncio
async def test_hs256_verifier_accepts_valid_token():
    token = jwt.encode({"id": "alice", "roles": ["user"]}, SECRET, algorithm="HS256")

    principal = await HS256Verifier(SECRET).verify(token)

    assert principal.user_id == "alice"
    assert principal.roles == ["user"]


@pytest.mark.asyncio
async def test_hs256_verifier_rejects_expired_token():
    expired = datetime.now(timezone.utc) - timedelta(minutes=1)
    token = jwt.encode({"id": "alice", "exp": expired}, SECRET, algorithm="HS256")

    with pytest.raises(jwt.ExpiredSignatureError):
        await HS256Verifier(SECRET).verify(token)


@pytest.mark.asyncio
async def test_hs256_verifier_custom_claim():
    token = jwt.encode({"uid": "bob"}, SECRET, algorithm="HS256")

    principal = await HS256Verifier(SECRET, user_claim="uid").verify(token)

    assert principal.user_id == "bob"
