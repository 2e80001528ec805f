from __future__ import annotations

import jwt
import pytest

from barter_realtime.application.exceptions import AuthenticationError
from barter_realtime.infrastructure.auth.hs256_verifier import HS256Verifier
from barter_realtime.services import handshake_service
from tests.fakes import FakeUserDirectory, make_token


@pytest.fixture
def verifier():
    from barter_realtime.config import settings

    return HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)


@pytest.fixture
def directory():
    d = FakeUserDirectory()
    d.add("alice", "Alice", "https://cdn.example/alice.png")
    return d


@pytest.mark.parametrize(
    ("auth_token", "authorization", "expected"),
    [
        ("tok", None, "tok"),
        ("tok", "Bearer other", "tok"),
        (None, "Bearer abc.def", "abc.def"),
        (None, "bearer abc.def", "abc.def"),
        (None, "abc.def", "abc.def"),
        ("  ", "Bearer x", "x"),
        (None, "Bearer ", None),
        (None, None, None),
    ],
)
def test_extract_token(auth_token, authorization, expected):
    assert handshake_service.extract_token(auth_token, authorization) == expected


@pytest.mark.asyncio
async def test_authenticate_success(verifier, directory):
    principal, user = await handshake_service.authenticate(make_token("alice"), verifier, directory)

    assert principal.user_id == "alice"
    assert user.name == "Alice"
    assert user.avatar == "https://cdn.example/alice.png"


@pytest.mark.asyncio
async def test_authenticate_missing_token(verifier, directory):
    with pytest.raises(AuthenticationError, match="required"):
        await handshake_service.authenticate(None, verifier, directory)


@pytest.mark.asyncio
async def test_authenticate_bad_signature(verifier, directory):
    forged = HS256Verifier("x" * 40)
    token = jwt.encode({"id": "alice"}, "y" * 40, algorithm="HS256")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        await handshake_service.authenticate(token, verifier, directory)
    with pytest.raises(AuthenticationError):
        await handshake_service.authenticate(token, forged, directory)


@pytest.mark.asyncio
async def test_authenticate_unknown_user(verifier, directory):
    with pytest.raises(AuthenticationError, match="User not found"):
        await handshake_service.authenticate(make_token("mallory"), verifier, directory)
