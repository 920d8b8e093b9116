"""
Tests for caller identity (JWT sessions and Bearer tokens).
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from fastapi import HTTPException

from backend import config
from backend.auth import create_jwt, decode_jwt, get_caller, principal_from_token
from engine.reactive.types import ANONYMOUS


class TestJWT:
    """Test JWT creation and validation."""

    def test_round_trip(self):
        token = create_jwt("user-1", roles=["editor", "admin"])
        payload = decode_jwt(token)

        assert payload["sub"] == "user-1"
        assert payload["roles"] == ["admin", "editor"]
        assert "exp" in payload
        assert "iat" in payload

    def test_decode_expired_jwt(self):
        """Expired tokens are rejected with 401."""
        payload = {
            "sub": "user-1",
            "exp": datetime.now(UTC) - timedelta(hours=1),
            "iat": datetime.now(UTC) - timedelta(hours=2),
        }
        token = jwt.encode(payload, config.settings.JWT_SECRET, algorithm=config.settings.JWT_ALGORITHM)

        with pytest.raises(HTTPException) as exc_info:
            decode_jwt(token)

        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.detail.lower()

    def test_decode_invalid_jwt(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_jwt("invalid.token.here")

        assert exc_info.value.status_code == 401

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "user-1"}, "another-secret", algorithm="HS256")
        with pytest.raises(HTTPException):
            decode_jwt(token)


class TestPrincipal:
    def test_principal_from_token(self):
        principal = principal_from_token(create_jwt("user-1", roles=["admin"]))

        assert principal.subject == "user-1"
        assert principal.is_authenticated
        assert principal.is_in_role("admin")
        assert not principal.is_in_role("editor")

    def test_token_without_subject(self):
        token = jwt.encode(
            {"exp": datetime.now(UTC) + timedelta(hours=1)},
            config.settings.JWT_SECRET,
            algorithm=config.settings.JWT_ALGORITHM,
        )
        with pytest.raises(HTTPException) as exc_info:
            principal_from_token(token)
        assert exc_info.value.status_code == 401


class TestGetCaller:
    async def test_anonymous_without_credentials(self):
        assert await get_caller(None, None) is ANONYMOUS

    async def test_bearer_header(self):
        caller = await get_caller(f"Bearer {create_jwt('cli-user')}", None)
        assert caller.subject == "cli-user"

    async def test_session_cookie(self):
        caller = await get_caller(None, create_jwt("web-user"))
        assert caller.subject == "web-user"

    async def test_header_wins_over_cookie(self):
        caller = await get_caller(f"Bearer {create_jwt('header')}", create_jwt("cookie"))
        assert caller.subject == "header"

    async def test_malformed_header(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_caller("Token abc", None)
        assert exc_info.value.status_code == 401
