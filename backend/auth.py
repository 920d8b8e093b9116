"""
Caller identity for update requests.

JWT issuance and verification, and the FastAPI dependency that turns a
request's session cookie or Bearer token into an engine Principal. Requests
without credentials are anonymous; each action decides whether that is enough.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Annotated

import jwt
from fastapi import Cookie, Header, HTTPException, status

from backend import config
from engine.reactive.types import ANONYMOUS, Principal


def create_jwt(subject: str, roles: Iterable[str] = ()) -> str:
    """
    Create a JWT for a caller.

    Args:
        subject: Caller id to encode in the token
        roles: Role names the caller holds

    Returns:
        Signed JWT string
    """
    now = datetime.now(UTC)
    payload = {
        "sub": subject,
        "roles": sorted(roles),
        "exp": now + timedelta(hours=config.settings.JWT_EXPIRY_HOURS),
        "iat": now,
    }
    return jwt.encode(payload, config.settings.JWT_SECRET, algorithm=config.settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and verify a JWT.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        return jwt.decode(token, config.settings.JWT_SECRET, algorithms=[config.settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please sign in again.",
        ) from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        ) from e


def principal_from_token(token: str) -> Principal:
    payload = decode_jwt(token)
    subject = payload.get("sub")
    roles = payload.get("roles") or []
    if not isinstance(subject, str) or not subject or not isinstance(roles, list):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        )
    return Principal(subject=subject, roles=frozenset(str(r) for r in roles), authenticated=True)


async def get_caller(
    authorization: Annotated[str | None, Header()] = None,
    session: Annotated[str | None, Cookie()] = None,
) -> Principal:
    """
    FastAPI dependency: Bearer token first, then session cookie.

    Returns the anonymous principal when neither is present. A credential
    that is present but invalid is rejected with 401.
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authorization header. Expected: Bearer <token>",
            )
        return principal_from_token(token)

    if session:
        return principal_from_token(session)

    return ANONYMOUS
