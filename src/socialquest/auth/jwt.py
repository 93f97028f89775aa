"""
HS256 JWT token management.

Access and refresh tokens are signed with distinct secrets so a leaked access
secret cannot mint refresh tokens. Both carry the user id in an `id` claim.
"""

from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

import jwt

from socialquest.config import get_settings

TokenType = Literal["access", "refresh"]


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _secret_for(token_type: TokenType) -> str:
    settings = get_settings()
    return settings.jwt_secret if token_type == "access" else settings.jwt_refresh_secret


def create_access_token(user_id: int, *, now: datetime | None = None) -> str:
    """
    Create a short-lived access token (15 minutes by default).

    Args:
        user_id: The user's database ID.
        now: Issue time; defaults to the current UTC time.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = now or datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "id": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    return jwt.encode(payload, _secret_for("access"), algorithm=settings.jwt_algorithm)


def create_refresh_token(user_id: int, *, now: datetime | None = None) -> str:
    """
    Create a long-lived refresh token (7 days by default).

    A random `jti` keeps two tokens issued in the same second distinct.
    """
    settings = get_settings()
    now = now or datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "id": user_id,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_refresh_token_expire_days),
        "iss": settings.jwt_issuer,
        "type": "refresh",
    }
    return jwt.encode(payload, _secret_for("refresh"), algorithm=settings.jwt_algorithm)


def issue_tokens(user_id: int) -> TokenPair:
    """Issue a fresh access/refresh token pair bound to `user_id`."""
    return TokenPair(
        access_token=create_access_token(user_id),
        refresh_token=create_refresh_token(user_id),
    )


def verify_token(token: str, expected_type: TokenType = "access") -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Args:
        token: The encoded JWT string.
        expected_type: Expected token type ("access" or "refresh").

    Returns:
        Decoded payload dictionary.

    Raises:
        jwt.ExpiredSignatureError: If the token is past its expiry.
        jwt.InvalidTokenError: If the token is malformed, badly signed or of the wrong type.
    """
    settings = get_settings()
    payload: dict[str, Any] = jwt.decode(
        token,
        _secret_for(expected_type),
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
        options={"require": ["exp", "iat", "id"]},
    )

    if payload.get("type") != expected_type:
        msg = f"Expected token type '{expected_type}', got '{payload.get('type')}'"
        raise jwt.InvalidTokenError(msg)

    return payload


def user_id_from_token(token: str, expected_type: TokenType = "access") -> int:
    """Verify `token` and return the user id it is bound to."""
    payload = verify_token(token, expected_type)
    try:
        return int(payload["id"])
    except (TypeError, ValueError) as e:
        msg = "Token carries a malformed user id"
        raise jwt.InvalidTokenError(msg) from e


def hash_token(token: str) -> str:
    """SHA-256 digest stored in place of the raw refresh token."""
    return hashlib.sha256(token.encode()).hexdigest()
