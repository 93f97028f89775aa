"""
Authentication business logic.

Handles registration, login (including the streak transition), refresh-token
exchange and logout. Each user has exactly one active refresh token: issuing a
new pair overwrites the stored digest and silently invalidates the old token.
"""

from __future__ import annotations

import hmac
from datetime import datetime
from typing import TYPE_CHECKING

import jwt
import structlog
from sqlalchemy.exc import IntegrityError

from socialquest.auth.jwt import TokenPair, hash_token, issue_tokens, user_id_from_token
from socialquest.auth.password import (
    PasswordPolicyError,
    check_needs_rehash,
    hash_password,
    validate_password,
    verify_password,
)
from socialquest.challenges.service import seed_default_challenges
from socialquest.db.models import User
from socialquest.errors import AuthError, ConflictError, NotFoundError, ValidationError
from socialquest.gamification.streak_service import apply_login_streak
from socialquest.timeutils import utcnow
from socialquest.users.repository import UserRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def new_user(username: str, password_hash: str, now: datetime) -> User:
    """A User row with the registration defaults."""
    return User(
        username=username,
        password_hash=password_hash,
        level=1,
        xp=0,
        coins=100,
        streak=0,
        last_active=now,
        inventory=[],
        title="Newbie",
        challenges_completed=0,
        created_at=now,
    )


async def register_user(
    db: AsyncSession,
    username: str,
    password: str,
    now: datetime | None = None,
) -> User:
    """
    Register a new user and seed their default challenges.

    Raises:
        ValidationError: If the password violates the policy.
        ConflictError: If the username is taken.
    """
    if now is None:
        now = utcnow()

    try:
        validate_password(password)
    except PasswordPolicyError as e:
        raise ValidationError(str(e), field="password") from e

    users = UserRepository(db)
    if await users.get_by_username(username) is not None:
        raise ConflictError("Username already exists", field="username")

    user = new_user(username, hash_password(password), now)
    try:
        await users.add(user)
    except IntegrityError as e:
        # Lost a race against a concurrent registration of the same name.
        await db.rollback()
        raise ConflictError("Username already exists", field="username") from e

    await seed_default_challenges(db, user.id, now)
    await db.commit()
    logger.info("user_registered", user_id=user.id, username=username)
    return user


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


def _store_refresh_token(user: User, tokens: TokenPair) -> TokenPair:
    user.refresh_token_hash = hash_token(tokens.refresh_token)
    return tokens


async def login_user(
    db: AsyncSession,
    username: str,
    password: str,
    now: datetime | None = None,
) -> tuple[User, TokenPair]:
    """
    Authenticate, apply the login streak transition and issue a token pair.

    Raises:
        NotFoundError: If no user has this username.
        AuthError: If the password does not match.
    """
    user = await UserRepository(db).get_by_username(username)
    if user is None:
        raise NotFoundError("User not found")

    if not verify_password(password, user.password_hash):
        logger.info("login_failed", user_id=user.id)
        raise AuthError("Incorrect password")

    if check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        logger.info("password_rehashed", user_id=user.id)

    streak = apply_login_streak(user, now)
    tokens = _store_refresh_token(user, issue_tokens(user.id))
    await db.commit()

    logger.info("user_logged_in", user_id=user.id, streak=streak.streak, new_day=streak.new_day)
    return user, tokens


# ---------------------------------------------------------------------------
# Refresh tokens
# ---------------------------------------------------------------------------


async def _user_for_refresh_token(db: AsyncSession, refresh_token: str | None) -> User:
    """Resolve the owner of `refresh_token`, requiring it to be the stored active token."""
    if not refresh_token:
        raise AuthError("Refresh token required")

    try:
        user_id = user_id_from_token(refresh_token, expected_type="refresh")
    except jwt.InvalidTokenError as e:
        raise AuthError.rejected("Invalid refresh token") from e

    user = await UserRepository(db).get_by_id(user_id)
    if (
        user is None
        or user.refresh_token_hash is None
        or not hmac.compare_digest(user.refresh_token_hash, hash_token(refresh_token))
    ):
        raise AuthError.rejected("Invalid refresh token")
    return user


async def refresh_session(db: AsyncSession, refresh_token: str | None) -> TokenPair:
    """
    Exchange the active refresh token for a new pair.

    Raises:
        AuthError: 401 if no token was sent; 403 if it is expired, badly
            signed, or not the token currently stored for its user.
    """
    user = await _user_for_refresh_token(db, refresh_token)
    tokens = _store_refresh_token(user, issue_tokens(user.id))
    await db.commit()
    logger.info("tokens_refreshed", user_id=user.id)
    return tokens


async def logout_user(db: AsyncSession, refresh_token: str | None) -> None:
    """Forget the stored refresh token so it can no longer be exchanged."""
    user = await _user_for_refresh_token(db, refresh_token)
    user.refresh_token_hash = None
    await db.commit()
    logger.info("user_logged_out", user_id=user.id)
