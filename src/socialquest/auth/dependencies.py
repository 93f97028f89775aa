"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.auth.jwt import user_id_from_token
from socialquest.database import get_session
from socialquest.db.models import User
from socialquest.errors import AuthError
from socialquest.users.repository import UserRepository

# auto_error=False so a missing header is reported as 401 rather than FastAPI's default.
_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    Extract and verify the bearer access token, return the User model.

    401 when the token is absent or expired, 403 when it is rejected
    (bad signature, wrong type, unknown user).
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Access token required")

    try:
        user_id = user_id_from_token(credentials.credentials, expected_type="access")
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthError.rejected("Invalid token") from e

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise AuthError.rejected("Invalid token - user not found")
    return user
