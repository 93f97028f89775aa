"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import Field

from socialquest.schemas import ApiModel
from socialquest.users.schemas import UserResponse

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


class RegisterRequest(ApiModel):
    """Register with username + password."""

    username: str = Field(..., min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=1, max_length=128)


class RegisterResponse(ApiModel):
    message: str = "User registered successfully"
    user_id: int


class LoginRequest(ApiModel):
    """Login with username + password."""

    username: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(ApiModel):
    """Refresh-token exchange. A missing token is reported as 401, not a validation error."""

    refresh_token: str | None = None


class LogoutRequest(ApiModel):
    """Logout (clears the stored refresh token)."""

    refresh_token: str | None = None


class TokenPairResponse(ApiModel):
    access_token: str
    refresh_token: str


class LoginResponse(ApiModel):
    """Tokens plus the caller's profile."""

    access_token: str
    refresh_token: str
    user: UserResponse
