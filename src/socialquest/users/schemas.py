"""Request/response schemas for user endpoints.

UserResponse never carries the password hash or the refresh token.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from socialquest.schemas import ApiModel


class FriendResponse(ApiModel):
    """Public summary of a friend. There is no endpoint that adds friends, so profiles carry an empty list."""

    username: str
    level: int
    title: str


class UserResponse(ApiModel):
    """Full profile of the authenticated user."""

    id: int
    username: str
    level: int
    xp: int
    coins: int
    streak: int
    last_active: datetime | None = None
    inventory: list[str] = []
    title: str
    challenges_completed: int = 0
    friends: list[FriendResponse] = []
    created_at: datetime | None = None


class AuthorResponse(ApiModel):
    """Public author summary embedded in posts and comments."""

    id: int
    username: str
    title: str


class InventoryAddRequest(ApiModel):
    item: str = Field(..., min_length=1, max_length=50)
