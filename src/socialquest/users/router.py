"""User router: /users/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.auth.dependencies import get_current_user
from socialquest.database import get_session
from socialquest.db.models import User
from socialquest.timeutils import as_utc
from socialquest.users.schemas import InventoryAddRequest, UserResponse
from socialquest.users.service import add_inventory_item

router = APIRouter(prefix="/users", tags=["Users"])


def user_response(user: User) -> UserResponse:
    """Build a UserResponse from a User model (no password hash, no refresh token)."""
    return UserResponse(
        id=user.id,
        username=user.username,
        level=user.level,
        xp=user.xp,
        coins=user.coins,
        streak=user.streak,
        last_active=as_utc(user.last_active) if user.last_active else None,
        inventory=list(user.inventory or []),
        title=user.title,
        challenges_completed=user.challenges_completed,
        created_at=as_utc(user.created_at) if user.created_at else None,
    )


@router.get("/me", response_model=UserResponse)
async def get_profile(
    user: User = Depends(get_current_user),
) -> UserResponse:
    """Get own full profile."""
    return user_response(user)


@router.post("/inventory", response_model=UserResponse)
async def add_to_inventory(
    body: InventoryAddRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Add a named item to the caller's inventory."""
    user = await add_inventory_item(db, user, body.item)
    return user_response(user)
