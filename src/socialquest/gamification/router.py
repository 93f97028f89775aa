"""Gamification API endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.auth.dependencies import get_current_user
from socialquest.database import get_session
from socialquest.db.models import User
from socialquest.gamification.schemas import LevelUpResponse
from socialquest.gamification.xp_service import check_level_up

logger = structlog.get_logger()

router = APIRouter(tags=["Gamification"])


@router.post("/level-up", response_model=LevelUpResponse, response_model_exclude_none=True)
async def level_up(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> LevelUpResponse:
    """Run one level-up check for the caller."""
    result = check_level_up(user)
    if result.leveled_up:
        await db.commit()
        logger.info("level_up", user_id=user.id, new_level=result.new_level, item=result.reward_item)
    return LevelUpResponse(
        leveled_up=result.leveled_up,
        new_level=result.new_level,
        reward_item=result.reward_item,
    )
