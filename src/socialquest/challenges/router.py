"""Challenge API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.auth.dependencies import get_current_user
from socialquest.challenges.schemas import ChallengeResponse
from socialquest.challenges.service import is_expired, list_challenges
from socialquest.database import get_session
from socialquest.db.models import User
from socialquest.timeutils import as_utc, utcnow

router = APIRouter(tags=["Challenges"])


@router.get("/challenges", response_model=list[ChallengeResponse])
async def get_challenges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[ChallengeResponse]:
    """List the caller's challenges, seeding a fresh default set when none is active."""
    now = utcnow()
    challenges = await list_challenges(db, user, now)
    await db.commit()
    return [
        ChallengeResponse(
            id=c.id,
            type=c.type,
            description=c.description,
            event_kind=c.event_kind,
            target=c.target,
            progress=c.progress,
            reward=c.reward,
            completed=c.completed,
            expired=is_expired(c, now),
            expires_at=as_utc(c.expires_at),
        )
        for c in challenges
    ]
