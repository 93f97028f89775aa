"""Challenge progress tracking, reward crediting and lazy re-seeding."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from socialquest.challenges.repository import ChallengeRepository
from socialquest.challenges.seed import build_default_challenges
from socialquest.timeutils import as_utc, utcnow

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from socialquest.db.models import Challenge, User

logger = structlog.get_logger()


def is_expired(challenge: Challenge, now: datetime) -> bool:
    return as_utc(now) > as_utc(challenge.expires_at)


def advance_challenge(challenge: Challenge, user: User, now: datetime) -> bool:
    """Apply one matching event to `challenge`.

    Progress is capped at the target. On the step that reaches the target the
    challenge is marked completed and its reward is credited to `user`; the
    completed flag keeps the reward from being paid twice. Expired and
    completed challenges are left untouched.

    Returns True when this call completed the challenge.
    """
    if challenge.completed or is_expired(challenge, now):
        return False

    challenge.progress = min(challenge.progress + 1, challenge.target)
    if challenge.progress < challenge.target:
        return False

    challenge.completed = True
    user.coins += challenge.reward
    user.challenges_completed += 1
    return True


async def record_event(
    db: AsyncSession,
    user: User,
    event_kind: str,
    now: datetime | None = None,
) -> list[Challenge]:
    """Advance every open, unexpired challenge of `user` that matches `event_kind`.

    Returns the challenges completed by this event. The caller commits.
    """
    if now is None:
        now = utcnow()
    completed = []
    for challenge in await ChallengeRepository(db).list_open_for_event(user.id, event_kind):
        if advance_challenge(challenge, user, now):
            completed.append(challenge)
            logger.info(
                "challenge_completed",
                user_id=user.id,
                challenge_id=challenge.id,
                reward=challenge.reward,
            )
    if completed:
        await db.flush()
    return completed


async def seed_default_challenges(
    db: AsyncSession,
    user_id: int,
    now: datetime | None = None,
) -> list[Challenge]:
    """Create the default daily + weekly challenges for `user_id`."""
    if now is None:
        now = utcnow()
    challenges = await ChallengeRepository(db).add_all(build_default_challenges(user_id, now))
    logger.info("challenges_seeded", user_id=user_id, count=len(challenges))
    return challenges


async def list_challenges(
    db: AsyncSession,
    user: User,
    now: datetime | None = None,
) -> list[Challenge]:
    """Return the user's challenges, newest first.

    Expiry is evaluated here rather than by a scheduler: when none of the
    user's challenges is still unexpired, a fresh default set is seeded first.
    The caller commits.
    """
    if now is None:
        now = utcnow()
    repo = ChallengeRepository(db)
    challenges = await repo.list_for_owner(user.id)
    if all(is_expired(c, now) for c in challenges):
        await seed_default_challenges(db, user.id, now)
        challenges = await repo.list_for_owner(user.id)
    return challenges
