"""Challenge persistence behind a small repository interface."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy import select

from socialquest.db.models import Challenge

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class ChallengeRepository:
    """Loads and stores Challenge rows through one AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_for_owner(self, owner_id: int) -> list[Challenge]:
        result = await self.db.execute(
            select(Challenge)
            .where(Challenge.owner_id == owner_id)
            .order_by(Challenge.created_at.desc(), Challenge.id.desc())
        )
        return list(result.scalars().all())

    async def list_open_for_event(self, owner_id: int, event_kind: str) -> list[Challenge]:
        """Uncompleted challenges of `owner_id` advanced by `event_kind` (expiry is checked by the caller)."""
        result = await self.db.execute(
            select(Challenge)
            .where(
                Challenge.owner_id == owner_id,
                Challenge.event_kind == event_kind,
                Challenge.completed.is_(False),
            )
            .order_by(Challenge.id)
        )
        return list(result.scalars().all())

    async def add_all(self, challenges: Iterable[Challenge]) -> list[Challenge]:
        items = list(challenges)
        self.db.add_all(items)
        await self.db.flush()
        return items
