"""User persistence behind a small repository interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from socialquest.db.models import User

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class UserRepository:
    """Loads and stores User rows through one AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_id(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(User))
        return result.scalar_one()

    async def add(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        return user
