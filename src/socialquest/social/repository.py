"""Post persistence behind a small repository interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from socialquest.db.models import Post

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class PostRepository:
    """Loads and stores Post rows (with likes and comments) through one AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, post_id: int) -> Post | None:
        result = await self.db.execute(select(Post).where(Post.id == post_id))
        return result.scalar_one_or_none()

    async def add(self, post: Post) -> Post:
        self.db.add(post)
        await self.db.flush()
        return post

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Post))
        return result.scalar_one()

    async def list_newest_first(self, offset: int, limit: int) -> list[Post]:
        """Newest-first page; id breaks ties between posts created in the same instant."""
        result = await self.db.execute(
            select(Post)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())
