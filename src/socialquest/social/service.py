"""Social feed: posts, likes, comments and pagination.

Every operation that touches more than one row (a like updates the post, the
liker's XP and the author's challenges) is committed as one transaction.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from socialquest.challenges.seed import EVENT_LIKE_RECEIVED, EVENT_POST_CREATED
from socialquest.challenges.service import record_event
from socialquest.config import get_settings
from socialquest.db.models import Comment, Post, PostLike
from socialquest.errors import NotFoundError, ValidationError
from socialquest.gamification.xp_service import grant_xp
from socialquest.social.repository import PostRepository
from socialquest.timeutils import utcnow

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from socialquest.db.models import User

logger = structlog.get_logger()

POST_MAX_LENGTH = 500
COMMENT_MAX_LENGTH = 200


@dataclass(frozen=True)
class PostPage:
    posts: list[Post]
    total: int
    page: int
    pages: int


def _validate_length(content: str, max_length: int, what: str) -> None:
    if not 1 <= len(content) <= max_length:
        raise ValidationError(f"{what} must be 1-{max_length} characters", field="content")


async def _get_post_or_404(db: AsyncSession, post_id: int) -> Post:
    post = await PostRepository(db).get(post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def create_post(
    db: AsyncSession,
    user: User,
    content: str,
    now: datetime | None = None,
) -> Post:
    """
    Publish a post, grant the author XP and advance their post challenges.

    Raises:
        ValidationError: If content is not 1-500 characters.
    """
    _validate_length(content, POST_MAX_LENGTH, "Post content")
    if now is None:
        now = utcnow()

    post = await PostRepository(db).add(
        Post(author=user, content=content, created_at=now, likes=[], comments=[])
    )
    grant_xp(user, get_settings().xp_per_post)
    await record_event(db, user, EVENT_POST_CREATED, now)
    await db.commit()

    logger.info("post_created", post_id=post.id, user_id=user.id)
    return post


async def toggle_like(
    db: AsyncSession,
    post_id: int,
    user: User,
    now: datetime | None = None,
) -> tuple[Post, bool]:
    """
    Toggle the user's membership in the post's like set.

    Adding a like grants XP to the liker and counts towards the author's
    like challenges. Removing it revokes nothing.

    Returns:
        Tuple of (post, liked) where liked is the new membership state.

    Raises:
        NotFoundError: If the post does not exist.
    """
    if now is None:
        now = utcnow()
    post = await _get_post_or_404(db, post_id)

    existing = next((like for like in post.likes if like.user_id == user.id), None)
    if existing is not None:
        post.likes.remove(existing)
        await db.commit()
        logger.info("post_unliked", post_id=post.id, user_id=user.id)
        return post, False

    post.likes.append(PostLike(user_id=user.id, created_at=now))
    grant_xp(user, get_settings().xp_per_like)

    await record_event(db, post.author, EVENT_LIKE_RECEIVED, now)
    await db.commit()

    logger.info("post_liked", post_id=post.id, user_id=user.id)
    return post, True


async def add_comment(
    db: AsyncSession,
    post_id: int,
    user: User,
    content: str,
    now: datetime | None = None,
) -> Post:
    """
    Append a comment to a post.

    Raises:
        ValidationError: If content is not 1-200 characters.
        NotFoundError: If the post does not exist.
    """
    _validate_length(content, COMMENT_MAX_LENGTH, "Comment")
    if now is None:
        now = utcnow()
    post = await _get_post_or_404(db, post_id)

    post.comments.append(Comment(author=user, content=content, created_at=now))
    await db.commit()

    logger.info("comment_added", post_id=post.id, user_id=user.id)
    return post


async def list_posts(db: AsyncSession, page: int = 1, page_size: int = 10) -> PostPage:
    """Newest-first page of the feed with total count and page count."""
    if page < 1 or page_size < 1:
        raise ValidationError("page and limit must be positive integers")

    repo = PostRepository(db)
    total = await repo.count()
    pages = math.ceil(total / page_size)
    offset = (page - 1) * page_size
    # Pages past the end are empty; their offset may not fit a database integer.
    if offset >= total:
        return PostPage(posts=[], total=total, page=page, pages=pages)

    posts = await repo.list_newest_first(offset=offset, limit=page_size)
    return PostPage(posts=posts, total=total, page=page, pages=pages)
