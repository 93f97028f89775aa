"""Social feed API endpoints: posts, likes and comments."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.auth.dependencies import get_current_user
from socialquest.config import get_settings
from socialquest.database import get_session
from socialquest.db.models import Post, User
from socialquest.social.schemas import (
    CommentResponse,
    CreateCommentRequest,
    CreatePostRequest,
    PostListResponse,
    PostResponse,
)
from socialquest.social.service import add_comment, create_post, list_posts, toggle_like
from socialquest.timeutils import as_utc
from socialquest.users.schemas import AuthorResponse

router = APIRouter(prefix="/posts", tags=["Social"])


# ── Helper ──


def _author(user: User) -> AuthorResponse:
    return AuthorResponse(id=user.id, username=user.username, title=user.title)


def build_post_response(post: Post, viewer_id: int | None = None) -> PostResponse:
    """Build a PostResponse from the ORM model with likes and comments loaded."""
    like_ids = [like.user_id for like in post.likes]
    return PostResponse(
        id=post.id,
        author=_author(post.author),
        content=post.content,
        likes=like_ids,
        like_count=len(like_ids),
        liked_by_me=viewer_id in like_ids,
        comments=[
            CommentResponse(
                id=c.id,
                author=_author(c.author),
                content=c.content,
                timestamp=as_utc(c.created_at),
            )
            for c in post.comments
        ],
        created_at=as_utc(post.created_at),
    )


# ── Endpoints ──


@router.get("", response_model=PostListResponse)
async def get_posts(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> PostListResponse:
    """Newest-first page of the feed."""
    settings = get_settings()
    page_size = min(limit or settings.default_page_size, settings.max_page_size)
    result = await list_posts(db, page, page_size)
    return PostListResponse(
        posts=[build_post_response(p, user.id) for p in result.posts],
        total=result.total,
        page=result.page,
        pages=result.pages,
    )


@router.post("", response_model=PostResponse, status_code=201)
async def publish_post(
    body: CreatePostRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> PostResponse:
    """Create a post (+10 XP to the author)."""
    post = await create_post(db, user, body.content)
    return build_post_response(post, user.id)


@router.post("/{post_id}/like", response_model=PostResponse)
async def like_post(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> PostResponse:
    """Toggle the caller's like (+5 XP to the caller when a like is added)."""
    post, _liked = await toggle_like(db, post_id, user)
    return build_post_response(post, user.id)


@router.post("/{post_id}/comments", response_model=PostResponse, status_code=201)
async def comment_on_post(
    post_id: int,
    body: CreateCommentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> PostResponse:
    """Add a comment to a post."""
    post = await add_comment(db, post_id, user, body.content)
    return build_post_response(post, user.id)
