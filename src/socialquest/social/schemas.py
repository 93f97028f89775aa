"""Pydantic schemas for social feed endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from socialquest.schemas import ApiModel
from socialquest.users.schemas import AuthorResponse


class CreatePostRequest(ApiModel):
    content: str = Field(..., min_length=1, max_length=500)


class CreateCommentRequest(ApiModel):
    content: str = Field(..., min_length=1, max_length=200)


class CommentResponse(ApiModel):
    id: int
    author: AuthorResponse
    content: str
    timestamp: datetime


class PostResponse(ApiModel):
    id: int
    author: AuthorResponse
    content: str
    likes: list[int] = []  # ids of users who liked the post
    like_count: int = 0
    liked_by_me: bool = False
    comments: list[CommentResponse] = []
    created_at: datetime


class PostListResponse(ApiModel):
    posts: list[PostResponse]
    total: int
    page: int
    pages: int
