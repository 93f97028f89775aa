"""Pydantic response models for challenge endpoints."""

from __future__ import annotations

from datetime import datetime

from socialquest.schemas import ApiModel


class ChallengeResponse(ApiModel):
    id: int
    type: str
    description: str
    event_kind: str
    target: int
    progress: int
    reward: int
    completed: bool
    expired: bool
    expires_at: datetime
