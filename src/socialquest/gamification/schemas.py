"""Pydantic response models for gamification endpoints."""

from __future__ import annotations

from socialquest.schemas import ApiModel


class LevelUpResponse(ApiModel):
    leveled_up: bool
    new_level: int | None = None
    reward_item: str | None = None
