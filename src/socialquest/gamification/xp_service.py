"""XP grants and the explicit level-up check."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Protocol

from socialquest.config import get_settings

logger = logging.getLogger(__name__)

XP_PER_LEVEL = 100

REWARD_ITEMS: tuple[str, ...] = (
    "Bronze Trophy",
    "Silver Shield",
    "Golden Crown",
    "Mystery Box",
    "XP Potion",
    "Rare Avatar Frame",
)


class LevelState(Protocol):
    level: int
    xp: int
    coins: int
    inventory: list[str]


class XPState(Protocol):
    xp: int


@dataclass(frozen=True)
class LevelUpResult:
    leveled_up: bool
    new_level: int | None = None
    reward_item: str | None = None


def level_threshold(level: int) -> int:
    """XP needed to leave `level`."""
    return level * XP_PER_LEVEL


def grant_xp(user: XPState, amount: int) -> int:
    """Add `amount` XP to `user` and return the new total.

    Never levels the user up: leveling only happens through check_level_up().
    """
    if amount < 0:
        msg = "XP grants must be non-negative"
        raise ValueError(msg)
    user.xp += amount
    return user.xp


def check_level_up(user: LevelState, rng: random.Random | None = None) -> LevelUpResult:
    """Run one level-up check on `user`.

    If xp >= level * 100: level += 1, exactly one threshold is subtracted from
    xp (no cascade even if xp covers several thresholds), coins grow by the
    configured reward and one random item from REWARD_ITEMS is appended to the
    inventory. Otherwise nothing changes.
    """
    threshold = level_threshold(user.level)
    if user.xp < threshold:
        return LevelUpResult(leveled_up=False)

    chooser = rng or random
    item = chooser.choice(REWARD_ITEMS)

    user.level += 1
    user.xp -= threshold
    user.coins += get_settings().level_up_coin_reward
    # Reassign so the JSON column is flagged dirty.
    user.inventory = [*user.inventory, item]

    logger.info("Level up to %d (item=%s, xp carried=%d)", user.level, item, user.xp)
    return LevelUpResult(leveled_up=True, new_level=user.level, reward_item=item)
