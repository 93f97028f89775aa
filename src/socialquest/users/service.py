"""User profile operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from socialquest.errors import ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from socialquest.db.models import User

logger = structlog.get_logger()

INVENTORY_ITEM_MAX_LENGTH = 50


async def add_inventory_item(db: AsyncSession, user: User, item: str) -> User:
    """Append an item to the user's inventory. Duplicates are kept."""
    item = item.strip()
    if not 1 <= len(item) <= INVENTORY_ITEM_MAX_LENGTH:
        raise ValidationError(f"Item must be 1-{INVENTORY_ITEM_MAX_LENGTH} characters", field="item")

    # JSON columns only track reassignment, not in-place mutation.
    user.inventory = [*(user.inventory or []), item]
    await db.commit()

    logger.info("inventory_item_added", user_id=user.id, item=item)
    return user
