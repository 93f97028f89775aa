"""Default challenge set seeded at registration and lazily on read."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from socialquest.db.models import CHALLENGE_TYPES, Challenge
from socialquest.timeutils import as_utc, end_of_day, end_of_week

EVENT_POST_CREATED = "post_created"
EVENT_LIKE_RECEIVED = "like_received"

DEFAULT_CHALLENGES: list[dict] = [
    {
        "type": "daily",
        "description": "Post 3 times today",
        "event_kind": EVENT_POST_CREATED,
        "target": 3,
        "reward": 50,
        "expires": end_of_day,
    },
    {
        "type": "weekly",
        "description": "Get 50 likes this week",
        "event_kind": EVENT_LIKE_RECEIVED,
        "target": 50,
        "reward": 200,
        "expires": end_of_week,
    },
]


def new_challenge(
    owner_id: int,
    *,
    type: str,  # noqa: A002
    description: str,
    event_kind: str,
    target: int,
    reward: int,
    expires_at: datetime,
    now: datetime,
) -> Challenge:
    """Build a Challenge after checking the column invariants.

    Raises:
        ValueError: On an unknown type, out-of-range numbers or a non-future expiry.
    """
    if type not in CHALLENGE_TYPES:
        msg = f"Unknown challenge type '{type}'"
        raise ValueError(msg)
    if not 5 <= len(description) <= 100:
        msg = "Challenge description must be 5-100 characters"
        raise ValueError(msg)
    if target < 1 or reward < 1:
        msg = "Challenge target and reward must be at least 1"
        raise ValueError(msg)
    if as_utc(expires_at) <= as_utc(now):
        msg = "Expiration date must be in the future"
        raise ValueError(msg)

    return Challenge(
        owner_id=owner_id,
        type=type,
        description=description,
        event_kind=event_kind,
        target=target,
        progress=0,
        reward=reward,
        completed=False,
        expires_at=expires_at,
        created_at=now,
    )


def build_default_challenges(owner_id: int, now: datetime) -> list[Challenge]:
    """One daily and one weekly challenge for `owner_id`, expiring relative to `now`."""
    challenges = []
    for template in DEFAULT_CHALLENGES:
        expires: Callable[[datetime], datetime] = template["expires"]
        challenges.append(
            new_challenge(
                owner_id,
                type=template["type"],
                description=template["description"],
                event_kind=template["event_kind"],
                target=template["target"],
                reward=template["reward"],
                expires_at=expires(now),
                now=now,
            )
        )
    return challenges
