"""Login streak tracking.

A streak counts consecutive calendar days with at least one login. The
transition runs on every successful login and mutates only `streak` and
`last_active`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from socialquest.timeutils import as_utc, same_calendar_day, utcnow

logger = logging.getLogger(__name__)

CONSECUTIVE_WINDOW = timedelta(hours=48)


class StreakState(Protocol):
    streak: int
    last_active: datetime


@dataclass(frozen=True)
class StreakResult:
    new_day: bool
    streak: int
    previous_streak: int


def apply_login_streak(user: StreakState, now: datetime | None = None) -> StreakResult:
    """Advance the streak of `user` for a login at `now`.

    - Same UTC calendar day as `last_active`: nothing changes.
    - Otherwise the streak grows by one when the previous activity is less
      than 48 hours old, or restarts at 1; `last_active` moves to `now`.

    The day check and the 48-hour window are evaluated independently, so two
    logins a few minutes apart on either side of midnight still extend the
    streak.
    """
    if now is None:
        now = utcnow()
    previous = user.streak

    if same_calendar_day(now, user.last_active):
        return StreakResult(new_day=False, streak=previous, previous_streak=previous)

    elapsed = as_utc(now) - as_utc(user.last_active)
    user.streak = previous + 1 if elapsed < CONSECUTIVE_WINDOW else 1
    user.last_active = now

    if user.streak == 1 and previous > 1:
        logger.info("Streak reset after %s of inactivity (was %d)", elapsed, previous)
    return StreakResult(new_day=True, streak=user.streak, previous_streak=previous)
