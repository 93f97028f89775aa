"""UTC helpers shared by the streak and challenge logic."""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def end_of_day(dt: datetime) -> datetime:
    """Next UTC midnight after dt, the exclusive end of its calendar day.

    Always strictly later than dt, even for 23:59:59.999999.
    """
    day = as_utc(dt).date() + timedelta(days=1)
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def same_calendar_day(a: datetime, b: datetime) -> bool:
    return as_utc(a).date() == as_utc(b).date()


def end_of_week(dt: datetime) -> datetime:
    """Seven days after dt."""
    return as_utc(dt) + timedelta(days=7)
