from __future__ import annotations

from datetime import datetime, timedelta, timezone

RESERVATION_WINDOW_SECONDS = 60


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; every timestamp is written in UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def reservation_cutoff(now: datetime | None = None) -> datetime:
    current = as_utc(now) if now is not None else utcnow()
    return current - timedelta(seconds=RESERVATION_WINDOW_SECONDS)


def is_recently_reserved(reserved_at: datetime | None, now: datetime | None = None) -> bool:
    reserved = as_utc(reserved_at)
    if reserved is None:
        return False
    return reserved > reservation_cutoff(now)
