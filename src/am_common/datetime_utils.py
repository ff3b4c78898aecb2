"""UTC datetime utilities."""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def end_time_after_days(days: int, start: datetime | None = None) -> datetime:
    """Auction close time: `days` calendar days after `start` (default now)."""
    return (start or utc_now()) + timedelta(days=days)


def is_past(moment: datetime, now: datetime | None = None) -> bool:
    """True when `moment` lies strictly before `now`."""
    return moment < (now or utc_now())
