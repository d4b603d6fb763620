# dates.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from .domain.models import RecencyFilter

_WINDOWS = {
    RecencyFilter.LAST_HOUR: timedelta(hours=1),
    RecencyFilter.LAST_4_HOURS: timedelta(hours=4),
    RecencyFilter.LAST_24_HOURS: timedelta(hours=24),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def recency_cutoff(recency: RecencyFilter, now: datetime) -> Optional[datetime]:
    """Earliest timestamp a post may carry, or None for no limit.

    TODAY truncates to midnight of the server's local calendar day.
    """
    now = as_aware(now)
    window = _WINDOWS.get(recency)
    if window is not None:
        return now - window
    if recency is RecencyFilter.TODAY:
        local = now.astimezone()
        return local.replace(hour=0, minute=0, second=0, microsecond=0)
    return None


def since(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """Express how long ago a (recent) timestamp was."""
    now = as_aware(now) if now is not None else utcnow()
    elapsed = max(0, int((now - as_aware(timestamp)).total_seconds()))

    minutes, _seconds = divmod(elapsed, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    hour_s = "" if hours == 1 else "s"
    if days > 1:
        return f"{days} days ago"
    if days == 1:
        return f"{days} day and {hours} hour{hour_s} ago"
    if hours > 0:
        return f"{hours} hour{hour_s} and {minutes} minutes ago"
    return f"{minutes} minutes ago"
