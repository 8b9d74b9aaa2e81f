"""Local clock helpers for online-window evaluation."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from foodcart.core.config import settings

MINUTES_PER_DAY: int = 24 * 60


def local_now(tz_name: str | None = None) -> datetime:
    """Return the current time in the configured business timezone."""
    return datetime.now(timezone.utc).astimezone(ZoneInfo(tz_name or settings.local_timezone))


def local_minute_of_day(now: datetime | None = None, tz_name: str | None = None) -> int:
    """Return minutes since local midnight.

    Aware datetimes are converted to the business timezone first; naive ones are
    taken as already local.
    """
    if now is None:
        now = local_now(tz_name)
    elif now.tzinfo is not None:
        now = now.astimezone(ZoneInfo(tz_name or settings.local_timezone))
    return now.hour * 60 + now.minute


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as a 12-hour clock label, e.g. ``09:05 PM``."""
    hours_24, mins = divmod(minutes, 60)
    period = "PM" if hours_24 >= 12 else "AM"
    hours_12 = 12 if hours_24 % 12 == 0 else hours_24 % 12
    return f"{hours_12:02d}:{mins:02d} {period}"
