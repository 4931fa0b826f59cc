"""Date manipulation utilities"""

from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Tuple
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Timezone-aware current time in UTC"""
    return datetime.now(timezone.utc)


def resolve_timezone(name: str) -> tzinfo:
    """Map a configured timezone name to a tzinfo ("UTC" avoids the tz database)"""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def day_window(now: datetime, tz: tzinfo) -> Tuple[datetime, datetime]:
    """
    Calendar-day bucket containing `now`, as a half-open UTC range.

    The day is taken in `tz`, so the window resets at local midnight rather
    than covering the previous 24 hours.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local_day = now.astimezone(tz).date()
    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from backends that drop tzinfo"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
