"""Calendar Helpers

Bucket truncation and window labeling for the bar generator.

Timestamps keep the awareness they arrive with: aware datetimes are
converted to the configured exchange timezone, naive datetimes are
taken as exchange-local wall time and stay naive.
"""
from datetime import datetime, timedelta, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from bargen.config import settings
from bargen.core.enums import Interval


@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def get_exchange_timezone() -> tzinfo:
    """Timezone all bucket arithmetic is done in."""
    return _zone(settings.BAR_GENERATOR.timezone)


def to_exchange_time(dt: datetime) -> datetime:
    """Convert an aware datetime to exchange time; naive passes through."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(get_exchange_timezone())


def align_to(reference: datetime, dt: datetime) -> datetime:
    """Return dt in exchange time with the same awareness as reference.

    Used where a wall-clock "now" is compared against a bar timestamp
    that may be naive.
    """
    if reference.tzinfo is None:
        if dt.tzinfo is None:
            return dt
        return dt.astimezone(get_exchange_timezone()).replace(tzinfo=None)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=get_exchange_timezone())
    return dt.astimezone(get_exchange_timezone())


def trim_to_minute(dt: datetime) -> datetime:
    """Drop seconds and microseconds."""
    return dt.replace(second=0, microsecond=0)


def trim_to_hour(dt: datetime) -> datetime:
    return dt.replace(minute=0, second=0, microsecond=0)


def trim_to_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def next_month_start(dt: datetime) -> datetime:
    """Midnight on the first day of the month after dt."""
    if dt.month == 12:
        return trim_to_day(dt.replace(year=dt.year + 1, month=1, day=1))
    return trim_to_day(dt.replace(month=dt.month + 1, day=1))


def window_start(dt: datetime, interval: Interval) -> datetime:
    """Timestamp a new window bar is labeled with.

    MINUTE and HOUR windows are labeled with the bucket the first bar
    falls in. DAILY, WEEKLY and MONTHLY windows are labeled with the
    start of the FOLLOWING day, ISO week or month respectively.

    Args:
        dt: Timestamp of the first bar contributing to the window
        interval: Target window granularity

    Returns:
        Window label timestamp (TICK windows keep dt unchanged)
    """
    if interval == Interval.MINUTE:
        return trim_to_minute(dt)
    if interval == Interval.HOUR:
        return trim_to_hour(dt)
    if interval == Interval.DAILY:
        return trim_to_day(dt + timedelta(days=1))
    if interval == Interval.WEEKLY:
        following = dt + timedelta(weeks=1)
        # ISO weeks start on Monday (weekday() == 0)
        return trim_to_day(following - timedelta(days=following.weekday()))
    if interval == Interval.MONTHLY:
        return next_month_start(dt)
    return dt
