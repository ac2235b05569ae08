"""Timezone utilities for hotel-tenancy.

All stored timestamps are UTC-aware. Hotel-local wall-clock values
(hours, calendar dates) are derived by converting to the hotel's IANA zone.
"""

from datetime import datetime, time, timedelta, timezone
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utc_now() -> datetime:
    """Get current UTC datetime with timezone awareness."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure datetime has UTC timezone.

    Naive datetimes are assumed to be UTC; aware ones are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    elif dt.tzinfo != timezone.utc:
        return dt.astimezone(timezone.utc)
    return dt


def get_zone(tz_name: str) -> ZoneInfo:
    """Resolve an IANA zone name, raising ValueError for unknown zones."""
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone '{tz_name}'") from e


def to_local(dt: datetime, tz_name: str) -> datetime:
    """Convert an instant to hotel-local time."""
    return ensure_utc(dt).astimezone(get_zone(tz_name))


def local_day_bounds(instant: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    """
    Start (inclusive) and end (exclusive) of the hotel-local day containing
    ``instant``, both returned in UTC.
    """
    zone = get_zone(tz_name)
    local_date = to_local(instant, tz_name).date()
    start = datetime.combine(local_date, time.min, tzinfo=zone)
    end = datetime.combine(local_date + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
