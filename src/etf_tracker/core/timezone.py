"""Time zone helpers; market time is US/Eastern unless configured otherwise."""

from datetime import datetime
from typing import Optional

import pytz

EASTERN_TZ = pytz.timezone("US/Eastern")


def get_timezone(name: Optional[str] = None) -> pytz.BaseTzInfo:
    if not name:
        return EASTERN_TZ
    return pytz.timezone(name)


def now_eastern() -> datetime:
    return datetime.now(EASTERN_TZ)


def to_zone(dt: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """
    Express dt in tz.

    Naive values are taken as wall-clock time in tz.
    """
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def to_eastern(dt: datetime) -> datetime:
    return to_zone(dt, EASTERN_TZ)
