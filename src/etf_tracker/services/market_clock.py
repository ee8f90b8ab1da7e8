"""
Market clock: trading-day and session-window arithmetic.

Pure functions over a SessionHours value; no state and no wall clock.
Weekdays (Mon-Fri) are trading days; exchange holidays are not modelled.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

import pytz

from etf_tracker.core.timezone import EASTERN_TZ, get_timezone, to_zone


@dataclass(frozen=True)
class SessionHours:
    """Session bounds in a fixed reference time zone."""

    tz: pytz.BaseTzInfo = field(default=EASTERN_TZ)
    open_time: time = time(9, 30)
    close_time: time = time(16, 0)
    interval: timedelta = timedelta(minutes=5)

    @classmethod
    def from_settings(cls, settings) -> "SessionHours":
        return cls(
            tz=get_timezone(settings.session_timezone),
            open_time=settings.session_open,
            close_time=settings.session_close,
            interval=timedelta(seconds=settings.snapshot_interval_seconds),
        )


DEFAULT_HOURS = SessionHours()


def is_trading_day(now: datetime, hours: SessionHours = DEFAULT_HOURS) -> bool:
    """True on Monday through Friday in the session time zone."""
    return to_zone(now, hours.tz).weekday() < 5


def _at(day: date, wall: time, hours: SessionHours) -> datetime:
    return hours.tz.localize(datetime.combine(day, wall))


def session_open(day: date, hours: SessionHours = DEFAULT_HOURS) -> datetime:
    return _at(day, hours.open_time, hours)


def session_close(day: date, hours: SessionHours = DEFAULT_HOURS) -> datetime:
    return _at(day, hours.close_time, hours)


def is_within_session(now: datetime, hours: SessionHours = DEFAULT_HOURS) -> bool:
    """True on a trading day between open (inclusive) and close (exclusive)."""
    local = to_zone(now, hours.tz)
    if local.weekday() >= 5:
        return False
    return hours.open_time <= local.time() < hours.close_time


def next_trading_day(day: date) -> date:
    """First weekday strictly after day."""
    nxt = day + timedelta(days=1)
    while nxt.weekday() >= 5:
        nxt += timedelta(days=1)
    return nxt


def previous_trading_day(day: date) -> date:
    """Last weekday strictly before day."""
    prev = day - timedelta(days=1)
    while prev.weekday() >= 5:
        prev -= timedelta(days=1)
    return prev


def next_snapshot_instant(now: datetime, hours: SessionHours = DEFAULT_HOURS) -> datetime:
    """
    Next scheduled valuation instant, strictly after now.

    Inside the session this is the next multiple of the interval (counted
    from local midnight). If that lands at or after close, or now is
    outside any session, the answer is the next session's open.
    """
    local = to_zone(now, hours.tz)
    today = local.date()

    if local.weekday() < 5:
        open_at = session_open(today, hours)
        if local < open_at:
            return open_at
        close_at = session_close(today, hours)
        if local < close_at:
            midnight = hours.tz.localize(datetime.combine(today, time(0, 0)))
            step = hours.interval.total_seconds()
            elapsed = (local - midnight).total_seconds()
            slots = int(elapsed // step) + 1
            candidate = hours.tz.normalize(midnight + timedelta(seconds=slots * step))
            if candidate < close_at:
                return candidate

    return session_open(next_trading_day(today), hours)


def most_recent_open(now: datetime, hours: SessionHours = DEFAULT_HOURS) -> datetime:
    """The latest session open at or before now (seed instant for the history)."""
    local = to_zone(now, hours.tz)
    today = local.date()
    if local.weekday() < 5 and local >= session_open(today, hours):
        return session_open(today, hours)
    day = previous_trading_day(today)
    return session_open(day, hours)
