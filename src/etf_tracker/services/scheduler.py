"""
Snapshot scheduler: a single-shot timer re-armed after every firing.

Each firing computes the next instant from the clock, so a slow
callback delays at most one slot instead of accumulating drift.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from etf_tracker.services.market_clock import DEFAULT_HOURS, SessionHours, next_snapshot_instant

logger = logging.getLogger(__name__)


class SnapshotScheduler:
    """Runs `callback(fired_at)` at every scheduled valuation instant."""

    def __init__(
        self,
        callback: Callable[[datetime], None],
        clock: Callable[[], datetime],
        hours: SessionHours = DEFAULT_HOURS,
    ):
        self._callback = callback
        self._clock = clock
        self._hours = hours
        self._next_due: Optional[datetime] = None
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def next_due(self) -> Optional[datetime]:
        return self._next_due

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def arm(self, now: Optional[datetime] = None) -> datetime:
        """Schedule the next firing after now."""
        now = now or self._clock()
        self._next_due = next_snapshot_instant(now, self._hours)
        logger.debug("Next snapshot scheduled for %s", self._next_due.isoformat())
        return self._next_due

    def poll(self, now: Optional[datetime] = None) -> bool:
        """
        Fire the callback if due, then re-arm from the firing instant.
        Returns True when the callback ran.
        """
        if self.cancelled:
            return False
        now = now or self._clock()
        if self._next_due is None:
            self.arm(now)
            return False
        if now < self._next_due:
            return False
        try:
            self._callback(now)
        except Exception:
            logger.exception("Scheduled snapshot failed")
        self.arm(self._clock())
        return True

    def run(self) -> None:
        """Block until cancelled, sleeping until each due instant."""
        if self._next_due is None:
            self.arm()
        while not self.cancelled:
            delay = (self._next_due - self._clock()).total_seconds()
            if delay > 0 and self._cancelled.wait(timeout=delay):
                break
            self.poll()

    def start(self) -> threading.Thread:
        """Run the loop in a daemon thread."""
        self._thread = threading.Thread(target=self.run, name="snapshot-scheduler", daemon=True)
        self._thread.start()
        return self._thread

    def cancel(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the loop; safe to call more than once."""
        self._cancelled.set()
        thread = self._thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)
