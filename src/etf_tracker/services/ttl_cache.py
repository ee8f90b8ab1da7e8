"""Process-lifetime TTL cache keyed by (kind, ticker)."""

import threading
import time
from typing import Any, Callable, Hashable, Optional


class TtlCache:
    """
    Cache-aside store with per-read maximum age.

    Entries are never evicted; at a small fixed ticker universe the
    growth is bounded by kinds x tickers.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable, max_age_seconds: float) -> Optional[Any]:
        """Return the cached value when younger than max_age_seconds, else None."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at < max_age_seconds:
            return value
        return None

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
