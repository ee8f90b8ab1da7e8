"""
History ledger: the persisted portfolio-value series.

Two physical copies exist, a local key-value cache and a remote store.
Remote wins when it has data; local is the fallback; with neither, a
single static seed at the last market open holds the previous-close
baseline. Local writes are synchronous, remote writes are fire-and-forget.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Union

import pytz

from etf_tracker.core.exceptions import RemoteUnavailable, StorageCorrupt
from etf_tracker.core.timezone import EASTERN_TZ, to_zone
from etf_tracker.domain.models import (
    AppendStatus,
    HistoryFilter,
    ReconcileSource,
    Snapshot,
)
from etf_tracker.domain.views import AppendResult, ReconcileResult
from etf_tracker.repositories.history_codec import decode_series, encode_series
from etf_tracker.repositories.protocols import KeyValueStore, RemoteHistoryStore
from etf_tracker.services.market_clock import DEFAULT_HOURS, SessionHours, most_recent_open

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
DEFAULT_WRITE_DEDUPE_SECONDS = 30
DEFAULT_CLEANUP_DEDUPE_SECONDS = 60
DEFAULT_MAX_POINTS = 1000
DEFAULT_CACHE_KEY = "portfolioHistory"

_FILTER_SPANS = {
    HistoryFilter.LAST_5_DAYS: timedelta(days=5),
    HistoryFilter.LAST_MONTH: timedelta(days=30),
}


def _money(value: Union[Decimal, float, int]) -> Decimal:
    return Decimal(str(value)).quantize(CENT)


def normalize_series(series: Iterable[Snapshot]) -> list[Snapshot]:
    """
    Persisted form of a series: no transient points, chronological order,
    at most one static seed and nothing before it.
    """
    ordered = sorted((s for s in series if not s.is_transient), key=Snapshot.sort_key)
    seed = next((s for s in ordered if s.is_static), None)
    if seed is None:
        return ordered

    result = [seed]
    dropped = 0
    for snapshot in ordered:
        if snapshot.is_static:
            if snapshot is not seed:
                dropped += 1
            continue
        if snapshot.timestamp < seed.timestamp:
            dropped += 1
            continue
        result.append(snapshot)
    if dropped:
        logger.warning("Dropped %d history point(s) inconsistent with the static seed", dropped)
    return result


def view_filtered(
    series: Iterable[Snapshot],
    history_filter: HistoryFilter,
    now: datetime,
    current_value: Optional[Union[Decimal, float]] = None,
    tz: pytz.BaseTzInfo = EASTERN_TZ,
) -> list[Snapshot]:
    """
    Chart points for a time range, oldest first.

    When current_value differs from the last point by more than a cent (or
    the range is empty) a transient "now" point is appended. It is for
    display only and must never be written back.
    """
    history_filter = HistoryFilter(history_filter)
    local_now = to_zone(now, tz)

    if history_filter == HistoryFilter.TODAY:
        start = tz.localize(datetime.combine(local_now.date(), time(0, 0)))
    elif history_filter in _FILTER_SPANS:
        start = local_now - _FILTER_SPANS[history_filter]
    else:
        start = None

    points = sorted(
        (s for s in series if not s.is_transient and (start is None or s.timestamp >= start)),
        key=Snapshot.sort_key,
    )

    if current_value is not None:
        current = Decimal(str(current_value))
        if not points or abs(current - points[-1].value) > CENT:
            points.append(Snapshot(timestamp=local_now, value=current, is_transient=True))
    return points


class HistoryLedger:
    """
    Append-only, deduplicated value history with local/remote reconciliation.

    Not thread-safe on its own; DashboardSession serializes callers.
    """

    def __init__(
        self,
        local_store: KeyValueStore,
        remote_store: Optional[RemoteHistoryStore] = None,
        hours: SessionHours = DEFAULT_HOURS,
        write_dedupe_seconds: float = DEFAULT_WRITE_DEDUPE_SECONDS,
        cleanup_dedupe_seconds: float = DEFAULT_CLEANUP_DEDUPE_SECONDS,
        max_points: int = DEFAULT_MAX_POINTS,
        cache_key: str = DEFAULT_CACHE_KEY,
        executor: Optional[Executor] = None,
    ):
        self._local = local_store
        self._remote = remote_store
        self._hours = hours
        self._write_window = timedelta(seconds=write_dedupe_seconds)
        self._cleanup_window = cleanup_dedupe_seconds
        self._max_points = max_points
        self._cache_key = cache_key
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="history-sync")
        self._series: list[Snapshot] = []

    @property
    def series(self) -> list[Snapshot]:
        """Copy of the persisted series, oldest first."""
        return list(self._series)

    @property
    def static_seed(self) -> Optional[Snapshot]:
        return next((s for s in self._series if s.is_static), None)

    def real_points(self) -> list[Snapshot]:
        return [s for s in self._series if not s.is_static]

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def reconcile(
        self,
        prev_close_value: Optional[Union[Decimal, float]] = None,
        now: Optional[datetime] = None,
    ) -> ReconcileResult:
        """
        Load the series: remote if non-empty, else local, else a fresh seed.

        While fewer than two real points exist, the static seed is re-based
        on the most recent open and prev_close_value. It never moves past a
        real point from an earlier session; only its value changes then.
        """
        remote = self._load_remote()
        if remote:
            source = ReconcileSource.REMOTE
            series = normalize_series(remote)
        else:
            local = self._read_local()
            if local:
                source = ReconcileSource.LOCAL
                series = normalize_series(local)
            else:
                source = ReconcileSource.SEEDED
                series = []

        if source == ReconcileSource.SEEDED:
            if prev_close_value is None or now is None:
                raise ValueError("Seeding an empty history requires prev_close_value and now")
            series = [self._make_seed(prev_close_value, now)]
        elif prev_close_value is not None and now is not None:
            series = self._rebase_seed(series, prev_close_value, now)

        self._series = series
        self._write_local(series)
        # Remote already matches unless it was empty/unreachable or the seed moved
        if source != ReconcileSource.REMOTE or series != normalize_series(remote):
            self._save_remote_async(series)

        logger.info("History reconciled from %s: %d point(s)", source.value, len(series))
        return ReconcileResult(source=source, series=list(series))

    def _make_seed(self, value: Union[Decimal, float], now: datetime) -> Snapshot:
        return Snapshot(timestamp=most_recent_open(now, self._hours), value=_money(value), is_static=True)

    def _rebase_seed(
        self,
        series: list[Snapshot],
        prev_close_value: Union[Decimal, float],
        now: datetime,
    ) -> list[Snapshot]:
        real = [s for s in series if not s.is_static]
        if len(real) >= 2:
            return series
        seed = self._make_seed(prev_close_value, now)
        if real and real[0].timestamp < seed.timestamp:
            # Never ahead of a persisted real point
            old_seed = next((s for s in series if s.is_static), None)
            anchor = old_seed.timestamp if old_seed is not None else real[0].timestamp
            seed = Snapshot(timestamp=anchor, value=seed.value, is_static=True)
        return normalize_series([seed] + real)

    def _load_remote(self) -> Optional[list[Snapshot]]:
        if self._remote is None:
            return None
        try:
            return self._remote.load()
        except RemoteUnavailable as exc:
            logger.warning("Remote history unavailable, using local cache: %s", exc.message)
            return None

    def _read_local(self) -> list[Snapshot]:
        text = self._local.get(self._cache_key)
        if not text:
            return []
        try:
            return decode_series(text, self._cache_key)
        except StorageCorrupt as exc:
            logger.warning("Clearing corrupted local history: %s", exc.message)
            self._local.delete(self._cache_key)
            return []

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def append_snapshot(self, value: Union[Decimal, float], at: datetime) -> AppendResult:
        """
        Record a valuation observed at `at`.

        Discarded when another real point lies within the write dedupe
        window or when `at` does not follow the static seed. Otherwise
        appended, trimmed to capacity, persisted locally, then pushed to
        the remote store in the background.
        """
        if isinstance(value, Snapshot):
            raise ValueError("append_snapshot takes a value, not a Snapshot")
        at = to_zone(at, self._hours.tz)

        seed = self.static_seed
        if seed is not None and at <= seed.timestamp:
            return AppendResult(status=AppendStatus.DISCARDED, reason="not after static seed")
        for existing in self._series:
            if existing.is_static:
                continue
            if abs(existing.timestamp - at) < self._write_window:
                return AppendResult(status=AppendStatus.DISCARDED, reason="duplicate within dedupe window")

        snapshot = Snapshot(timestamp=at, value=_money(value))
        series = normalize_series(self._series + [snapshot])

        evicted = []
        while len(series) > self._max_points:
            oldest = next((s for s in series if not s.is_static), None)
            if oldest is None:
                break
            series.remove(oldest)
            evicted.append(oldest)

        self._series = series
        self._write_local(series)
        self._save_remote_async(series)

        status = AppendStatus.OLDEST_EVICTED if evicted else AppendStatus.RETAINED
        return AppendResult(status=status, snapshot=snapshot, evicted=evicted)

    def deduplicate(self, window_seconds: Optional[float] = None) -> list[Snapshot]:
        """
        Keep the first point of every time bucket (width = window).

        The static seed is always kept. Applying this to its own output
        changes nothing. The cleaned series is written to both stores.
        """
        width = window_seconds or self._cleanup_window
        kept = []
        seen_buckets = set()
        for snapshot in normalize_series(self._series):
            if snapshot.is_static:
                kept.append(snapshot)
                continue
            bucket = int(snapshot.timestamp.timestamp() // width)
            if bucket in seen_buckets:
                continue
            seen_buckets.add(bucket)
            kept.append(snapshot)

        removed = len(self._series) - len(kept)
        if removed:
            logger.info("Removed %d duplicate history point(s)", removed)
        self._series = kept
        self._write_local(kept)
        self._save_remote_async(kept)
        return list(kept)

    def view(
        self,
        history_filter: HistoryFilter,
        now: datetime,
        current_value: Optional[Union[Decimal, float]] = None,
    ) -> list[Snapshot]:
        """view_filtered over this ledger's series in the session time zone."""
        return view_filtered(self._series, history_filter, now, current_value, tz=self._hours.tz)

    def _write_local(self, series: list[Snapshot]) -> None:
        self._local.set(self._cache_key, encode_series(series))

    def _save_remote_async(self, series: list[Snapshot]) -> None:
        if self._remote is None:
            return
        self._executor.submit(self._save_remote, list(series))

    def _save_remote(self, series: list[Snapshot]) -> bool:
        try:
            ok = self._remote.save(series)
        except Exception:
            logger.exception("Remote history save raised")
            return False
        if not ok:
            logger.warning("Remote history save failed; local copy kept (%d points)", len(series))
        return ok

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)
