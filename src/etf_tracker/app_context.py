"""Dashboard session: the session-scoped context object.

Owns the portfolio, the history ledger and the quote gateway for one
dashboard session, and serializes every portfolio mutation behind a
single lock so trades never interleave with a revaluation.
"""

import logging
import threading
from concurrent.futures import Executor
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Union

from etf_tracker.config.settings import Settings, get_settings
from etf_tracker.core.exceptions import DataUnavailable, InsufficientData
from etf_tracker.domain.models import HistoryFilter, Portfolio, TradeSide
from etf_tracker.domain.views import (
    Article,
    DashboardView,
    Quote,
    ReconcileResult,
    TradeResult,
    ValuationResult,
)
from etf_tracker.providers.market_data_provider import MarketDataProvider
from etf_tracker.providers.proxy_provider import ProxyMarketDataProvider
from etf_tracker.repositories.protocols import KeyValueStore, RemoteHistoryStore
from etf_tracker.repositories.remote import HttpRemoteHistoryStore
from etf_tracker.repositories.sqlalchemy import SqlAlchemyKeyValueStore
from etf_tracker.repositories.sqlalchemy.database import open_session_at
from etf_tracker.services import (
    HistoryLedger,
    PortfolioStore,
    QuoteGateway,
    SessionHours,
    SnapshotScheduler,
    parse_trade_shares,
    parse_trade_side,
)
from etf_tracker.services.market_clock import is_within_session
from etf_tracker.services.presentation import build_dashboard, latest_news

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class DashboardSession:
    """
    In-process access to the whole dashboard for one session.

    Flow: quotes -> portfolio revaluation -> history snapshot -> view model.
    """

    def __init__(
        self,
        settings: Settings,
        provider: MarketDataProvider,
        local_store: KeyValueStore,
        remote_store: Optional[RemoteHistoryStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
        sync_executor: Optional[Executor] = None,
    ):
        self._settings = settings
        self._hours = SessionHours.from_settings(settings)
        self._clock = clock or (lambda: datetime.now(self._hours.tz))
        self._basket = {t.upper(): name for t, name in settings.basket.items()}
        self._lock = threading.RLock()
        self._scheduler: Optional[SnapshotScheduler] = None
        self._last_valuation: Optional[ValuationResult] = None
        self._clients = [provider, remote_store]

        self._gateway = QuoteGateway(
            provider=provider,
            quote_ttl_seconds=settings.quote_cache_ttl_seconds,
            news_ttl_seconds=settings.news_cache_ttl_seconds,
            fetch_timeout_seconds=settings.fetch_timeout_seconds,
            max_workers=settings.fetch_max_workers,
        )
        self._store = PortfolioStore()
        self._ledger = HistoryLedger(
            local_store=local_store,
            remote_store=remote_store,
            hours=self._hours,
            write_dedupe_seconds=settings.history_write_dedupe_seconds,
            cleanup_dedupe_seconds=settings.history_cleanup_dedupe_seconds,
            max_points=settings.history_max_points,
            cache_key=settings.history_cache_key,
            executor=sync_executor,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DashboardSession":
        """Wire the session against the backend proxy and a local SQLite cache."""
        settings = settings or get_settings()
        provider = ProxyMarketDataProvider(settings.api_base_url, settings.fetch_timeout_seconds)
        local_store = SqlAlchemyKeyValueStore(open_session_at(settings.get_local_cache_path()))
        remote_store = HttpRemoteHistoryStore(settings.api_base_url, settings.fetch_timeout_seconds)
        return cls(settings, provider, local_store, remote_store)

    # Accessors
    @property
    def portfolio(self) -> Portfolio:
        return self._store.portfolio

    @property
    def ledger(self) -> HistoryLedger:
        return self._ledger

    @property
    def gateway(self) -> QuoteGateway:
        return self._gateway

    @property
    def scheduler(self) -> Optional[SnapshotScheduler]:
        return self._scheduler

    @property
    def last_valuation(self) -> Optional[ValuationResult]:
        return self._last_valuation

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or self._clock()

    # Session lifecycle
    def start(self, now: Optional[datetime] = None) -> ReconcileResult:
        """
        Build the basket, load history and record the opening snapshot.

        Raises InsufficientData when no ticker can be priced.
        """
        now = self._now(now)
        with self._lock:
            quotes = self._initial_quotes()
            self._store.initialize(quotes, self._settings.initial_investment, names=self._basket)
            valuation = self._store.revalue()
            self._last_valuation = valuation

            result = self._ledger.reconcile(valuation.value_at_prev_close, now)
            self._ledger.deduplicate()
            if is_within_session(now, self._hours):
                self._ledger.append_snapshot(valuation.total_value, now)
        return result

    def _initial_quotes(self) -> dict[str, Quote]:
        tickers = list(self._basket)
        try:
            return self._gateway.fetch_quotes(tickers)
        except DataUnavailable as exc:
            remaining = [t for t in tickers if t not in exc.tickers]
            logger.warning("Excluding %s from the basket: %s", ", ".join(exc.tickers), exc.message)
        if not remaining:
            raise InsufficientData("No quotes available for any ticker in the basket")
        try:
            return self._gateway.fetch_quotes(remaining)
        except DataUnavailable as exc:
            raise InsufficientData(f"Quotes unavailable at session start: {exc.message}")

    def refresh(self, now: Optional[datetime] = None) -> ValuationResult:
        """
        Re-price the basket and record a snapshot when inside the session.

        Provider failures keep the last known prices.
        """
        now = self._now(now)
        with self._lock:
            try:
                quotes = self._gateway.fetch_quotes(self._store.portfolio.tickers)
            except DataUnavailable as exc:
                logger.warning("Revaluing with stale prices: %s", exc.message)
                quotes = None
            valuation = self._store.revalue(quotes)
            self._last_valuation = valuation
            if is_within_session(now, self._hours):
                self._ledger.append_snapshot(valuation.total_value, now)
        logger.info(
            "Portfolio value %s (day change %s)",
            valuation.total_value.quantize(CENT),
            valuation.total_day_change.quantize(CENT),
        )
        return valuation

    def trade(
        self,
        ticker: str,
        shares: Union[str, int, float],
        side: Union[TradeSide, str],
    ) -> TradeResult:
        """Validate user input, execute the trade and revalue."""
        quantity = parse_trade_shares(shares)
        with self._lock:
            result = self._store.execute_trade(ticker.strip().upper(), quantity, parse_trade_side(side))
            self._last_valuation = self._store.revalue()
        return result

    def dashboard(
        self,
        history_filter: Union[HistoryFilter, str] = HistoryFilter.ALL,
        now: Optional[datetime] = None,
    ) -> DashboardView:
        """Current view model: table rows, summary cards and chart series."""
        now = self._now(now)
        with self._lock:
            valuation = self._store.revalue()
            points = self._ledger.view(HistoryFilter(history_filter), now, valuation.total_value)
            return build_dashboard(self._store.portfolio, valuation, points, tz=self._hours.tz)

    def news(self, limit: Optional[int] = None) -> list[Article]:
        """Latest de-duplicated headlines across the basket; [] when the feed fails."""
        limit = limit or self._settings.news_limit
        try:
            articles = self._gateway.fetch_news(self._store.portfolio.tickers)
        except DataUnavailable as exc:
            logger.warning("News unavailable: %s", exc.message)
            return []
        return latest_news(articles, limit)

    # Scheduling
    def start_scheduler(self) -> SnapshotScheduler:
        """Start the recurring valuation timer in a background thread."""
        if self._scheduler is None or self._scheduler.cancelled:
            self._scheduler = SnapshotScheduler(callback=self.refresh, clock=self._clock, hours=self._hours)
            self._scheduler.arm()
            self._scheduler.start()
        return self._scheduler

    def close(self) -> None:
        """Cancel the timer, drain pending remote saves and release HTTP clients."""
        if self._scheduler is not None:
            self._scheduler.cancel()
        self._gateway.close()
        self._ledger.close()
        for client in self._clients:
            if isinstance(client, (ProxyMarketDataProvider, HttpRemoteHistoryStore)):
                client.close()
