"""
Pytest configuration and fixtures for the ETF tracker tests.

This module provides:
- In-memory SQLite database fixtures
- Deterministic and failing market data providers
- An in-memory remote history store and an inline executor
- Time helpers for Eastern timezone
- Service fixtures and the FastAPI test client
"""

import threading
from concurrent.futures import Executor, Future
from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from etf_tracker.main import app
from etf_tracker.api.deps import get_market_provider, get_proxy_cache
from etf_tracker.repositories.sqlalchemy.database import Base, get_db
# Import ORM models to register them with Base before creating tables
from etf_tracker.repositories.sqlalchemy import orm_models  # noqa: F401
from etf_tracker.repositories.sqlalchemy import SqlAlchemyKeyValueStore
from etf_tracker.core.exceptions import RemoteUnavailable
from etf_tracker.core.timezone import EASTERN_TZ
from etf_tracker.config.settings import Settings, reset_settings
from etf_tracker.domain.models import Snapshot
from etf_tracker.domain.views import Article, Quote
from etf_tracker.services import HistoryLedger, PortfolioStore, QuoteGateway, TtlCache


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests (Wednesday, mid-session)."""
    return eastern_datetime(2024, 6, 12, 14, 30, 0)


def quote(ticker: str, price: str, change: str) -> Quote:
    """Build a Quote from string amounts."""
    return Quote(ticker=ticker, current_price=Decimal(price), day_change_per_share=Decimal(change))


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def kv_store(test_session) -> SqlAlchemyKeyValueStore:
    """Provide test KeyValueStore (local history cache)."""
    return SqlAlchemyKeyValueStore(test_session)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Quotes are (price, change) pairs; every call is counted.
    """

    FIXED_QUOTES = {
        "AAA": (Decimal("110"), Decimal("10")),   # prev close 100
        "BBB": (Decimal("45"), Decimal("-5")),    # prev close 50
        "CCC": (Decimal("20"), Decimal("0")),     # prev close 20
    }

    def __init__(self, quotes: Optional[dict[str, tuple[Decimal, Decimal]]] = None):
        self.quotes = dict(quotes if quotes is not None else self.FIXED_QUOTES)
        self.news: dict[str, list[Article]] = {}
        self.quote_calls: list[str] = []
        self.news_calls: list[str] = []
        self._lock = threading.Lock()

    def get_quote(self, ticker: str) -> Quote:
        with self._lock:
            self.quote_calls.append(ticker)
        if ticker not in self.quotes:
            raise KeyError(f"No quote for {ticker}")
        price, change = self.quotes[ticker]
        return Quote(ticker=ticker, current_price=price, day_change_per_share=change)

    def get_news(self, ticker: str) -> list[Article]:
        with self._lock:
            self.news_calls.append(ticker)
        return list(self.news.get(ticker, []))


class FailingMarketProvider:
    """Market provider that always raises an exception."""

    def get_quote(self, ticker: str) -> Quote:
        raise ConnectionError("Network unavailable")

    def get_news(self, ticker: str) -> list[Article]:
        raise ConnectionError("Network unavailable")


@pytest.fixture
def deterministic_provider() -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a market provider that always fails."""
    return FailingMarketProvider()


# =============================================================================
# HISTORY FIXTURES
# =============================================================================


class ImmediateExecutor(Executor):
    """Executor that runs submitted work inline, for deterministic remote sync."""

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class InMemoryRemoteHistoryStore:
    """Remote history store double with switchable failures."""

    def __init__(self, series: Optional[list[Snapshot]] = None):
        self.series = list(series or [])
        self.fail_load = False
        self.fail_save = False
        self.saves: list[list[Snapshot]] = []

    def load(self) -> list[Snapshot]:
        if self.fail_load:
            raise RemoteUnavailable("remote down")
        return list(self.series)

    def save(self, series: list[Snapshot]) -> bool:
        self.saves.append(list(series))
        if self.fail_save:
            return False
        self.series = list(series)
        return True


@pytest.fixture
def remote_store() -> InMemoryRemoteHistoryStore:
    return InMemoryRemoteHistoryStore()


@pytest.fixture
def ledger(kv_store, remote_store) -> HistoryLedger:
    """Provide HistoryLedger with inline remote sync."""
    return HistoryLedger(
        local_store=kv_store,
        remote_store=remote_store,
        executor=ImmediateExecutor(),
    )


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def portfolio_store() -> PortfolioStore:
    return PortfolioStore()


@pytest.fixture
def quote_gateway(deterministic_provider) -> QuoteGateway:
    """Provide QuoteGateway over the deterministic provider."""
    gateway = QuoteGateway(provider=deterministic_provider, fetch_timeout_seconds=5)
    yield gateway
    gateway.close()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Small three-ticker basket with an isolated data dir."""
    return Settings(
        basket={"AAA": "Alpha Corp", "BBB": "Beta Inc", "CCC": "Gamma Ltd"},
        initial_investment=9000,
        data_dir=tmp_path,
        market_provider="stub",
    )


# =============================================================================
# API FIXTURES
# =============================================================================


@pytest.fixture
def client(test_engine, deterministic_provider) -> TestClient:
    """Provide FastAPI test client with test database, provider and a fresh proxy cache."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    cache = TtlCache()

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_market_provider] = lambda: deterministic_provider
    app.dependency_overrides[get_proxy_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()
