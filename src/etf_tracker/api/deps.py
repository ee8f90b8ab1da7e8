"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from etf_tracker.config.settings import get_settings
from etf_tracker.providers import StubMarketDataProvider, YFinanceProvider
from etf_tracker.providers.market_data_provider import MarketDataProvider
from etf_tracker.repositories.sqlalchemy import SqlAlchemyKeyValueStore
from etf_tracker.repositories.sqlalchemy.database import get_db
from etf_tracker.services.ttl_cache import TtlCache

# Proxy cache lives for the process lifetime
_proxy_cache: Optional[TtlCache] = None
_provider: Optional[MarketDataProvider] = None


def get_proxy_cache() -> TtlCache:
    """Provide the process-wide proxy cache."""
    global _proxy_cache
    if _proxy_cache is None:
        _proxy_cache = TtlCache()
    return _proxy_cache


def get_market_provider() -> MarketDataProvider:
    """Provide the upstream provider selected in settings."""
    global _provider
    if _provider is None:
        settings = get_settings()
        if settings.market_provider.lower() == "stub":
            _provider = StubMarketDataProvider()
        else:
            _provider = YFinanceProvider(news_lookback_days=settings.news_lookback_days)
    return _provider


def get_kv_store(db: Session = Depends(get_db)) -> SqlAlchemyKeyValueStore:
    """Provide KeyValueStore instance for the server-side history copy."""
    return SqlAlchemyKeyValueStore(db)
