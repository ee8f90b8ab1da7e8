"""Market data providers module."""

from etf_tracker.providers.market_data_provider import MarketDataProvider
from etf_tracker.providers.stub_provider import StubMarketDataProvider
from etf_tracker.providers.yfinance_provider import YFinanceProvider
from etf_tracker.providers.proxy_provider import ProxyMarketDataProvider

__all__ = [
    "MarketDataProvider",
    "StubMarketDataProvider",
    "YFinanceProvider",
    "ProxyMarketDataProvider",
]
