"""Market data provider protocol."""

from typing import Protocol

from etf_tracker.domain.views import Article, Quote


class MarketDataProvider(Protocol):
    """
    Protocol for market data providers.

    Implementations fetch one ticker per call and raise on failure;
    batching, caching and degradation live in QuoteGateway.
    """

    def get_quote(self, ticker: str) -> Quote:
        """Return current price and change from previous close for ticker."""
        ...

    def get_news(self, ticker: str) -> list[Article]:
        """Return recent company news for ticker, newest first."""
        ...
