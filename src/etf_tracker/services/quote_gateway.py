"""
Quote gateway: batch fetch of quotes and news for the basket.

Requests fan out concurrently and join before returning. The join is
all-or-nothing: one failing ticker fails the whole batch with
DataUnavailable and the caller decides the fallback.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Iterable, Optional, TypeVar

from etf_tracker.core.exceptions import DataUnavailable
from etf_tracker.domain.views import Article, Quote
from etf_tracker.providers.market_data_provider import MarketDataProvider
from etf_tracker.services.ttl_cache import TtlCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_QUOTE_TTL_SECONDS = 5 * 60
DEFAULT_NEWS_TTL_SECONDS = 60 * 60
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0

QUOTE = "quote"
NEWS = "news"


def _normalize(tickers: Iterable[str]) -> list[str]:
    seen = []
    for t in tickers:
        key = (t or "").strip().upper()
        if key and key not in seen:
            seen.append(key)
    return seen


class QuoteGateway:
    """
    Wraps a MarketDataProvider with a bounded-age cache and concurrent batching.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        quote_ttl_seconds: float = DEFAULT_QUOTE_TTL_SECONDS,
        news_ttl_seconds: float = DEFAULT_NEWS_TTL_SECONDS,
        fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        max_workers: int = 8,
        cache: Optional[TtlCache] = None,
    ):
        self._provider = provider
        self._quote_ttl = quote_ttl_seconds
        self._news_ttl = news_ttl_seconds
        self._timeout = fetch_timeout_seconds
        self._cache = cache or TtlCache()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="quote-gateway")

    def fetch_quotes(self, tickers: Iterable[str]) -> dict[str, Quote]:
        """
        Return ticker -> Quote for every requested ticker.

        Raises DataUnavailable if any ticker fails, times out, or comes back
        with a non-positive price.
        """
        return self._fetch_batch(QUOTE, _normalize(tickers), self._fetch_quote, self._quote_ttl)

    def fetch_news(self, tickers: Iterable[str]) -> list[Article]:
        """Return the concatenated news of every ticker (provider order per ticker)."""
        per_ticker = self._fetch_batch(NEWS, _normalize(tickers), self._provider.get_news, self._news_ttl)
        articles: list[Article] = []
        for items in per_ticker.values():
            articles.extend(items)
        return articles

    def _fetch_quote(self, ticker: str) -> Quote:
        quote = self._provider.get_quote(ticker)
        if quote.current_price <= 0:
            raise DataUnavailable([ticker])
        return quote

    def _fetch_batch(
        self,
        kind: str,
        tickers: list[str],
        fetch: Callable[[str], T],
        ttl: float,
    ) -> dict[str, T]:
        if not tickers:
            return {}

        result: dict[str, T] = {}
        futures: dict[str, Future] = {}
        for ticker in tickers:
            cached = self._cache.get((kind, ticker), ttl)
            if cached is not None:
                result[ticker] = cached
            else:
                futures[ticker] = self._executor.submit(fetch, ticker)

        if not futures:
            return result

        done, not_done = wait(futures.values(), timeout=self._timeout)
        failed = []
        fetched: dict[str, T] = {}
        for ticker, future in futures.items():
            if future in not_done:
                future.cancel()
                logger.warning("Timed out fetching %s for %s", kind, ticker)
                failed.append(ticker)
                continue
            try:
                fetched[ticker] = future.result()
            except Exception as exc:
                logger.warning("Failed to fetch %s for %s: %s", kind, ticker, exc)
                failed.append(ticker)

        # Successful sub-requests are cached even when the batch fails
        for ticker, value in fetched.items():
            self._cache.set((kind, ticker), value)

        if failed:
            raise DataUnavailable(failed, kind=kind)

        result.update(fetched)
        return {t: result[t] for t in tickers}

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
