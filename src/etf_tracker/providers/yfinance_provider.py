"""
Upstream provider backed by Yahoo Finance via yfinance.
Used by the backend proxy; every call hits the network.
"""

from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from dateutil import parser as date_parser

from etf_tracker.core.timezone import now_eastern
from etf_tracker.domain.views import Article, Quote


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(float(value)))
    except (TypeError, ValueError, InvalidOperation):
        return None


def _article_from_item(item: dict, ticker: str) -> Optional[Article]:
    """
    Normalize one yfinance news item. Handles both the flat layout
    (title/publisher/link/providerPublishTime) and the nested "content" layout.
    """
    content = item.get("content")
    if isinstance(content, dict):
        headline = content.get("title")
        source = (content.get("provider") or {}).get("displayName") or ""
        url = (content.get("canonicalUrl") or content.get("clickThroughUrl") or {}).get("url") or ""
        pub_date = content.get("pubDate") or content.get("displayTime")
        try:
            published_at = int(date_parser.parse(pub_date).timestamp()) if pub_date else 0
        except (ValueError, OverflowError):
            published_at = 0
    else:
        headline = item.get("title")
        source = item.get("publisher") or ""
        url = item.get("link") or ""
        published_at = int(item.get("providerPublishTime") or 0)
    if not headline:
        return None
    return Article(headline=headline, source=source, url=url, published_at=published_at, ticker=ticker)


class YFinanceProvider:
    """Fetches quotes and company news from Yahoo Finance."""

    def __init__(self, news_lookback_days: int = 30):
        self._news_lookback = timedelta(days=news_lookback_days)

    def get_quote(self, ticker: str) -> Quote:
        """
        Return current price and change from previous close.
        Raises ValueError when Yahoo returns no usable price.
        """
        symbol = ticker.upper()
        info = _get_yf().Ticker(symbol).info
        if not isinstance(info, dict):
            raise ValueError(f"No quote info for {symbol}")
        # Price: currentPrice preferred, then regularMarketPrice
        price = _to_decimal(info.get("currentPrice"))
        if price is None:
            price = _to_decimal(info.get("regularMarketPrice"))
        prev_close = _to_decimal(info.get("previousClose") or info.get("regularMarketPreviousClose"))
        if price is None or prev_close is None:
            raise ValueError(f"Incomplete quote for {symbol}")
        return Quote(
            ticker=symbol,
            current_price=price,
            day_change_per_share=price - prev_close,
            as_of=now_eastern(),
        )

    def get_news(self, ticker: str) -> list[Article]:
        """Return news from the lookback window, newest first."""
        symbol = ticker.upper()
        items = _get_yf().Ticker(symbol).news or []
        cutoff = int((now_eastern() - self._news_lookback).timestamp())
        articles = []
        for item in items:
            if not isinstance(item, dict):
                continue
            article = _article_from_item(item, symbol)
            if article is not None and article.published_at >= cutoff:
                articles.append(article)
        articles.sort(key=lambda a: a.published_at, reverse=True)
        return articles
