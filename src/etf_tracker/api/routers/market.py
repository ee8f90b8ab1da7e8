"""Caching proxy for the upstream market-data provider: GET /quote/{ticker}, GET /news/{ticker}."""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from etf_tracker.api.deps import get_market_provider, get_proxy_cache
from etf_tracker.api.schemas.market import NewsItem, QuotePayload
from etf_tracker.config.settings import get_settings
from etf_tracker.providers.market_data_provider import MarketDataProvider
from etf_tracker.services.ttl_cache import TtlCache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["market"])


def _quote_payload(price: Decimal, change: Decimal) -> QuotePayload:
    prev_close = price - change
    percent = float(change / prev_close * 100) if prev_close != 0 else 0.0
    return QuotePayload(c=float(price), d=float(change), dp=round(percent, 4))


@router.get("/quote/{ticker}", response_model=QuotePayload)
def get_quote(
    ticker: str,
    provider: MarketDataProvider = Depends(get_market_provider),
    cache: TtlCache = Depends(get_proxy_cache),
):
    """
    Return {c, d, dp} for ticker, cached for the quote TTL.

    Upstream failures answer 500 with a zeroed payload carrying an error
    marker; zeroed upstream results are passed through but not cached.
    """
    symbol = ticker.strip().upper()
    key = ("quote", symbol)
    cached = cache.get(key, get_settings().quote_cache_ttl_seconds)
    if cached is not None:
        return cached

    try:
        quote = provider.get_quote(symbol)
    except Exception as exc:
        logger.error("Failed to fetch quote for %s: %s", symbol, exc)
        fallback = QuotePayload(c=0, d=0, dp=0, error="Failed to fetch quote")
        return JSONResponse(status_code=500, content=fallback.model_dump())

    payload = _quote_payload(quote.current_price, quote.day_change_per_share)
    if payload.c == 0 and payload.d == 0:
        return payload
    cache.set(key, payload)
    return payload


@router.get("/news/{ticker}", response_model=list[NewsItem])
def get_news(
    ticker: str,
    provider: MarketDataProvider = Depends(get_market_provider),
    cache: TtlCache = Depends(get_proxy_cache),
):
    """Return recent company news for ticker, cached for the news TTL; [] on upstream failure."""
    symbol = ticker.strip().upper()
    key = ("news", symbol)
    cached = cache.get(key, get_settings().news_cache_ttl_seconds)
    if cached is not None:
        return cached

    try:
        articles = provider.get_news(symbol)
    except Exception as exc:
        logger.error("Failed to fetch news for %s: %s", symbol, exc)
        return JSONResponse(status_code=500, content=[])

    items = [
        NewsItem(
            headline=a.headline,
            source=a.source,
            url=a.url,
            datetime=a.published_at,
            related=symbol,
        )
        for a in articles
    ]
    cache.set(key, items)
    return items
