"""
Provider that reads quotes and news through the backend proxy over HTTP.
This is the dashboard's view of the market: GET /quote/{ticker}, GET /news/{ticker}.
"""

from decimal import Decimal
from typing import Optional

import httpx

from etf_tracker.core.exceptions import DataUnavailable
from etf_tracker.core.timezone import now_eastern
from etf_tracker.domain.views import Article, Quote

DEFAULT_TIMEOUT_SECONDS = 10.0


def _first(payload: dict, *keys: str):
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


class ProxyMarketDataProvider:
    """httpx client for the caching proxy."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout_seconds)

    def get_quote(self, ticker: str) -> Quote:
        """
        Fetch one quote. A zeroed or error-marked payload is treated as
        unavailable data, never as a zero price.
        """
        symbol = ticker.upper()
        response = self._client.get(f"/quote/{symbol}")
        payload = response.json() if response.content else {}
        if not isinstance(payload, dict) or payload.get("error") or response.is_error:
            raise DataUnavailable([symbol])
        price = _first(payload, "price", "c")
        change = _first(payload, "changeFromPrevClose", "d")
        if price is None or change is None or (price == 0 and change == 0):
            raise DataUnavailable([symbol])
        return Quote(
            ticker=symbol,
            current_price=Decimal(str(price)),
            day_change_per_share=Decimal(str(change)),
            as_of=now_eastern(),
        )

    def get_news(self, ticker: str) -> list[Article]:
        """Fetch company news; the proxy answers [] with an error status when upstream fails."""
        symbol = ticker.upper()
        response = self._client.get(f"/news/{symbol}")
        response.raise_for_status()
        articles = []
        for item in response.json() or []:
            if not isinstance(item, dict) or not item.get("headline"):
                continue
            articles.append(
                Article(
                    headline=item["headline"],
                    source=item.get("source") or "",
                    url=item.get("url") or "",
                    published_at=int(_first(item, "publishedAt", "datetime") or 0),
                    ticker=symbol,
                )
            )
        return articles

    def close(self) -> None:
        self._client.close()
