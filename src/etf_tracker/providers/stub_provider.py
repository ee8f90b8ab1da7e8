"""Stub market data provider for offline/testing use."""

import random
from decimal import Decimal

from etf_tracker.core.timezone import now_eastern
from etf_tracker.domain.views import Article, Quote


# Deterministic fake (last_price, prev_close) for the default basket
_STUB_PRICES: dict[str, tuple[Decimal, Decimal]] = {
    "GOOGL": (Decimal("142.75"), Decimal("141.50")),
    "AMZN": (Decimal("178.50"), Decimal("177.25")),
    "AMGN": (Decimal("301.20"), Decimal("303.05")),
    "BA": (Decimal("181.40"), Decimal("179.90")),
    "CAT": (Decimal("352.10"), Decimal("349.75")),
    "JNJ": (Decimal("156.30"), Decimal("156.80")),
    "NEE": (Decimal("74.15"), Decimal("73.60")),
    "NKE": (Decimal("76.40"), Decimal("77.10")),
    "NOC": (Decimal("478.90"), Decimal("475.20")),
    "RMD": (Decimal("241.35"), Decimal("239.00")),
    "RIVN": (Decimal("12.85"), Decimal("13.10")),
    "RTX": (Decimal("123.60"), Decimal("122.95")),
    "SWK": (Decimal("88.20"), Decimal("87.40")),
    "SYK": (Decimal("361.75"), Decimal("359.10")),
    "TGT": (Decimal("148.05"), Decimal("149.30")),
    "VZ": (Decimal("41.10"), Decimal("40.95")),
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Uses predefined prices for the default basket; generates seeded random prices for unknown tickers.
    """

    def __init__(self, seed: int = 42):
        """Initialize with optional random seed for reproducibility."""
        self._rng = random.Random(seed)
        self._generated: dict[str, tuple[Decimal, Decimal]] = {}

    def get_quote(self, ticker: str) -> Quote:
        """Return a stub quote for ticker."""
        symbol = ticker.upper()
        last_price, prev_close = self._prices_for(symbol)
        return Quote(
            ticker=symbol,
            current_price=last_price,
            day_change_per_share=last_price - prev_close,
            as_of=now_eastern(),
        )

    def get_news(self, ticker: str) -> list[Article]:
        """Return a single placeholder article per ticker."""
        symbol = ticker.upper()
        published = int(now_eastern().timestamp())
        return [
            Article(
                headline=f"{symbol} trades in line with the market",
                source="Stub Wire",
                url=f"https://example.com/news/{symbol.lower()}",
                published_at=published,
                ticker=symbol,
            )
        ]

    def _prices_for(self, symbol: str) -> tuple[Decimal, Decimal]:
        if symbol in _STUB_PRICES:
            return _STUB_PRICES[symbol]
        if symbol not in self._generated:
            base_price = Decimal(str(50 + self._rng.random() * 200))
            last_price = base_price.quantize(Decimal("0.01"))
            change_pct = Decimal(str((self._rng.random() - 0.5) * 0.04))
            prev_close = (last_price / (1 + change_pct)).quantize(Decimal("0.01"))
            self._generated[symbol] = (last_price, prev_close)
        return self._generated[symbol]
