"""View models for market data returned by the quote gateway."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Quote:
    """Current price and change from previous close for one ticker."""

    ticker: str
    current_price: Decimal
    day_change_per_share: Decimal
    as_of: Optional[datetime] = None

    @property
    def previous_close(self) -> Decimal:
        return self.current_price - self.day_change_per_share


@dataclass(frozen=True)
class Article:
    """Company news article; published_at is unix seconds."""

    headline: str
    source: str
    url: str
    published_at: int
    ticker: Optional[str] = None
