"""Holding and Portfolio domain models."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class Holding:
    """
    One tracked ticker in the basket.

    Created once from the equal-weight allocation; mutated only by
    trades and quote refreshes.
    """

    ticker: str
    display_name: str
    share_count: Decimal
    current_price: Decimal
    day_change_per_share: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def previous_close(self) -> Decimal:
        return self.current_price - self.day_change_per_share

    @property
    def market_value(self) -> Decimal:
        return self.share_count * self.current_price


@dataclass
class Portfolio:
    """
    Cash plus a fixed set of holdings keyed by ticker.

    IMPORTANT: cash only changes by the signed value of an accepted trade.
    """

    holdings: dict[str, Holding] = field(default_factory=dict)
    cash: Decimal = field(default_factory=lambda: Decimal("0"))
    initial_investment: Decimal = field(default_factory=lambda: Decimal("0"))

    def get(self, ticker: str) -> Optional[Holding]:
        return self.holdings.get(ticker.upper())

    @property
    def tickers(self) -> list[str]:
        """Tickers in stable (sorted) order."""
        return sorted(self.holdings)

    def total_value(self) -> Decimal:
        """Cash plus the market value of every holding at current prices."""
        return self.cash + sum((h.market_value for h in self.holdings.values()), Decimal("0"))
