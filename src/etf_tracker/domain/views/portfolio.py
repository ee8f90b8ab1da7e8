"""View models for valuation and trade outputs."""

from dataclasses import dataclass, field
from decimal import Decimal

from etf_tracker.domain.models.enums import TradeSide


@dataclass
class HoldingValuation:
    """Derived metrics for a single holding."""

    ticker: str
    share_count: Decimal
    current_price: Decimal
    day_change_per_share: Decimal
    market_value: Decimal
    day_change_value: Decimal
    weight: Decimal
    day_change_percent: Decimal


@dataclass
class ValuationResult:
    """Portfolio totals recomputed from current holding state."""

    value_at_prev_close: Decimal
    total_day_change: Decimal
    total_value: Decimal
    cash: Decimal
    holdings: dict[str, HoldingValuation] = field(default_factory=dict)


@dataclass
class TradeResult:
    """An accepted trade and the resulting position."""

    ticker: str
    side: TradeSide
    shares: Decimal
    price: Decimal
    trade_value: Decimal
    cash_after: Decimal
    shares_after: Decimal
