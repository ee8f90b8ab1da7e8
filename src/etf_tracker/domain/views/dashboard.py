"""Render-ready view models for the dashboard."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class HoldingRow:
    """Single row of the holdings table."""

    ticker: str
    display_name: str
    shares: Decimal
    price: Decimal
    day_change_per_share: Decimal
    day_change_percent: Decimal
    day_change_value: Decimal
    market_value: Decimal
    weight_percent: Decimal


@dataclass
class SummaryView:
    """Summary cards above the holdings table."""

    total_value: Decimal
    cash: Decimal
    day_change: Decimal
    total_gain: Decimal
    total_gain_percent: Decimal


@dataclass
class ChartPoint:
    """Single (label, value) pair of the chart series."""

    label: str
    value: Decimal
    is_transient: bool = False


@dataclass
class DashboardView:
    """Everything needed to draw the dashboard."""

    rows: list[HoldingRow] = field(default_factory=list)
    summary: Optional[SummaryView] = None
    chart: list[ChartPoint] = field(default_factory=list)
