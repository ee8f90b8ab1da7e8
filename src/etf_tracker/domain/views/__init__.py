"""View models for service outputs."""

from etf_tracker.domain.views.market import Quote, Article
from etf_tracker.domain.views.portfolio import (
    HoldingValuation,
    ValuationResult,
    TradeResult,
)
from etf_tracker.domain.views.history import AppendResult, ReconcileResult
from etf_tracker.domain.views.dashboard import (
    HoldingRow,
    SummaryView,
    ChartPoint,
    DashboardView,
)

__all__ = [
    "Quote",
    "Article",
    "HoldingValuation",
    "ValuationResult",
    "TradeResult",
    "AppendResult",
    "ReconcileResult",
    "HoldingRow",
    "SummaryView",
    "ChartPoint",
    "DashboardView",
]
