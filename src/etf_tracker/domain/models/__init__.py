"""Domain models package."""

from etf_tracker.domain.models.enums import (
    TradeSide,
    HistoryFilter,
    ReconcileSource,
    AppendStatus,
)
from etf_tracker.domain.models.holding import Holding, Portfolio
from etf_tracker.domain.models.snapshot import Snapshot

__all__ = [
    "TradeSide",
    "HistoryFilter",
    "ReconcileSource",
    "AppendStatus",
    "Holding",
    "Portfolio",
    "Snapshot",
]
