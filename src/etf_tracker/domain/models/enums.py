"""Enumerations for domain models."""

from enum import Enum


class TradeSide(str, Enum):
    """Side of a simulated trade."""

    BUY = "BUY"
    SELL = "SELL"


class HistoryFilter(str, Enum):
    """Time ranges available for the value-history chart."""

    TODAY = "TODAY"
    LAST_5_DAYS = "LAST_5_DAYS"
    LAST_MONTH = "LAST_MONTH"
    ALL = "ALL"


class ReconcileSource(str, Enum):
    """Which branch produced the history series at load time."""

    REMOTE = "REMOTE"
    LOCAL = "LOCAL"
    SEEDED = "SEEDED"


class AppendStatus(str, Enum):
    """Outcome of a snapshot write attempt."""

    DISCARDED = "DISCARDED"
    RETAINED = "RETAINED"
    OLDEST_EVICTED = "OLDEST_EVICTED"
