"""Service layer - business logic orchestration."""

from etf_tracker.services.quote_gateway import QuoteGateway
from etf_tracker.services.portfolio_store import PortfolioStore, parse_trade_shares, parse_trade_side
from etf_tracker.services.history_ledger import HistoryLedger, normalize_series, view_filtered
from etf_tracker.services.market_clock import SessionHours
from etf_tracker.services.scheduler import SnapshotScheduler
from etf_tracker.services.ttl_cache import TtlCache

__all__ = [
    "QuoteGateway",
    "PortfolioStore",
    "parse_trade_shares",
    "parse_trade_side",
    "HistoryLedger",
    "normalize_series",
    "view_filtered",
    "SessionHours",
    "SnapshotScheduler",
    "TtlCache",
]
