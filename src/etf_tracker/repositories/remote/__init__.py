"""Remote history store clients."""

from etf_tracker.repositories.remote.http_history_store import HttpRemoteHistoryStore

__all__ = [
    "HttpRemoteHistoryStore",
]
