"""Repository layer - data access abstractions and implementations."""

from etf_tracker.repositories.protocols import KeyValueStore, RemoteHistoryStore

__all__ = [
    "KeyValueStore",
    "RemoteHistoryStore",
]
