"""Repository protocol definitions (interfaces)."""

from etf_tracker.repositories.protocols.key_value_store import KeyValueStore
from etf_tracker.repositories.protocols.remote_history_store import RemoteHistoryStore

__all__ = [
    "KeyValueStore",
    "RemoteHistoryStore",
]
