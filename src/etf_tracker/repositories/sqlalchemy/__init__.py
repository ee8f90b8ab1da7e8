"""SQLAlchemy repository implementations."""

from etf_tracker.repositories.sqlalchemy.kv_store import SqlAlchemyKeyValueStore

__all__ = [
    "SqlAlchemyKeyValueStore",
]
