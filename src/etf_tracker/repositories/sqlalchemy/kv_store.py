"""SQLAlchemy implementation of KeyValueStore."""

from typing import Optional

from sqlalchemy.orm import Session

from etf_tracker.repositories.sqlalchemy.orm_models import KeyValueEntryORM


class SqlAlchemyKeyValueStore:
    """SQLAlchemy-backed string store (local history cache, server history copy)."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, key: str) -> Optional[str]:
        entry = self._db.get(KeyValueEntryORM, key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        """Insert or update the entry for key."""
        entry = self._db.get(KeyValueEntryORM, key)
        if entry:
            entry.value = value
        else:
            self._db.add(KeyValueEntryORM(key=key, value=value))
        self._db.commit()

    def delete(self, key: str) -> None:
        self._db.query(KeyValueEntryORM).filter(KeyValueEntryORM.key == key).delete()
        self._db.commit()
