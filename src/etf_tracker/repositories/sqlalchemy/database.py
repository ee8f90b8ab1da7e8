"""
Database connection and session management.

Two SQLite files exist: the backend's store (remote history copy) and
the dashboard's local history cache. Both hold the same single table.
"""

from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from etf_tracker.config.settings import get_settings

Base = declarative_base()

# Backend engine, created on first use
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _sqlite_engine(url: str) -> Engine:
    # Sessions are shared with the proxy's worker threads
    return create_engine(url, connect_args={"check_same_thread": False}, echo=False)


def _create_tables(engine: Engine) -> None:
    from etf_tracker.repositories.sqlalchemy import orm_models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_engine() -> Engine:
    """Get or create the backend engine."""
    global _engine
    if _engine is None:
        _engine = _sqlite_engine(get_settings().get_database_url())
    return _engine


def get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create the backend tables."""
    _create_tables(get_engine())


def open_session_at(db_path: Path) -> Session:
    """Open a session on a standalone SQLite file (dashboard-side local cache)."""
    engine = _sqlite_engine(f"sqlite:///{db_path}")
    _create_tables(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()
