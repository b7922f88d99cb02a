"""
Database handle.

The engine and session factory live on an explicitly constructed
``Database`` object that the app factory stores on ``app.state``; routes
receive sessions through the ``get_db`` dependency and background work
opens its own sessions from the same handle.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from app.db.base import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE clauses unless enforcement is switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns one SQLAlchemy engine and its session factory."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        is_sqlite = url.startswith("sqlite")
        connect_args = {"check_same_thread": False} if is_sqlite else {}

        self.engine = create_engine(url, echo=echo, connect_args=connect_args)
        if is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False)

    def create_all(self) -> None:
        """Create all tables for the registered models."""
        # Import all models so SQLAlchemy can discover them for table creation
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    db: Session = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
