"""Database setup — SQLModel/SQLAlchemy engine and per-request sessions.

SQLite is used for development and tests; production points DATABASE_URL at
the managed Postgres instance. Uniqueness and foreign keys are enforced by the
database, ownership by the repositories.
"""

from __future__ import annotations

import os
import sqlite3

from app.config import settings
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine


def get_database_url(url: str | None = None) -> str:
    """Get database URL, ensuring the data directory exists."""
    url = url or settings.database_url
    if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
        db_path = url.replace("sqlite:///", "")
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    return url


@event.listens_for(Engine, "connect")
def set_sqlite_pragmas(dbapi_connection, connection_record):
    """Turn on foreign keys (SQLite leaves them off) so ON DELETE SET NULL applies."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def build_engine(url: str | None = None) -> Engine:
    url = get_database_url(url)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


def create_db_and_tables(engine: Engine) -> None:
    """Create all tables defined by SQLModel metadata."""
    # Registers the table models on SQLModel.metadata
    from app.models import task  # noqa: F401

    SQLModel.metadata.create_all(engine)

