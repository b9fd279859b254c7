"""
Database configuration and session management for the feature service.

This module defines a SQLModel engine targeting a SQLite database stored
in the configured storage directory.  It exposes helper functions to
initialise the schema and to obtain session objects for interacting
with the database.
"""

from __future__ import annotations

from sqlmodel import SQLModel, create_engine, Session

from ..config import get_settings

STORAGE_DIR = get_settings().storage_dir
STORAGE_DIR.mkdir(parents=True, exist_ok=True)

engine = create_engine(
    f"sqlite:///{(STORAGE_DIR / 'pixelfeatures.db').as_posix()}",
    echo=False,
    connect_args={"check_same_thread": False},
)


def create_db_and_tables() -> None:
    """Create all tables in the database if they do not exist yet."""
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    """Return a new SQLModel session bound to the engine.

    Sessions should be managed with a context manager
    (``with get_session() as session: ...``) so connections are closed.
    """
    return Session(engine)
