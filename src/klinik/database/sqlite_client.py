from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .schema import Base


def enable_foreign_keys(engine: Engine) -> Engine:
    """
    Turn on SQLite foreign key enforcement for every new connection.

    SQLite ignores FOREIGN KEY constraints unless the pragma is set per
    connection, so transactions could otherwise point at missing patients.
    """
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    return engine


def get_engine(sqlite_path: str) -> Engine:
    """Create an engine for the SQLite file and make sure all tables exist."""
    engine = enable_foreign_keys(create_engine(f"sqlite:///{sqlite_path}", future=True))
    Base.metadata.create_all(engine)
    return engine


def get_session(sqlite_path: str) -> Session:
    """Get a SQLAlchemy session (caller must close it)."""
    engine = get_engine(sqlite_path)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


@contextmanager
def session_context(sqlite_path: str) -> Generator[Session, None, None]:
    """
    Context manager for SQLAlchemy sessions.

    Rolls back on error and always closes the session. Commits are left to
    the create handlers so read paths never write.

    Usage:
        with session_context(sqlite_path) as session:
            medicines = list_medicines(session)
    """
    session = get_session(sqlite_path)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
