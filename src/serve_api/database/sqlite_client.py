import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from serve_api.api.errors import StoreUnavailable
from serve_api.utils.logging import get_logger

logger = get_logger(__name__)


def store_url(sqlite_path: str) -> URL:
    """Read-only SQLite URI for the store file; a missing file fails to open."""
    resolved = Path(sqlite_path).expanduser().resolve().as_posix()
    return URL.create(
        "sqlite",
        database=f"file:{resolved}",
        query={"mode": "ro", "uri": "true"},
    )


def get_engine(sqlite_path: str) -> Engine:
    """Build an engine that never keeps connections between requests."""
    engine = create_engine(store_url(sqlite_path), poolclass=NullPool, future=True)

    @event.listens_for(engine, "connect")
    def _strict_identifiers(dbapi_conn, _connection_record):
        # A double-quoted name must resolve to a column; never a string literal.
        dbapi_conn.setconfig(sqlite3.SQLITE_DBCONFIG_DQS_DML, False)

    return engine


def _store_error(e: SQLAlchemyError) -> StoreUnavailable:
    return StoreUnavailable(str(getattr(e, "orig", None) or e))


@contextmanager
def connection_context(sqlite_path: str) -> Generator[Connection, None, None]:
    """
    Context manager for one request's store connection.

    The connection and its engine are released on every exit path.

    Usage:
        with connection_context(sqlite_path) as conn:
            rows = read_rows(conn, ...)

    Raises:
        StoreUnavailable: If the connection cannot be opened or the file
            is not a readable SQLite database
    """
    engine = get_engine(sqlite_path)
    try:
        try:
            conn = engine.connect()
        except SQLAlchemyError as e:
            raise _store_error(e) from e
        try:
            try:
                conn.exec_driver_sql("PRAGMA schema_version")
            except SQLAlchemyError as e:
                raise _store_error(e) from e
            logger.debug(f"Opened store connection to {sqlite_path}")
            yield conn
        finally:
            conn.close()
    finally:
        engine.dispose()
