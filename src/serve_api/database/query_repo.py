"""Projected, offset and limited reads against the store."""

from typing import List

from sqlalchemy import column, literal_column, select, table
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

from serve_api.api.errors import QueryFailed
from serve_api.api.models import ResultSet
from serve_api.utils.logging import get_logger

logger = get_logger(__name__)


def _projection(column_names: List[str]):
    if not column_names:
        return [literal_column("*")]
    return [literal_column("*") if name == "*" else column(name) for name in column_names]


def _source(table_name: str):
    """``schema.table`` reads from an attached schema such as ``main``."""
    schema, _, name = table_name.rpartition(".")
    return table(name, schema=schema or None)


def build_read(table_name: str, column_names: List[str], offset: int, limit: int) -> Select:
    """
    Build the SELECT for one read.

    Names are rendered as identifiers, never as raw SQL. A negative offset or
    limit leaves that clause out, so ``limit=-1`` reads every remaining row.
    No ORDER BY: rows come back in the store's default order.
    """
    stmt = select(*_projection(column_names)).select_from(_source(table_name))
    if offset >= 0:
        stmt = stmt.offset(offset)
    if limit >= 0:
        stmt = stmt.limit(limit)
    return stmt


def read_rows(
    conn: Connection,
    table_name: str,
    column_names: List[str],
    offset: int,
    limit: int,
) -> ResultSet:
    """
    Read at most ``limit`` rows of ``table_name`` starting at ``offset``.

    Args:
        conn: Open store connection (see sqlite_client.connection_context)
        table_name: Table to read, used verbatim
        column_names: Columns to project; empty means every column
        offset: Rows to skip
        limit: Maximum rows to return

    Returns:
        List of column-name to value dicts in store order

    Raises:
        QueryFailed: If the store rejects the read
    """
    stmt = build_read(table_name, column_names, offset, limit)
    try:
        result = conn.execute(stmt)
        rows = [dict(mapping) for mapping in result.mappings()]
    except SQLAlchemyError as e:
        detail = str(getattr(e, "orig", None) or e)
        logger.warning(f"Read from table {table_name!r} failed: {detail}")
        raise QueryFailed(detail) from e
    logger.debug(f"Read {len(rows)} rows from {table_name!r} (offset={offset}, limit={limit})")
    return rows
