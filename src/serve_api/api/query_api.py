"""Query endpoint read model.

This is the canonical surface behind ``GET /api``. Key rules:

1. Validate table, columns, offset, limit in that order; first failure wins
2. No range checks: negative or zero values go to the store as given
3. One store connection per call, released before returning
4. No partial results: either the full result set or an error
"""

import json
import re
from typing import Mapping

from ..database.query_repo import read_rows
from ..database.sqlite_client import connection_context
from .errors import InvalidParameter, MissingParameter, SerializationError
from .models import QueryRequest, ResultSet

# Decimal integer: optional sign and digits, nothing else.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _require(params: Mapping[str, str], name: str) -> str:
    """Return a parameter that must be present (an empty value counts as present)."""
    if name not in params:
        raise MissingParameter(name)
    return params.get(name) or ""


def _require_int(params: Mapping[str, str], name: str) -> int:
    raw = _require(params, name)
    if not _INTEGER_RE.fullmatch(raw):
        raise InvalidParameter(name)
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidParameter(name)
    return value


def parse_query_request(params: Mapping[str, str]) -> QueryRequest:
    """
    Build a QueryRequest from raw query-string parameters.

    Args:
        params: Query parameters (e.g. Flask's ``request.args``)

    Returns:
        QueryRequest with offset and limit parsed

    Raises:
        MissingParameter: If table, columns, offset or limit is absent
        InvalidParameter: If offset or limit is not an integer
    """
    table = _require(params, "table")
    columns = _require(params, "columns")
    offset = _require_int(params, "offset")
    limit = _require_int(params, "limit")
    return QueryRequest(table=table, columns=columns, offset=offset, limit=limit)


def run_query(query: QueryRequest, sqlite_path: str) -> ResultSet:
    """Execute one validated read against the store at ``sqlite_path``."""
    with connection_context(sqlite_path) as conn:
        return read_rows(conn, query.table, query.column_names(), query.offset, query.limit)


def serialize_rows(rows: ResultSet) -> str:
    """Render a result set as a JSON array of objects."""
    try:
        return json.dumps(rows, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(str(e)) from e


def handle(params: Mapping[str, str], sqlite_path: str) -> str:
    """
    Validate, query and serialize one /api request.

    Returns:
        JSON body for a 200 response

    Raises:
        ServeApiError: Any failure; the caller turns it into the HTTP response
    """
    query = parse_query_request(params)
    rows = run_query(query, sqlite_path)
    return serialize_rows(rows)
