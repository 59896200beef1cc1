"""Tests for /api parameter validation and serialization."""

import json

import pytest

from serve_api.api.errors import (
    InvalidParameter,
    MissingParameter,
    QueryFailed,
    SerializationError,
    StoreUnavailable,
)
from serve_api.api.models import QueryRequest
from serve_api.api.query_api import handle, parse_query_request, serialize_rows

VALID = {"table": "t", "columns": "a,b", "offset": "0", "limit": "2"}


def _without(name):
    return {k: v for k, v in VALID.items() if k != name}


@pytest.mark.parametrize("missing", ["table", "columns", "offset", "limit"])
def test_missing_parameter_is_named(missing):
    with pytest.raises(MissingParameter) as excinfo:
        parse_query_request(_without(missing))
    assert excinfo.value.parameter == missing
    assert f"`{missing}`" in excinfo.value.message
    assert excinfo.value.status_code == 400


def test_validation_order_first_failure_wins():
    """Missing table is reported even when columns, offset and limit are also bad."""
    with pytest.raises(MissingParameter) as excinfo:
        parse_query_request({"offset": "x", "limit": "y"})
    assert excinfo.value.parameter == "table"

    with pytest.raises(MissingParameter) as excinfo:
        parse_query_request({"table": "t", "offset": "x"})
    assert excinfo.value.parameter == "columns"

    with pytest.raises(InvalidParameter) as excinfo:
        parse_query_request({"table": "t", "columns": "a", "offset": "x"})
    assert excinfo.value.parameter == "offset"


@pytest.mark.parametrize("raw", ["abc", "1.5", " 2", "2 ", "", "1_000", "0x10", "9223372036854775808"])
@pytest.mark.parametrize("name", ["offset", "limit"])
def test_non_integer_is_invalid(name, raw):
    params = dict(VALID, **{name: raw})
    with pytest.raises(InvalidParameter) as excinfo:
        parse_query_request(params)
    assert excinfo.value.parameter == name
    assert excinfo.value.message == f"Bad request - {name} should be an integer."


def test_integers_accept_sign_and_skip_range_checks():
    query = parse_query_request({"table": "", "columns": "", "offset": "+3", "limit": "-1"})
    assert query == QueryRequest(table="", columns="", offset=3, limit=-1)


def test_empty_values_count_as_present():
    query = parse_query_request({"table": "", "columns": "", "offset": "0", "limit": "0"})
    assert query.table == ""
    assert query.column_names() == []


def test_column_names_are_split_and_trimmed():
    query = QueryRequest(table="t", columns=" a , b,,c ", offset=0, limit=1)
    assert query.column_names() == ["a", "b", "c"]


def test_serialize_rows_round_trips_scalars():
    rows = [
        {"s": "text", "i": 7, "f": -0.25, "t": True, "n": None},
        {"s": "ünïcode", "i": -1, "f": 1e20, "t": False, "n": None},
    ]
    assert json.loads(serialize_rows(rows)) == rows


def test_serialize_empty_result_is_empty_array():
    assert serialize_rows([]) == "[]"


@pytest.mark.parametrize("value", [b"\x00\x01", float("nan"), float("inf")])
def test_serialize_rejects_unrepresentable_values(value):
    with pytest.raises(SerializationError) as excinfo:
        serialize_rows([{"v": value}])
    assert excinfo.value.status_code == 400
    assert excinfo.value.message.startswith("Bad request - Your data couldn't be retrieved: ")


def test_handle_returns_json_body(store_path):
    body = handle(VALID, store_path)
    assert json.loads(body) == [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]


def test_handle_validates_before_touching_store(tmp_path):
    missing_store = str(tmp_path / "nope.db")
    with pytest.raises(MissingParameter):
        handle(_without("limit"), missing_store)
    assert not (tmp_path / "nope.db").exists()


def test_handle_store_unavailable(tmp_path):
    with pytest.raises(StoreUnavailable) as excinfo:
        handle(VALID, str(tmp_path / "nope.db"))
    assert excinfo.value.status_code == 500


def test_handle_unknown_table(store_path):
    with pytest.raises(QueryFailed) as excinfo:
        handle(dict(VALID, table="nope"), store_path)
    assert "no such table" in excinfo.value.detail
