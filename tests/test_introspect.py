"""Tests for schema introspection and statement execution."""

import psycopg
import pytest

from ai_db_chat.db.executor import run_query
from ai_db_chat.db.introspect import (
    IntrospectionError,
    format_schema_listing,
    get_schema_snapshot,
    schema_to_dict,
)
from ai_db_chat.db.queries import COLUMNS_QUERY

from tests.helpers import FakeConnection


@pytest.mark.anyio
async def test_snapshot_groups_columns_in_catalog_order():
    conn = FakeConnection()

    snapshot = await get_schema_snapshot(conn)

    assert snapshot == {
        "orders": ["id:integer", "user_id:integer", "total:numeric"],
        "users": ["id:integer", "name:text"],
    }
    assert conn.executed == [(COLUMNS_QUERY, {"schema": "public"})]


@pytest.mark.anyio
async def test_snapshot_uses_requested_schema():
    conn = FakeConnection(catalog=[])

    assert await get_schema_snapshot(conn, "analytics") == {}
    assert conn.executed[0][1] == {"schema": "analytics"}


@pytest.mark.anyio
async def test_snapshot_wraps_database_errors():
    conn = FakeConnection(catalog_error=psycopg.OperationalError("server closed"))

    with pytest.raises(IntrospectionError, match="server closed"):
        await get_schema_snapshot(conn)


def test_format_schema_listing():
    listing = format_schema_listing(
        {"users": ["id:integer", "name:text"], "tags": ["label:text"]}
    )
    assert listing == "users(id:integer, name:text)\ntags(label:text)"


def test_schema_to_dict():
    assert schema_to_dict({"users": ["id:integer"]}) == {
        "users": {"columns": ["id:integer"]}
    }


@pytest.mark.anyio
async def test_run_query_collects_rows(fake_conn):
    result = await run_query(fake_conn, "SELECT id,name FROM users LIMIT 200")

    assert result.columns == ["id", "name"]
    assert result.rows == [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Linus"}]
    assert result.row_count == 2
    assert result.latency_ms >= 0


@pytest.mark.anyio
async def test_run_query_hex_encodes_binary_values():
    conn = FakeConnection(
        results={"SELECT b FROM t": (["b", "n"], [(memoryview(b"\x00\xab"), 3)])}
    )

    result = await run_query(conn, "SELECT b FROM t")

    assert result.rows == [{"b": "\\x00ab", "n": 3}]
