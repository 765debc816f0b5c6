"""Tests for the parser-backed statement check."""

import pytest

from ai_db_chat.sql.parser import SQLParseError, check_select_statement, parse_postgres_sql


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT id, name FROM users",
        "WITH t AS (SELECT 1 AS a) SELECT a FROM t",
        "SELECT id FROM users UNION SELECT user_id FROM orders",
    ],
)
def test_single_query_passes(sql):
    assert check_select_statement(sql) == []


def test_write_statement_is_reported():
    violations = check_select_statement("DELETE FROM users")
    assert "Only SELECT query forms are allowed." in violations


def test_stacked_statements_are_reported():
    violations = check_select_statement("SELECT 1; DROP TABLE x")
    assert violations == ["Expected exactly one statement, found 2."]


def test_empty_sql_is_reported():
    assert check_select_statement("   ") == ["SQL cannot be empty."]


def test_parse_empty_raises():
    with pytest.raises(SQLParseError, match="empty"):
        parse_postgres_sql("")
