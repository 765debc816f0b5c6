"""SQL parsing helpers backed by SQLGlot."""

from __future__ import annotations

from sqlglot import exp, parse
from sqlglot.errors import ParseError

from ai_db_chat.sql.rules import ALLOWED_QUERY_ROOT_TYPES, FORBIDDEN_STATEMENT_TYPES


class SQLParseError(RuntimeError):
    """Raised when SQL cannot be parsed safely."""


def parse_postgres_sql(sql: str) -> list[exp.Expression]:
    """Parse SQL text into its statements using PostgreSQL dialect semantics."""
    normalized = sql.strip()
    if not normalized:
        raise SQLParseError("SQL cannot be empty.")

    try:
        statements = parse(normalized, read="postgres")
    except ParseError as exc:
        raise SQLParseError(f"Invalid SQL: {exc}") from exc
    return [statement for statement in statements if statement is not None]


def check_select_statement(sql: str) -> list[str]:
    """Return violations that keep ``sql`` from being a single read-only query.

    An empty list means the statement passed.
    """
    try:
        statements = parse_postgres_sql(sql)
    except SQLParseError as exc:
        return [str(exc)]

    if len(statements) != 1:
        return [f"Expected exactly one statement, found {len(statements)}."]

    expression = statements[0]
    violations: list[str] = []
    if not isinstance(expression, ALLOWED_QUERY_ROOT_TYPES):
        violations.append("Only SELECT query forms are allowed.")

    forbidden_types = {
        expr.key.upper()
        for forbidden_type in FORBIDDEN_STATEMENT_TYPES
        for expr in expression.find_all(forbidden_type)
    }
    if forbidden_types:
        violations.append(
            "Forbidden SQL statement(s) detected: "
            + ", ".join(sorted(forbidden_types))
        )
    return violations
