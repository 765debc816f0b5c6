"""PostgreSQL schema introspection into a prompt-friendly snapshot."""

from __future__ import annotations

import psycopg

from ai_db_chat.db.queries import COLUMNS_QUERY

SchemaSnapshot = dict[str, list[str]]


class IntrospectionError(RuntimeError):
    """Raised when schema introspection fails."""


async def get_schema_snapshot(
    conn: psycopg.AsyncConnection,
    schema_name: str = "public",
) -> SchemaSnapshot:
    """Map every table in ``schema_name`` to its ``column:datatype`` entries.

    Columns keep the catalog's ordinal order. The snapshot is built fresh on
    every call.
    """
    try:
        cur = await conn.execute(COLUMNS_QUERY, {"schema": schema_name})
        rows = await cur.fetchall()
    except psycopg.Error as exc:
        raise IntrospectionError(f"Schema introspection failed: {exc}") from exc

    snapshot: SchemaSnapshot = {}
    for table_name, column_name, data_type in rows:
        snapshot.setdefault(table_name, []).append(f"{column_name}:{data_type}")
    return snapshot


def format_schema_listing(snapshot: SchemaSnapshot) -> str:
    """Flatten a snapshot into one ``table(col:type, ...)`` line per table."""
    return "\n".join(
        f"{table_name}({', '.join(columns)})"
        for table_name, columns in snapshot.items()
    )


def schema_to_dict(snapshot: SchemaSnapshot) -> dict[str, dict[str, list[str]]]:
    return {
        table_name: {"columns": list(columns)}
        for table_name, columns in snapshot.items()
    }
