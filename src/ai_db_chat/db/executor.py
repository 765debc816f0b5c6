"""Read-only statement execution."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import psycopg


@dataclass(frozen=True)
class QueryResult:
    columns: list[str]
    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    latency_ms: int = 0


def _json_safe(value: Any) -> Any:
    """Render binary column values (bytea) in PostgreSQL hex form."""
    if isinstance(value, memoryview):
        value = value.tobytes()
    if isinstance(value, (bytes, bytearray)):
        return "\\x" + bytes(value).hex()
    return value


async def run_query(conn: psycopg.AsyncConnection, sql: str) -> QueryResult:
    """Execute ``sql`` on ``conn`` and collect rows as column-keyed dicts."""
    started = time.perf_counter()
    cur = await conn.execute(sql)
    raw_rows = await cur.fetchall() if cur.description else []
    latency_ms = int((time.perf_counter() - started) * 1000)

    columns = [column.name for column in cur.description or []]
    rows = [
        {column: _json_safe(value) for column, value in zip(columns, row)}
        for row in raw_rows
    ]
    row_count = cur.rowcount if cur.rowcount >= 0 else len(rows)
    return QueryResult(
        columns=columns,
        rows=rows,
        row_count=row_count,
        latency_ms=latency_ms,
    )
