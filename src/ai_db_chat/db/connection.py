"""PostgreSQL connection pool and health check utilities."""

from __future__ import annotations

from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Iterator

import psycopg
from psycopg_pool import AsyncConnectionPool

from ai_db_chat.db.queries import HEALTHCHECK_QUERY

READ_ONLY_OPTIONS = "-c default_transaction_read_only=on"


class DatabaseConnectionError(RuntimeError):
    """Raised when a PostgreSQL connection or health check fails."""


@dataclass(frozen=True)
class HealthcheckResult:
    """Information returned by a successful PostgreSQL health check."""

    current_database: str
    current_user: str
    server_version: str
    transaction_read_only: bool


def create_pool(
    database_url: str,
    *,
    min_size: int = 1,
    max_size: int = 10,
) -> AsyncConnectionPool:
    """Build an unopened async pool whose sessions default to read-only.

    The caller owns the pool lifecycle (``await pool.open()`` /
    ``await pool.close()``); the HTTP app does this in its lifespan.
    """
    return AsyncConnectionPool(
        database_url,
        min_size=min_size,
        max_size=max_size,
        open=False,
        kwargs={"options": READ_ONLY_OPTIONS, "connect_timeout": 5},
    )


@contextmanager
def connect_readonly(database_url: str) -> Iterator[psycopg.Connection]:
    """Open a PostgreSQL connection configured as read-only by default."""
    try:
        with psycopg.connect(
            database_url,
            connect_timeout=5,
            options=READ_ONLY_OPTIONS,
        ) as conn:
            yield conn
    except psycopg.Error as exc:
        raise DatabaseConnectionError(
            f"Could not connect to PostgreSQL with provided URL: {exc}"
        ) from exc


@asynccontextmanager
async def connect_readonly_async(
    database_url: str,
) -> AsyncIterator[psycopg.AsyncConnection]:
    """Async counterpart of ``connect_readonly`` for one-off commands."""
    try:
        conn = await psycopg.AsyncConnection.connect(
            database_url,
            connect_timeout=5,
            options=READ_ONLY_OPTIONS,
        )
    except psycopg.Error as exc:
        raise DatabaseConnectionError(
            f"Could not connect to PostgreSQL with provided URL: {exc}"
        ) from exc
    async with conn:
        yield conn


def check_postgres_health(database_url: str) -> HealthcheckResult:
    """Run a lightweight database health check and verify read-only mode."""
    try:
        with connect_readonly(database_url) as conn:
            with conn.cursor() as cur:
                cur.execute(HEALTHCHECK_QUERY)
                row = cur.fetchone()
    except DatabaseConnectionError:
        raise
    except psycopg.Error as exc:
        raise DatabaseConnectionError(f"PostgreSQL health check failed: {exc}") from exc

    if row is None:
        raise DatabaseConnectionError("PostgreSQL health check returned no data.")

    current_database, current_user, server_version, read_only = row
    return HealthcheckResult(
        current_database=current_database,
        current_user=current_user,
        server_version=server_version,
        transaction_read_only=read_only == "on",
    )
