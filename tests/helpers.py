"""Fakes for the connection pool and model provider."""

from contextlib import asynccontextmanager
from types import SimpleNamespace

import httpx
import psycopg

from ai_db_chat.db.queries import COLUMNS_QUERY
from ai_db_chat.llm.gateway import ModelGateway

USERS_CATALOG = [
    ("orders", "id", "integer"),
    ("orders", "user_id", "integer"),
    ("orders", "total", "numeric"),
    ("users", "id", "integer"),
    ("users", "name", "text"),
]


class FakeCursor:
    def __init__(self, columns, rows, rowcount=None):
        self.description = (
            [SimpleNamespace(name=name) for name in columns] if columns else None
        )
        self._rows = list(rows)
        self.rowcount = len(self._rows) if rowcount is None else rowcount

    async def fetchall(self):
        return list(self._rows)


class FakeConnection:
    """Answers the catalog query and a fixed set of statements."""

    def __init__(self, catalog=None, results=None, catalog_error=None):
        self.catalog = USERS_CATALOG if catalog is None else catalog
        self.results = results or {}
        self.catalog_error = catalog_error
        self.executed = []

    async def execute(self, query, params=None):
        self.executed.append((query, params))
        if query == COLUMNS_QUERY:
            if self.catalog_error is not None:
                raise self.catalog_error
            return FakeCursor(["table_name", "column_name", "data_type"], self.catalog)
        if query not in self.results:
            raise psycopg.ProgrammingError(f"unexpected statement: {query}")
        columns, rows = self.results[query]
        return FakeCursor(columns, rows)


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def connection(self):
        self.acquired += 1
        try:
            yield self.conn
        finally:
            self.released += 1


def completion(content, status_code=200):
    return httpx.Response(
        status_code, json={"choices": [{"message": {"role": "assistant", "content": content}}]}
    )


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def make_gateway(handler, models=("model-a",), **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("sleep", RecordingSleep())
    return ModelGateway(
        "https://llm.test/api/v1",
        "test-key",
        list(models),
        client=client,
        **kwargs,
    )
