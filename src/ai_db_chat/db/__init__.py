"""Database helpers for ai-db-chat."""

from ai_db_chat.db.connection import (
    DatabaseConnectionError,
    HealthcheckResult,
    check_postgres_health,
    connect_readonly,
    connect_readonly_async,
    create_pool,
)
from ai_db_chat.db.executor import QueryResult, run_query
from ai_db_chat.db.introspect import (
    IntrospectionError,
    SchemaSnapshot,
    format_schema_listing,
    get_schema_snapshot,
    schema_to_dict,
)

__all__ = [
    "DatabaseConnectionError",
    "HealthcheckResult",
    "IntrospectionError",
    "QueryResult",
    "SchemaSnapshot",
    "check_postgres_health",
    "connect_readonly",
    "connect_readonly_async",
    "create_pool",
    "format_schema_listing",
    "get_schema_snapshot",
    "run_query",
    "schema_to_dict",
]
