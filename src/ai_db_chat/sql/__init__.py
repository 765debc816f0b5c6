"""SQL safety checks."""

from ai_db_chat.sql.guard import denylisted_keywords, inject_limit, is_safe_select
from ai_db_chat.sql.parser import (
    SQLParseError,
    check_select_statement,
    parse_postgres_sql,
)

__all__ = [
    "SQLParseError",
    "check_select_statement",
    "denylisted_keywords",
    "inject_limit",
    "is_safe_select",
    "parse_postgres_sql",
]
