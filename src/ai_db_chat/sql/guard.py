"""Textual read-only guard and row cap for model-generated SQL.

``is_safe_select`` is a best-effort denylist check, not a security boundary:
keywords hidden in comments, string literals or unusual separators can slip
past it. Sessions are opened read-only as a second line of defence, and
``SQL_GUARD=strict`` adds the parser-backed check in ``ai_db_chat.sql.parser``.
"""

from __future__ import annotations

import re

from ai_db_chat.sql.rules import DEFAULT_MAX_ROWS, DENYLISTED_KEYWORDS

_TRAILING_SEMICOLONS = re.compile(r";+$")
_TRAILING_SEMICOLONS_WS = re.compile(r";+\s*$")
_LIMIT_CLAUSE = re.compile(r"\bLIMIT\s+\d+", re.IGNORECASE)

_PADDED_KEYWORDS = tuple(f" {keyword} " for keyword in DENYLISTED_KEYWORDS)


def is_safe_select(sql: str) -> bool:
    """Return True when ``sql`` textually looks like a read-only SELECT."""
    normalized = sql.strip().upper()
    if not normalized.startswith("SELECT"):
        return False
    sanitized = _TRAILING_SEMICOLONS.sub("", normalized)
    return not any(keyword in sanitized for keyword in _PADDED_KEYWORDS)


def denylisted_keywords(sql: str) -> list[str]:
    """List the denylisted keywords found in ``sql``, for diagnostics."""
    sanitized = _TRAILING_SEMICOLONS.sub("", sql.strip().upper())
    return [
        keyword
        for keyword, padded in zip(DENYLISTED_KEYWORDS, _PADDED_KEYWORDS)
        if padded in sanitized
    ]


def inject_limit(sql: str, max_rows: int = DEFAULT_MAX_ROWS) -> str:
    """Append ``LIMIT max_rows`` unless the statement already has a limit."""
    stripped = _TRAILING_SEMICOLONS_WS.sub("", sql)
    if _LIMIT_CLAUSE.search(stripped):
        return stripped
    return f"{stripped} LIMIT {max_rows}"
