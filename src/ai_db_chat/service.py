"""Question answering pipeline: schema, prompt, model, guard, execute."""

from __future__ import annotations

import logging
from typing import Any, AsyncContextManager, Protocol

import psycopg

from ai_db_chat.db.executor import run_query
from ai_db_chat.db.introspect import get_schema_snapshot, schema_to_dict
from ai_db_chat.llm.base import LLMError
from ai_db_chat.llm.gateway import ModelGateway
from ai_db_chat.models.api import AskResponse
from ai_db_chat.prompts.sql_generation import (
    OutputParseError,
    build_sql_generation_prompt,
    parse_generation_output,
)
from ai_db_chat.sql.guard import denylisted_keywords, inject_limit, is_safe_select
from ai_db_chat.sql.parser import check_select_statement
from ai_db_chat.sql.rules import DEFAULT_MAX_ROWS

logger = logging.getLogger(__name__)

LLM_HINT = (
    "Model may be rate-limited. Try again in a moment or set "
    "MODEL_PREFERENCE with alternatives."
)


class ConnectionPool(Protocol):
    def connection(self) -> AsyncContextManager[psycopg.AsyncConnection]: ...


class AskError(Exception):
    """Pipeline failure rendered as a JSON error envelope."""

    status_code = 500

    def __init__(self, payload: dict[str, Any]):
        super().__init__(payload.get("error", "ask_failed"))
        self.payload = payload


class QuestionRequiredError(AskError):
    status_code = 400

    def __init__(self) -> None:
        super().__init__({"error": "question_required"})


class ModelGatewayError(AskError):
    status_code = 502

    def __init__(self, detail: str):
        super().__init__({"error": "llm_error", "detail": detail, "hint": LLM_HINT})


class InvalidModelOutputError(AskError):
    status_code = 502

    def __init__(self, raw: str, model: str):
        super().__init__({"error": "llm_invalid_json", "raw": raw, "model": model})


class UnsafeSQLError(AskError):
    status_code = 400

    def __init__(self, sql: str, model: str):
        super().__init__({"error": "unsafe_or_nonselect_sql", "sql": sql, "model": model})


class AskService:
    """Turn a question into a guarded, executed read-only query.

    The pool and gateway are injected so tests can swap in fakes. Nothing is
    cached between calls: the schema is introspected on every question.
    """

    def __init__(
        self,
        pool: ConnectionPool,
        gateway: ModelGateway,
        *,
        max_rows: int = DEFAULT_MAX_ROWS,
        guard_mode: str = "denylist",
        schema_name: str = "public",
    ):
        self.pool = pool
        self.gateway = gateway
        self.max_rows = max_rows
        self.guard_mode = guard_mode
        self.schema_name = schema_name

    async def schema(self) -> dict[str, Any]:
        async with self.pool.connection() as conn:
            snapshot = await get_schema_snapshot(conn, self.schema_name)
        return {"schema": schema_to_dict(snapshot)}

    def check_sql(self, sql: str) -> bool:
        """Apply the textual guard, plus the parser guard in strict mode."""
        if not is_safe_select(sql):
            return False
        if self.guard_mode == "strict":
            violations = check_select_statement(sql)
            if violations:
                logger.warning("Parser guard rejected SQL: %s", "; ".join(violations))
                return False
        return True

    async def ask(self, question: str) -> AskResponse:
        if not question or not question.strip():
            raise QuestionRequiredError()

        async with self.pool.connection() as conn:
            snapshot = await get_schema_snapshot(conn, self.schema_name)

        prompt = build_sql_generation_prompt(
            question, snapshot, schema_name=self.schema_name
        )

        try:
            completion = await self.gateway.complete(prompt.messages)
        except LLMError as exc:
            logger.warning("Model gateway failed: %s", exc)
            raise ModelGatewayError(str(exc) or "provider_unavailable") from exc

        raw = completion.content.strip()
        try:
            generated = parse_generation_output(raw)
        except OutputParseError as exc:
            logger.warning("Model %s returned unusable output: %s", completion.used_model, exc)
            raise InvalidModelOutputError(raw, completion.used_model) from exc

        if not self.check_sql(generated.sql):
            logger.warning(
                "Rejected SQL from %s (keywords: %s): %s",
                completion.used_model,
                ", ".join(denylisted_keywords(generated.sql)) or "none",
                generated.sql,
            )
            raise UnsafeSQLError(generated.sql, completion.used_model)

        sql = inject_limit(generated.sql, self.max_rows)
        async with self.pool.connection() as conn:
            result = await run_query(conn, sql)

        return AskResponse(
            question=question,
            sql=sql,
            explanation=generated.explanation,
            confidence=generated.confidence,
            used_model=completion.used_model,
            columns=result.columns,
            rows=result.rows,
            row_count=result.row_count,
            latency_ms=result.latency_ms,
        )
