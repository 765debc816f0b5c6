"""Pydantic request/response models for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# === Requests ===


class AskRequest(BaseModel):
    """Request body for ``POST /api/ask``."""

    question: Any = ""

    def question_text(self) -> str:
        if not self.question:
            return ""
        return str(self.question)


# === Responses ===


class AskResponse(BaseModel):
    """Successful answer to a question."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    question: str
    sql: str
    explanation: str
    confidence: float
    used_model: str = Field(alias="usedModel")
    columns: list[str]
    rows: list[dict[str, Any]]
    row_count: int = Field(alias="rowCount")
    latency_ms: int = Field(alias="latencyMs")
