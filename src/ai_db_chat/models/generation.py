"""Typed generation payload parsed from model completions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SQLGenerationResult(BaseModel):
    """Structured NL-to-SQL generation output contract."""

    model_config = ConfigDict(strict=True)

    sql: str
    explanation: str = ""
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
