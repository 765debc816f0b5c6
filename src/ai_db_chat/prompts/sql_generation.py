"""Prompt builder and completion parsing for NL-to-SQL generation."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from pydantic import ValidationError

from ai_db_chat.db.introspect import SchemaSnapshot, format_schema_listing
from ai_db_chat.llm.base import ChatMessage
from ai_db_chat.models.generation import SQLGenerationResult

# Greedy: first "{" through a "}" that ends the text.
_TRAILING_JSON_OBJECT = re.compile(r"\{[\s\S]*\}$")

OUTPUT_CONTRACT = '{"sql":"...","explanation":"...","confidence":0.7}'

SYSTEM_PROMPT = " ".join(
    [
        "You are a Text-to-SQL assistant for PostgreSQL.",
        f"Return ONLY a JSON object: {OUTPUT_CONTRACT}.",
        "Rules: Only SELECT queries. No writes or DDL. Use exact table/column names.",
        "Keep SQL concise. If ambiguous, pick the most likely using available columns.",
        "Do NOT wrap the JSON in markdown fences.",
    ]
)


class OutputParseError(ValueError):
    """Raised when a completion does not hold a valid generation payload."""


@dataclass(frozen=True)
class PromptBundle:
    """Inspectable prompt bundle sent to the model gateway."""

    question: str
    schema_listing: str
    system_prompt: str
    user_prompt: str

    @property
    def messages(self) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=self.system_prompt),
            ChatMessage(role="user", content=self.user_prompt),
        ]


def build_sql_generation_prompt(
    question: str,
    snapshot: SchemaSnapshot,
    *,
    schema_name: str = "public",
) -> PromptBundle:
    """Build the system/user prompt pair grounded on the schema snapshot."""
    schema_listing = format_schema_listing(snapshot)
    user_prompt = "\n".join(
        [
            f"Question: {question}",
            f"Relevant schema ({schema_name}):",
            schema_listing,
            f"Output JSON strictly as: {OUTPUT_CONTRACT}",
        ]
    )
    return PromptBundle(
        question=question,
        schema_listing=schema_listing,
        system_prompt=SYSTEM_PROMPT,
        user_prompt=user_prompt,
    )


def extract_json_text(raw: str) -> str:
    """Return the trailing ``{...}`` block of ``raw``, or ``raw`` itself.

    Leading prose is tolerated. The match runs from the first opening brace,
    so prose containing a brace before the payload breaks extraction.
    """
    content = raw.strip()
    match = _TRAILING_JSON_OBJECT.search(content)
    return match.group(0) if match else content


def parse_generation_output(raw: str) -> SQLGenerationResult:
    """Parse and validate a model completion into a generation payload."""
    json_text = extract_json_text(raw)
    try:
        payload = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise OutputParseError("LLM response content was not valid JSON.") from exc

    try:
        return SQLGenerationResult.model_validate(payload)
    except ValidationError as exc:
        raise OutputParseError(f"LLM response violated output contract: {exc}") from exc
