"""Prompt builders for ai-db-chat."""

from ai_db_chat.prompts.sql_generation import (
    OutputParseError,
    PromptBundle,
    build_sql_generation_prompt,
    extract_json_text,
    parse_generation_output,
)

__all__ = [
    "OutputParseError",
    "PromptBundle",
    "build_sql_generation_prompt",
    "extract_json_text",
    "parse_generation_output",
]
