"""Typed payloads shared across the pipeline."""

from ai_db_chat.models.api import AskRequest, AskResponse
from ai_db_chat.models.generation import SQLGenerationResult

__all__ = ["AskRequest", "AskResponse", "SQLGenerationResult"]
