"""LLM gateway and factory helpers."""

from ai_db_chat.config import Settings
from ai_db_chat.llm.base import ChatMessage, GatewayResult, LLMError
from ai_db_chat.llm.gateway import ModelGateway


def create_model_gateway(settings: Settings) -> ModelGateway:
    """Create the default model gateway for current settings."""
    return ModelGateway(
        base_url=settings.base_url,
        api_key=settings.api_key,
        models=settings.models,
        max_attempts=settings.max_attempts,
    )


__all__ = [
    "ChatMessage",
    "GatewayResult",
    "LLMError",
    "ModelGateway",
    "create_model_gateway",
]
