"""OpenAI-compatible chat completions gateway with retry and model fallback."""

from __future__ import annotations

import asyncio
import json
import logging
import random
from typing import Awaitable, Callable, Sequence

import httpx

from ai_db_chat.llm.base import ChatMessage, GatewayResult, LLMError

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_ERROR = "Empty LLM response"
INVALID_BODY_ERROR = "Invalid LLM response body"
EXHAUSTED_ERROR = "LLM failed after retries"

BACKOFF_STEP_MS = 2000
BACKOFF_CAP_MS = 8000
BACKOFF_JITTER_MS = 300


def backoff_delay_ms(attempt: int, jitter: float | None = None) -> float:
    """Delay before retrying a rate-limited model, for a 1-based ``attempt``."""
    if jitter is None:
        jitter = random.random() * BACKOFF_JITTER_MS
    return min(BACKOFF_STEP_MS * attempt, BACKOFF_CAP_MS) + jitter


class ModelGateway:
    """Send chat prompts to candidate models in preference order.

    Each model gets up to ``max_attempts`` tries. A 429 sleeps with linear
    growth capped at 8s (plus up to 300ms jitter) and retries the same
    model; an empty completion retries immediately; any other HTTP error or a
    transport failure abandons the model and falls through to the next one.
    The first non-empty completion wins. Nothing is remembered across calls.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        models: Sequence[str],
        *,
        max_attempts: int = 3,
        temperature: float = 0.1,
        max_tokens: int = 400,
        timeout_seconds: float = 60.0,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not models:
            raise ValueError("At least one model is required.")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.models = list(models)
        self.max_attempts = max_attempts
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._owns_client = client is None
        self._sleep = sleep

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "http://localhost",
            "X-Title": "ai-db-chat",
        }

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def complete(self, messages: Sequence[ChatMessage]) -> GatewayResult:
        """Return the first non-empty completion across candidate models."""
        payload_messages = [message.to_dict() for message in messages]
        last_error = ""

        for model in self.models:
            for attempt in range(1, self.max_attempts + 1):
                body = {
                    "model": model,
                    "messages": payload_messages,
                    "temperature": self.temperature,
                    "max_tokens": self.max_tokens,
                }
                try:
                    response = await self._client.post(
                        self.endpoint, json=body, headers=self._headers()
                    )
                except httpx.HTTPError as exc:
                    last_error = f"Request failed: {exc}"
                    logger.warning("Model %s request failed: %s", model, exc)
                    break

                if response.is_success:
                    content = self._extract_message_content(response)
                    if content:
                        logger.info("Model %s answered on attempt %d", model, attempt)
                        return GatewayResult(content=content, used_model=model)
                    last_error = (
                        INVALID_BODY_ERROR if content is None else EMPTY_RESPONSE_ERROR
                    )
                    logger.warning(
                        "Model %s returned an empty completion (attempt %d/%d)",
                        model,
                        attempt,
                        self.max_attempts,
                    )
                    continue

                last_error = f"HTTP {response.status_code}: {response.text}"
                if response.status_code == 429:
                    delay_ms = backoff_delay_ms(attempt)
                    logger.info(
                        "Model %s rate-limited (attempt %d/%d), retrying in %.0fms",
                        model,
                        attempt,
                        self.max_attempts,
                        delay_ms,
                    )
                    await self._sleep(delay_ms / 1000)
                    continue

                logger.warning(
                    "Model %s failed with HTTP %d, trying next model",
                    model,
                    response.status_code,
                )
                break

        raise LLMError(last_error or EXHAUSTED_ERROR)

    @staticmethod
    def _extract_message_content(response: httpx.Response) -> str | None:
        """Stripped completion text; None when the body is not JSON."""
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None

        if not isinstance(payload, dict):
            return ""
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""

        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if not isinstance(message, dict):
            return ""

        content = message.get("content")
        if not isinstance(content, str):
            return ""
        return content.strip()

