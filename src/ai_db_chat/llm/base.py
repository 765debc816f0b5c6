"""Provider-independent chat types for the model gateway."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal

Role = Literal["system", "user", "assistant"]


class LLMError(RuntimeError):
    """Raised when no candidate model produced a usable completion."""


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class GatewayResult:
    """First usable completion and the model that produced it."""

    content: str
    used_model: str
