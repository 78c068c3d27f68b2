from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Union


class ProviderNotConfigured(Exception):
    """Raised when a provider is not properly configured (e.g., missing API key)."""


class ProviderError(Exception):
    """Raised for provider-specific errors that should surface to callers."""


@dataclass
class TextPart:
    """A fragment of assistant text."""
    value: str


@dataclass
class ToolCallPart:
    """A tool-call announcement emitted by the model."""
    call_id: str
    name: str
    input: Dict[str, Any] = field(default_factory=dict)


ResponsePart = Union[TextPart, ToolCallPart]


class BaseLLMClient(ABC):
    """Minimal provider-agnostic model transport.

    Implementations must not perform network calls during tests unless explicitly mocked.
    """

    @abstractmethod
    async def resolve_model(self, model_id: str) -> Optional[Any]:
        """Return a model handle, or None when the model is unknown."""
        raise NotImplementedError

    @abstractmethod
    def send_request(
        self,
        model: Any,
        *,
        system_prompt: str,
        messages: List[Dict[str, Any]],
        options: Optional[Dict[str, Any]] = None,
    ) -> AsyncIterator[Any]:
        """Return a forward-only async iterator of response parts.

        Exhaustion of the iterator is the done signal. Parts are usually
        TextPart / ToolCallPart; consumers ignore anything else.
        """
        raise NotImplementedError
