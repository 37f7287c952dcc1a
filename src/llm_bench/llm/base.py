"""Abstract base class for completion clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class CompletionError(RuntimeError):
    """A single completion request failed (transport, HTTP status or body)."""


@dataclass(frozen=True)
class CompletionResponse:
    """Answer text and provider-reported usage from one completion call."""
    content: str
    prompt_tokens: int | None = None  # None when the provider omits usage
    completion_tokens: int | None = None


class CompletionClient(ABC):
    """Abstract base for clients of the benchmarked endpoint."""

    @abstractmethod
    async def complete(self, prompt: str) -> CompletionResponse:
        """Send ``prompt`` as a single user message and return the answer.

        Raises:
            CompletionError: on any failure; no retries are attempted.
        """
        ...

    async def aclose(self) -> None:
        pass

    async def __aenter__(self) -> CompletionClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
