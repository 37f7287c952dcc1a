"""Client for OpenAI-compatible chat completion endpoints (vLLM, ollama, ...).

The endpoint is addressed by its full URL, e.g.
``http://localhost:8000/v1/chat/completions``. Each call is one blocking
request/response cycle; streaming is not used.
"""

from __future__ import annotations

from typing import Any

import httpx

from llm_bench.config import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE

from .base import CompletionClient, CompletionError, CompletionResponse


class OpenAICompatClient(CompletionClient):
    """POSTs chat completion requests to a single endpoint URL."""

    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float | None = 60.0,
        max_connections: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            limits=httpx.Limits(max_connections=max_connections),
            transport=transport,
        )

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.model:
            body["model"] = self.model
        return body

    async def complete(self, prompt: str) -> CompletionResponse:
        try:
            response = await self.client.post(
                self.endpoint, json=self.build_request_body(prompt)
            )
        except httpx.TimeoutException as e:
            raise CompletionError(f"Request timed out: {e!r}") from e
        except httpx.InvalidURL as e:
            raise CompletionError(f"Invalid endpoint URL: {e}") from e
        except httpx.HTTPError as e:
            raise CompletionError(f"Request failed: {e!r}") from e

        if not response.is_success:
            raise CompletionError(
                f"HTTP {response.status_code}: {_truncate(response.text)}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionError(
                f"Response is not valid JSON: {_truncate(response.text)}"
            ) from e

        return parse_completion(data)

    async def aclose(self) -> None:
        await self.client.aclose()


def parse_completion(data: Any) -> CompletionResponse:
    """Extract ``choices[0].message.content`` and usage from a response body."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise CompletionError(
            f"Malformed response: missing choices[0].message.content ({e!r})"
        ) from e
    if not isinstance(content, str):
        raise CompletionError(
            f"Malformed response: choices[0].message.content is {type(content).__name__}"
        )

    usage = data.get("usage") if isinstance(data, dict) else None
    if not isinstance(usage, dict):
        usage = {}

    return CompletionResponse(
        content=content,
        prompt_tokens=_token_count(usage.get("prompt_tokens")),
        completion_tokens=_token_count(usage.get("completion_tokens")),
    )


def _token_count(value: Any) -> int | None:
    # bool is an int subclass; reject it along with negatives and non-numbers
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _truncate(text: str, limit: int = 500) -> str:
    return text if len(text) <= limit else text[:limit] + "..."
