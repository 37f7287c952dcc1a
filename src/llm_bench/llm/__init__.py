"""Clients for the benchmarked completion endpoint."""

from llm_bench.config import EndpointConfig

from .base import CompletionClient, CompletionError, CompletionResponse
from .openai_compat import OpenAICompatClient


def create_client(config: EndpointConfig, max_connections: int | None = None) -> CompletionClient:
    """Factory function to create an endpoint client from config."""
    return OpenAICompatClient(
        endpoint=config.url,
        api_key=config.api_key,
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.timeout_seconds,
        max_connections=max_connections,
    )
