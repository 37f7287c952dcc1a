"""Configuration data models for a benchmark run."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


class ConfigurationError(ValueError):
    """Raised when a run cannot start because its configuration is invalid."""


class EndpointConfig(BaseModel):
    url: str = ""
    api_key: str | None = None
    model: str | None = None
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout_seconds: float = 60.0


class GPUCostConfig(BaseModel):
    """GPU rental rate used to turn elapsed time into money."""
    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    count: int = Field(default=1, ge=1)
    cost_per_hour: float = Field(default=0.0, ge=0)


class BenchmarkConfig(BaseModel):
    """Configuration for a full benchmark run."""
    run_id: str = "benchmark"
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    concurrency: int = Field(default=1, ge=1)
    categories: list[str] = Field(default_factory=list)
    # category name -> path of a JSON task payload
    custom_tasks: dict[str, str] = Field(default_factory=dict)
    gpu: GPUCostConfig
    output_dir: str = "results"


def load_config(path: str | Path) -> BenchmarkConfig:
    """Load benchmark config from YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed YAML in config {path}: {e}") from e
    try:
        return BenchmarkConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {path}: {e}") from e
