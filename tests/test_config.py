"""Tests for configuration loading and data models."""

import tempfile
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from llm_bench.config import (
    BenchmarkConfig,
    ConfigurationError,
    EndpointConfig,
    GPUCostConfig,
    load_config,
)


def test_endpoint_config_defaults():
    config = EndpointConfig()
    assert config.url == ""
    assert config.api_key is None
    assert config.model is None
    assert config.temperature == 0.7
    assert config.max_tokens == 1000


def test_benchmark_config_from_dict():
    config = BenchmarkConfig(
        run_id="test_001",
        endpoint=EndpointConfig(url="http://localhost:8000/v1/chat/completions"),
        categories=["math"],
        gpu=GPUCostConfig(model="A100", count=2, cost_per_hour=3.5),
    )
    assert config.run_id == "test_001"
    assert config.concurrency == 1
    assert config.gpu.count == 2
    assert config.custom_tasks == {}


def test_gpu_config_rejects_invalid_fields():
    with pytest.raises(ValidationError):
        GPUCostConfig(model="A100", count=0, cost_per_hour=1.0)
    with pytest.raises(ValidationError):
        GPUCostConfig(model="A100", count=1, cost_per_hour=-1.0)
    with pytest.raises(ValidationError):
        GPUCostConfig(model="", count=1, cost_per_hour=1.0)


def test_gpu_config_is_frozen():
    gpu = GPUCostConfig(model="A100", count=1, cost_per_hour=1.0)
    with pytest.raises(ValidationError):
        gpu.count = 4


def test_concurrency_must_be_positive():
    with pytest.raises(ValidationError):
        BenchmarkConfig(concurrency=0, gpu=GPUCostConfig(model="A100"))


def test_load_config_from_yaml():
    data = {
        "run_id": "yaml_test",
        "concurrency": 4,
        "categories": ["math", "capitals"],
        "custom_tasks": {"capitals": "capitals.json"},
        "endpoint": {
            "url": "http://localhost:8000/v1/chat/completions",
            "model": "qwen",
        },
        "gpu": {"model": "RTX 4090", "count": 2, "cost_per_hour": 10},
    }
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(data, f)
        tmp_path = f.name

    config = load_config(tmp_path)
    assert config.run_id == "yaml_test"
    assert config.concurrency == 4
    assert config.endpoint.model == "qwen"
    assert config.custom_tasks == {"capitals": "capitals.json"}
    assert config.gpu.cost_per_hour == 10.0

    Path(tmp_path).unlink()


def test_load_config_invalid_gpu_raises_configuration_error():
    data = {"gpu": {"model": "RTX 4090", "count": 0, "cost_per_hour": 10}}
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(data, f)
        tmp_path = f.name

    with pytest.raises(ConfigurationError):
        load_config(tmp_path)

    Path(tmp_path).unlink()


def test_load_config_missing_file_raises_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "nope.yaml")


def test_load_config_malformed_yaml_raises_configuration_error(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("gpu: [unclosed\n")
    with pytest.raises(ConfigurationError):
        load_config(path)
