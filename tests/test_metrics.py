"""Tests for per-category metric aggregation."""

import pytest

from llm_bench.benchmark.base import Task, TaskResult
from llm_bench.metrics import (
    accuracy,
    average_tokens_per_second,
    build_category_report,
    total_tokens,
)

TASK = Task(question="2+2?", expected_answer="4")


def _ok(duration: float = 1.0, input_tokens: int = 5, output_tokens: int = 5) -> TaskResult:
    return TaskResult.succeeded(
        TASK, actual_answer="4", duration_seconds=duration,
        input_tokens=input_tokens, output_tokens=output_tokens,
    )


def _fail() -> TaskResult:
    return TaskResult.failed(TASK, "HTTP 500: boom", duration_seconds=0.5)


def test_accuracy_empty_is_zero():
    assert accuracy([]) == 0


def test_accuracy_counts_successes():
    assert accuracy([_ok(), _fail(), _ok(), _ok()]) == 75.0
    assert accuracy([_fail(), _fail()]) == 0.0
    assert accuracy([_ok()]) == 100.0


def test_average_tokens_per_second_ignores_missing_rates():
    results = [_ok(duration=1.0), _ok(duration=2.0), _fail()]
    # 10 tok / 1s and 10 tok / 2s
    assert average_tokens_per_second(results) == pytest.approx(7.5)


def test_average_tokens_per_second_without_rates_is_zero():
    assert average_tokens_per_second([_fail(), _fail()]) == 0.0
    assert average_tokens_per_second([]) == 0.0


def test_zero_duration_yields_no_rate():
    result = _ok(duration=0.0)
    assert result.success
    assert result.tokens_per_second is None


def test_total_tokens_treats_missing_as_zero():
    assert total_tokens([_ok(input_tokens=3, output_tokens=4), _fail()]) == 7
    assert total_tokens([]) == 0


def test_build_category_report():
    results = [_ok(duration=2.0, input_tokens=6, output_tokens=2), _fail()]
    report = build_category_report("math", results)
    assert report.category == "math"
    assert report.results == tuple(results)
    assert report.accuracy == 50.0
    assert report.average_tokens_per_second == pytest.approx(4.0)
    assert report.total_tokens == 8
    assert report.input_tokens == 6
    assert report.output_tokens == 2
    assert report.total_duration == pytest.approx(2.5)


def test_failed_result_has_no_answer_or_tokens():
    result = _fail()
    assert result.success is False
    assert result.actual_answer is None
    assert result.error
    assert result.input_tokens is None
    assert result.output_tokens is None
    assert result.tokens_per_second is None
