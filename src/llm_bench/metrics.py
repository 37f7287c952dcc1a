"""Per-category metrics derived from task results."""

from __future__ import annotations

from typing import Sequence

from llm_bench.benchmark.base import CategoryReport, TaskResult


def accuracy(results: Sequence[TaskResult]) -> float:
    """Percentage of successful results; 0 for an empty sequence."""
    if not results:
        return 0.0
    successful = sum(1 for r in results if r.success)
    return 100.0 * successful / len(results)


def average_tokens_per_second(results: Sequence[TaskResult]) -> float:
    """Mean rate over results that have one; 0 if none do."""
    rates = [r.tokens_per_second for r in results if r.tokens_per_second is not None]
    if not rates:
        return 0.0
    return sum(rates) / len(rates)


def total_tokens(results: Sequence[TaskResult]) -> int:
    return sum(r.total_tokens for r in results)


def build_category_report(category: str, results: Sequence[TaskResult]) -> CategoryReport:
    results = tuple(results)
    return CategoryReport(
        category=category,
        results=results,
        accuracy=accuracy(results),
        average_tokens_per_second=average_tokens_per_second(results),
        total_tokens=total_tokens(results),
    )
