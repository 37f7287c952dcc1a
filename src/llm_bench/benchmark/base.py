"""Base benchmark task and result data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Task:
    """A single question / expected-answer pair."""
    question: str
    expected_answer: str


@dataclass(frozen=True)
class TaskResult:
    """Measured outcome of sending one task to the endpoint."""
    question: str
    expected_answer: str
    success: bool
    actual_answer: str | None = None
    error: str | None = None
    duration_seconds: float | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
    tokens_per_second: float | None = None

    @classmethod
    def succeeded(
        cls,
        task: Task,
        actual_answer: str,
        duration_seconds: float,
        input_tokens: int,
        output_tokens: int,
    ) -> TaskResult:
        total = input_tokens + output_tokens
        rate = total / duration_seconds if duration_seconds > 0 else None
        return cls(
            question=task.question,
            expected_answer=task.expected_answer,
            success=True,
            actual_answer=actual_answer,
            duration_seconds=duration_seconds,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            tokens_per_second=rate,
        )

    @classmethod
    def failed(
        cls,
        task: Task,
        error: str,
        duration_seconds: float | None = None,
    ) -> TaskResult:
        return cls(
            question=task.question,
            expected_answer=task.expected_answer,
            success=False,
            error=error or "Unknown error",
            duration_seconds=duration_seconds,
        )

    @property
    def total_tokens(self) -> int:
        return (self.input_tokens or 0) + (self.output_tokens or 0)


@dataclass(frozen=True)
class CategoryReport:
    """Aggregated metrics for one category. Built by metrics.build_category_report."""
    category: str
    results: tuple[TaskResult, ...]
    accuracy: float
    average_tokens_per_second: float
    total_tokens: int

    @property
    def input_tokens(self) -> int:
        return sum(r.input_tokens or 0 for r in self.results)

    @property
    def output_tokens(self) -> int:
        return sum(r.output_tokens or 0 for r in self.results)

    @property
    def total_duration(self) -> float:
        return sum(r.duration_seconds or 0.0 for r in self.results)


# category name -> report, in the order the categories were run
BenchmarkReport = dict[str, CategoryReport]
