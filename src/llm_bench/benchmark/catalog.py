"""Default task sets and custom category registration."""

from __future__ import annotations

import math
import string
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError

from .base import Task

TASKS_PER_DEFAULT_CATEGORY = 30

DEFAULT_CATEGORIES = ("math", "logic", "qa", "code", "text")


class CatalogError(ValueError):
    """Raised when a category cannot be registered."""


class TaskParseError(CatalogError):
    """Raised when a custom task payload is malformed."""


class _TaskRecord(BaseModel):
    question: str = Field(min_length=1)
    expected_answer: str = Field(
        validation_alias=AliasChoices("expectedAnswer", "expected_answer", "answer"),
    )


_TASK_LIST = TypeAdapter(list[_TaskRecord])


def parse_tasks(payload: str | bytes) -> tuple[Task, ...]:
    """Parse a JSON array of {question, expectedAnswer} records.

    Raises:
        TaskParseError: if the payload is not valid JSON, is not a list of
            task records, or holds no tasks at all.
    """
    try:
        records = _TASK_LIST.validate_json(payload)
    except ValidationError as e:
        raise TaskParseError(f"Malformed task payload: {e}") from e
    if not records:
        raise TaskParseError("Task payload contains no tasks")
    return tuple(Task(question=r.question, expected_answer=r.expected_answer) for r in records)


def build_default_tasks(
    per_category: int = TASKS_PER_DEFAULT_CATEGORY,
) -> Mapping[str, tuple[Task, ...]]:
    """Build the built-in task sets. Called once; the result is read-only."""
    numbers = range(1, per_category + 1)
    tasks = {
        "math": tuple(
            Task(
                question=f"Compute the square root of {n}, rounded to two decimal places.",
                expected_answer=f"{math.sqrt(n):.2f}",
            )
            for n in numbers
        ),
        "logic": tuple(
            Task(
                question=f"If A = {n} and B = {n + 1}, what is A + B?",
                expected_answer=str(2 * n + 1),
            )
            for n in numbers
        ),
        "qa": tuple(
            Task(
                question=f"What is letter number {n} of the English alphabet?",
                expected_answer=letter,
            )
            for n, letter in zip(numbers, string.ascii_uppercase)
        ),
        "code": tuple(
            Task(
                question=f"Write a function that computes the factorial of {n}.",
                expected_answer="def factorial(n): return 1 if n <= 1 else n * factorial(n - 1)",
            )
            for n in numbers
        ),
        "text": tuple(
            Task(
                question=f"Describe the number {n} in one sentence.",
                expected_answer=f"This is the number {n}.",
            )
            for n in numbers
        ),
    }
    return MappingProxyType(tasks)


class TaskCatalog:
    """Categories available for selection during a session.

    Categories can be added but never removed or replaced.
    """

    def __init__(self, defaults: Mapping[str, tuple[Task, ...]] | None = None):
        self._categories: dict[str, tuple[Task, ...]] = dict(
            build_default_tasks() if defaults is None else defaults
        )

    def register(self, category: str, tasks: list[Task] | tuple[Task, ...]) -> None:
        name = category.strip()
        if not name:
            raise CatalogError("Category name must not be empty")
        if name in self._categories:
            raise CatalogError(f"Category already registered: {name}")
        if not tasks:
            raise CatalogError(f"Category {name} has no tasks")
        self._categories[name] = tuple(tasks)

    def register_json(self, category: str, payload: str | bytes) -> tuple[Task, ...]:
        """Parse a JSON payload and register it; nothing is registered on error."""
        tasks = parse_tasks(payload)
        self.register(category, tasks)
        return tasks

    def register_file(self, category: str, path: str | Path) -> tuple[Task, ...]:
        try:
            payload = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise TaskParseError(f"Cannot read tasks for {category} from {path}: {e}") from e
        return self.register_json(category, payload)

    def get(self, category: str) -> tuple[Task, ...]:
        if category not in self._categories:
            raise KeyError(f"Unknown category: {category}")
        return self._categories[category]

    def __contains__(self, category: object) -> bool:
        return category in self._categories

    @property
    def categories(self) -> list[str]:
        return list(self._categories.keys())
