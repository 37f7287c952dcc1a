"""Batch scheduler: runs tasks concurrently, at most ``concurrency`` at a time."""

from __future__ import annotations

import asyncio
from typing import Callable, Iterator, Sequence, TypeVar

from llm_bench.benchmark.base import Task, TaskResult
from llm_bench.executor import TokenEstimator, execute_task
from llm_bench.llm.base import CompletionClient
from llm_bench.tokens import estimate_tokens

T = TypeVar("T")


def batched(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield contiguous slices of ``items``; the last one may be shorter."""
    if size < 1:
        raise ValueError(f"Batch size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start:start + size]


async def run_tasks(
    client: CompletionClient,
    tasks: Sequence[Task],
    concurrency: int,
    cancel_event: asyncio.Event | None = None,
    estimator: TokenEstimator = estimate_tokens,
    on_result: Callable[[TaskResult], None] | None = None,
) -> list[TaskResult]:
    """Execute ``tasks`` in batches of ``concurrency`` and return results in task order.

    Each batch runs to completion before the next one starts. A failed task
    does not stop the run. If ``cancel_event`` is set, no further batch is
    started and the results gathered so far are returned.
    """
    results: list[TaskResult] = []
    for batch in batched(tasks, concurrency):
        if cancel_event is not None and cancel_event.is_set():
            break
        batch_results = await asyncio.gather(
            *(execute_task(client, task, estimator) for task in batch)
        )
        results.extend(batch_results)
        if on_result is not None:
            for result in batch_results:
                on_result(result)
    return results
