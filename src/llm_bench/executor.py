"""Single-task execution: one timed request, one TaskResult."""

from __future__ import annotations

import time
from typing import Any, Callable

from llm_bench.benchmark.base import Task, TaskResult
from llm_bench.llm.base import CompletionClient, CompletionError
from llm_bench.tokens import estimate_tokens

TokenEstimator = Callable[[str], int]


class Stopwatch:
    """Timing scope; ``elapsed`` is set on exit even if the body raised."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self._start = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> Stopwatch:
        self._start = self._clock()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.elapsed = max(0.0, self._clock() - self._start)


async def execute_task(
    client: CompletionClient,
    task: Task,
    estimator: TokenEstimator = estimate_tokens,
) -> TaskResult:
    """Send ``task.question`` to the endpoint and measure the exchange.

    Never raises for request or token estimation failures: they come back
    as a failed result.
    Provider-reported usage is preferred; a missing count is estimated
    locally from the question (input) or the answer (output).
    """
    stopwatch = Stopwatch()
    try:
        with stopwatch:
            response = await client.complete(task.question)
    except CompletionError as e:
        return TaskResult.failed(task, str(e), duration_seconds=stopwatch.elapsed)

    try:
        input_tokens = response.prompt_tokens
        if input_tokens is None:
            input_tokens = estimator(task.question)
        output_tokens = response.completion_tokens
        if output_tokens is None:
            output_tokens = estimator(response.content)
    except Exception as e:
        # e.g. the tokenizer vocabulary cannot be downloaded
        return TaskResult.failed(
            task, f"Token estimation failed: {e!r}", duration_seconds=stopwatch.elapsed
        )

    return TaskResult.succeeded(
        task,
        actual_answer=response.content,
        duration_seconds=stopwatch.elapsed,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
    )
