"""Benchmark harness: validates a run, executes categories, builds the report."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from llm_bench.benchmark.base import BenchmarkReport, TaskResult
from llm_bench.benchmark.catalog import TaskCatalog
from llm_bench.config import BenchmarkConfig, ConfigurationError
from llm_bench.cost import CostSummary, summarize_costs
from llm_bench.executor import TokenEstimator
from llm_bench.llm import create_client
from llm_bench.llm.base import CompletionClient
from llm_bench.logging.logger import BenchmarkLogger
from llm_bench.metrics import build_category_report
from llm_bench.scheduler import run_tasks
from llm_bench.tokens import estimate_tokens

ResultCallback = Callable[[str, TaskResult], None]


def build_catalog(config: BenchmarkConfig, catalog: TaskCatalog | None = None) -> TaskCatalog:
    """Return a catalog holding the defaults plus the config's custom task files.

    Raises:
        CatalogError: if a custom task file is unreadable or malformed.
    """
    catalog = catalog or TaskCatalog()
    for category, path in config.custom_tasks.items():
        catalog.register_file(category, path)
    return catalog


@dataclass(frozen=True)
class BenchmarkRun:
    """Snapshot of one completed (or cancelled) run."""
    report: BenchmarkReport
    cost_summary: CostSummary
    cancelled: bool = False
    config: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "config": self.config,
            "cancelled": self.cancelled,
            "categories": {
                name: {
                    "accuracy": r.accuracy,
                    "average_tokens_per_second": r.average_tokens_per_second,
                    "total_tokens": r.total_tokens,
                    "input_tokens": r.input_tokens,
                    "output_tokens": r.output_tokens,
                    "duration_seconds": r.total_duration,
                    "results": [
                        {
                            "question": t.question,
                            "expected_answer": t.expected_answer,
                            "success": t.success,
                            "actual_answer": t.actual_answer,
                            "error": t.error,
                            "duration_seconds": t.duration_seconds,
                            "input_tokens": t.input_tokens,
                            "output_tokens": t.output_tokens,
                            "tokens_per_second": t.tokens_per_second,
                        }
                        for t in r.results
                    ],
                }
                for name, r in self.report.items()
            },
            "cost": self.cost_summary.to_dict(),
        }


class BenchmarkHarness:
    """Runs the selected categories one after another against one endpoint."""

    def __init__(
        self,
        config: BenchmarkConfig,
        catalog: TaskCatalog,
        logger: BenchmarkLogger | None = None,
        client: CompletionClient | None = None,
        estimator: TokenEstimator = estimate_tokens,
    ):
        self.config = config
        self.catalog = catalog
        self.logger = logger
        self.estimator = estimator
        self._client = client

    def validate(self) -> None:
        """Raise ConfigurationError if the run cannot start."""
        url = self.config.endpoint.url.strip()
        if not url:
            raise ConfigurationError("Endpoint URL is required")
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid endpoint URL {url!r}: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ConfigurationError(f"Endpoint URL must be an http(s) URL with a host: {url!r}")
        if not self.config.categories:
            raise ConfigurationError("At least one category must be selected")
        duplicates = sorted({c for c in self.config.categories if self.config.categories.count(c) > 1})
        if duplicates:
            raise ConfigurationError(f"Categories selected more than once: {', '.join(duplicates)}")
        unknown = [c for c in self.config.categories if c not in self.catalog]
        if unknown:
            raise ConfigurationError(f"Unknown categories: {', '.join(unknown)}")

    async def run(
        self,
        cancel_event: asyncio.Event | None = None,
        on_result: ResultCallback | None = None,
    ) -> BenchmarkRun:
        """Run every selected category and return the report with its costs.

        Categories run strictly in sequence. Setting ``cancel_event`` stops
        the run after the batch in flight; everything finished is reported.
        """
        self.validate()
        config_dump = self.config.model_dump(exclude={"endpoint": {"api_key"}})
        if self.logger:
            self.logger.log_run_start(config_dump)

        client = self._client or create_client(
            self.config.endpoint, max_connections=self.config.concurrency
        )
        report: BenchmarkReport = {}
        cancelled = False
        try:
            for category in self.config.categories:
                if cancel_event is not None and cancel_event.is_set():
                    cancelled = True
                    break
                tasks = self.catalog.get(category)
                if not tasks:
                    continue

                results = await run_tasks(
                    client,
                    tasks,
                    self.config.concurrency,
                    cancel_event=cancel_event,
                    estimator=self.estimator,
                    on_result=self._result_handler(category, on_result),
                )
                if len(results) < len(tasks):
                    cancelled = True
                if results:
                    category_report = build_category_report(category, results)
                    report[category] = category_report
                    if self.logger:
                        self.logger.log_category_end(category_report)
                if cancelled:
                    break
        finally:
            if self._client is None:
                await client.aclose()

        run = BenchmarkRun(
            report=report,
            cost_summary=summarize_costs(report, self.config.gpu),
            cancelled=cancelled,
            config=config_dump,
        )
        if self.logger:
            self.logger.log_run_end({
                "cancelled": cancelled,
                "categories": list(report.keys()),
                "cost": run.cost_summary.to_dict(),
            })
        return run

    def _result_handler(
        self, category: str, on_result: ResultCallback | None
    ) -> Callable[[TaskResult], None]:
        def handle(result: TaskResult) -> None:
            if self.logger:
                self.logger.log_task_result(category, result)
            if on_result is not None:
                on_result(category, result)
        return handle
