"""Structured JSON benchmark logger."""

from __future__ import annotations

import json
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any

from llm_bench.benchmark.base import CategoryReport, TaskResult


class BenchmarkLogger:
    """Logs all benchmark events as structured JSON lines."""

    def __init__(self, run_id: str, output_dir: str = "results"):
        self.run_id = run_id
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = self.output_dir / f"{run_id}.jsonl"
        self._events: list[dict[str, Any]] = []

    def _write_event(self, event: dict[str, Any]) -> None:
        event["run_id"] = self.run_id
        event["timestamp"] = time.time()
        self._events.append(event)
        with open(self.log_path, "a") as f:
            f.write(json.dumps(event, default=str) + "\n")

    @property
    def events(self) -> list[dict[str, Any]]:
        return list(self._events)

    def log_run_start(self, config: dict[str, Any]) -> None:
        self._write_event({
            "event": "run_start",
            "config": config,
        })

    def log_task_result(self, category: str, result: TaskResult) -> None:
        event = {"event": "task_result", "category": category}
        event.update(asdict(result))
        if event["actual_answer"]:
            event["actual_answer"] = event["actual_answer"][:1000]
        self._write_event(event)

    def log_category_end(self, report: CategoryReport) -> None:
        self._write_event({
            "event": "category_end",
            "category": report.category,
            "task_count": len(report.results),
            "accuracy": report.accuracy,
            "average_tokens_per_second": report.average_tokens_per_second,
            "total_tokens": report.total_tokens,
            "duration_seconds": report.total_duration,
        })

    def log_run_end(self, summary: dict[str, Any]) -> None:
        self._write_event({
            "event": "run_end",
            "summary": summary,
        })
