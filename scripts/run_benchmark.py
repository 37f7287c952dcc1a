#!/usr/bin/env python3
"""CLI entry point for benchmarking an OpenAI-compatible endpoint."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from pydantic import ValidationError

from llm_bench.benchmark.base import TaskResult
from llm_bench.benchmark.catalog import CatalogError, TaskCatalog
from llm_bench.config import BenchmarkConfig, ConfigurationError, load_config
from llm_bench.harness import BenchmarkHarness, BenchmarkRun, build_catalog
from llm_bench.logging.logger import BenchmarkLogger


def _apply_overrides(config: BenchmarkConfig, args: argparse.Namespace) -> BenchmarkConfig:
    data = config.model_dump()
    endpoint = data["endpoint"]
    if args.endpoint:
        endpoint["url"] = args.endpoint
    if args.model:
        endpoint["model"] = args.model
    endpoint["api_key"] = args.api_key or endpoint["api_key"] or os.environ.get("OPENAI_API_KEY")
    if args.concurrency is not None:
        data["concurrency"] = args.concurrency
    if args.categories:
        data["categories"] = [c.strip() for c in args.categories.split(",") if c.strip()]
    for spec in args.custom_tasks or []:
        category, sep, path = spec.partition("=")
        category = category.strip()
        if not sep or not category or not path:
            raise ConfigurationError(f"--custom-tasks expects CATEGORY=PATH, got {spec!r}")
        data["custom_tasks"][category] = path
        if category not in data["categories"]:
            data["categories"].append(category)
    # CLI values obey the same constraints as YAML ones
    try:
        return BenchmarkConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid arguments: {e}") from e


def _print_progress(category: str, result: TaskResult) -> None:
    if result.success:
        rate = f"{result.tokens_per_second:.1f} tok/s" if result.tokens_per_second else "n/a"
        print(f"  [{category}] OK   {result.duration_seconds:.2f}s | {rate} | {result.question[:60]}")
    else:
        print(f"  [{category}] FAIL {result.error[:80]} | {result.question[:60]}")


def _print_report(run: BenchmarkRun, config: BenchmarkConfig) -> None:
    gpu = config.gpu
    print(f"\n{'='*72}")
    print(f"{'Category':<16}{'Tasks':>7}{'Accuracy':>11}{'Tok/s':>10}{'Tokens':>10}{'Cost':>10}{'Cost/1k':>9}")
    print(f"{'-'*72}")
    summary = run.cost_summary
    for category, report in run.report.items():
        print(f"{category:<16}{len(report.results):>7}{report.accuracy:>10.1f}%"
              f"{report.average_tokens_per_second:>10.1f}{report.total_tokens:>10,}"
              f"{summary.cost_per_category[category]:>10.4f}"
              f"{summary.cost_per_token_category[category]:>9.4f}")
    print(f"{'='*72}")
    print(f"GPU: {gpu.count} x {gpu.model} at {gpu.cost_per_hour * gpu.count:.2f}/hour total")
    print(f"Duration: {summary.total_duration:.2f}s "
          f"(input ~{summary.input_duration:.2f}s, output ~{summary.output_duration:.2f}s)")
    print(f"Tokens: {summary.total_tokens:,} "
          f"(input {summary.input_tokens:,}, output {summary.output_tokens:,})")
    print(f"Total cost: {summary.total_cost:.4f} | per 1k tokens: {summary.cost_per_thousand_tokens:.4f} "
          f"(input ~{summary.cost_per_thousand_input_tokens:.4f}, "
          f"output ~{summary.cost_per_thousand_output_tokens:.4f})")
    if run.cancelled:
        print("Run was cancelled; results are partial.")


def _save_summary(config: BenchmarkConfig, run: BenchmarkRun) -> Path:
    summary_path = Path(config.output_dir) / f"{config.run_id}_summary.json"
    summary_path.parent.mkdir(parents=True, exist_ok=True)
    with open(summary_path, "w") as f:
        json.dump(run.to_dict(), f, indent=2, default=str)
    return summary_path


async def run_benchmark_async(config: BenchmarkConfig, catalog: TaskCatalog) -> BenchmarkRun:
    """Run with Ctrl-C wired to cancellation between batches."""
    logger = BenchmarkLogger(config.run_id, config.output_dir)
    harness = BenchmarkHarness(config=config, catalog=catalog, logger=logger)
    harness.validate()

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
    except NotImplementedError:
        pass  # Windows event loops

    print(f"Benchmarking {config.endpoint.url} | categories: {', '.join(config.categories)} "
          f"| concurrency {config.concurrency}")
    return await harness.run(cancel_event=cancel_event, on_result=_print_progress)


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark an OpenAI-compatible endpoint")
    parser.add_argument("--config", required=True, help="Path to benchmark YAML config")
    parser.add_argument("--endpoint", help="Chat completions URL (overrides config)")
    parser.add_argument("--api-key", help="Bearer token (default: config, then OPENAI_API_KEY)")
    parser.add_argument("--model", help="Model name sent in the request body")
    parser.add_argument("--concurrency", type=int, help="Max in-flight requests")
    parser.add_argument("--categories", help="Comma-separated category names")
    parser.add_argument("--custom-tasks", action="append", metavar="CATEGORY=PATH",
                        help="Register a JSON task file as a category (repeatable)")
    parser.add_argument("--list-categories", action="store_true",
                        help="List available categories and exit")
    args = parser.parse_args()

    try:
        config = _apply_overrides(load_config(args.config), args)
        catalog = build_catalog(config)
    except (ConfigurationError, CatalogError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    if args.list_categories:
        for category in catalog.categories:
            print(f"{category}: {len(catalog.get(category))} tasks")
        return

    try:
        run = asyncio.run(run_benchmark_async(config, catalog))
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    _print_report(run, config)
    print(f"\nSummary saved to {_save_summary(config, run)}")


if __name__ == "__main__":
    main()
