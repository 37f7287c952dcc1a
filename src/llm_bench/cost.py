"""GPU cost model.

Cost is rental time: ``hours * cost_per_hour * gpu_count``, where time is the
sum of per-task request durations. All ratios with a zero denominator are 0.

The input/output split of time and cost is an approximation: the total is
divided in proportion to input vs. output token counts. Prefill and decode
are not timed separately, so these figures are estimates, not measurements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from llm_bench.benchmark.base import BenchmarkReport, CategoryReport
from llm_bench.config import GPUCostConfig

SECONDS_PER_HOUR = 3600


def gpu_cost(duration_seconds: float, config: GPUCostConfig) -> float:
    return (duration_seconds / SECONDS_PER_HOUR) * config.cost_per_hour * config.count


def category_cost(report: CategoryReport, config: GPUCostConfig) -> float:
    return gpu_cost(report.total_duration, config)


def cost_per_thousand_tokens(cost: float, tokens: int) -> float:
    if tokens <= 0:
        return 0.0
    return cost * 1000 / tokens


def split_by_tokens(value: float, part_tokens: int, total_tokens: int) -> float:
    """Share of ``value`` attributed to ``part_tokens`` out of ``total_tokens``."""
    if total_tokens <= 0:
        return 0.0
    return value * part_tokens / total_tokens


@dataclass(frozen=True)
class CostSummary:
    total_cost: float = 0.0
    total_duration: float = 0.0
    total_tokens: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    input_duration: float = 0.0  # estimated, see module docstring
    output_duration: float = 0.0
    cost_per_category: dict[str, float] = field(default_factory=dict)
    # category -> cost per 1000 tokens
    cost_per_token_category: dict[str, float] = field(default_factory=dict)

    @property
    def input_cost(self) -> float:
        return split_by_tokens(self.total_cost, self.input_tokens, self.total_tokens)

    @property
    def output_cost(self) -> float:
        return split_by_tokens(self.total_cost, self.output_tokens, self.total_tokens)

    @property
    def cost_per_thousand_tokens(self) -> float:
        return cost_per_thousand_tokens(self.total_cost, self.total_tokens)

    @property
    def cost_per_thousand_input_tokens(self) -> float:
        return cost_per_thousand_tokens(self.input_cost, self.input_tokens)

    @property
    def cost_per_thousand_output_tokens(self) -> float:
        return cost_per_thousand_tokens(self.output_cost, self.output_tokens)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_cost": self.total_cost,
            "total_duration": self.total_duration,
            "total_tokens": self.total_tokens,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "input_duration": self.input_duration,
            "output_duration": self.output_duration,
            "input_cost": self.input_cost,
            "output_cost": self.output_cost,
            "cost_per_thousand_tokens": self.cost_per_thousand_tokens,
            "cost_per_thousand_input_tokens": self.cost_per_thousand_input_tokens,
            "cost_per_thousand_output_tokens": self.cost_per_thousand_output_tokens,
            "cost_per_category": dict(self.cost_per_category),
            "cost_per_token_category": dict(self.cost_per_token_category),
        }


def summarize_costs(report: BenchmarkReport, config: GPUCostConfig) -> CostSummary:
    """Compute the whole cost summary for one run's report."""
    cost_per_category: dict[str, float] = {}
    cost_per_token_category: dict[str, float] = {}
    total_duration = 0.0
    total_tokens = 0
    input_tokens = 0
    output_tokens = 0

    for category, category_report in report.items():
        cost = category_cost(category_report, config)
        cost_per_category[category] = cost
        cost_per_token_category[category] = cost_per_thousand_tokens(
            cost, category_report.total_tokens
        )
        total_duration += category_report.total_duration
        total_tokens += category_report.total_tokens
        input_tokens += category_report.input_tokens
        output_tokens += category_report.output_tokens

    return CostSummary(
        total_cost=sum(cost_per_category.values()),
        total_duration=total_duration,
        total_tokens=total_tokens,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        input_duration=split_by_tokens(total_duration, input_tokens, total_tokens),
        output_duration=split_by_tokens(total_duration, output_tokens, total_tokens),
        cost_per_category=cost_per_category,
        cost_per_token_category=cost_per_token_category,
    )
