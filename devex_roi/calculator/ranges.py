from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Range:
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


# Inclusive bounds per numeric scenario field.
VALIDATION_RANGES: Mapping[str, Range] = MappingProxyType({
    "developer_count": Range(1, 50_000),
    "annual_cost_per_developer": Range(50_000, 300_000),
    "cts_sw_improvement_percent": Range(0.1, 50),
    "solution_cost": Range(1_000, 100_000_000),
    "revenue_percentage": Range(0, 100),
})

# Cross-field heuristics
HIGH_COST_RATIO = 0.5
LOW_COST_RATIO = 0.005
LOW_COST_IMPROVEMENT_CEILING = 15
SMALL_TEAM_DEVELOPERS = 10
SMALL_TEAM_SOLUTION_COST = 500_000

# Tech pipeline: assumed current profit as a share of total developer cost
BASELINE_PROFIT_MARGIN = 0.10


@dataclass(frozen=True)
class Benchmarks:
    bank_developer_count: int = 1000
    bank_annual_cost_per_developer: float = 130_000
    bank_improvement_percent: float = 15
    bank_solution_cost: float = 2_000_000
    bank_cost_avoidance: float = 19_500_000
    bank_roi_multiple: float = 9.75
    tech_developer_count: int = 400
    tech_annual_cost_per_developer: float = 150_000
    tech_improvement_percent: float = 15
    tech_solution_cost: float = 1_000_000
    tech_revenue_percentage: float = 60
    tech_margin_improvement_points: float = 9
    target_improvement: float = 15.0
    achieved_improvement: float = 15.9


BENCHMARKS = Benchmarks()
