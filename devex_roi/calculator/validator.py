"""Input validation for CTS-SW scenarios.

Every function here returns data describing what is wrong and never raises;
turning errors into failures is the calculator's job. Cross-field heuristics
share the same error mapping as range errors, so they block calculation too.
"""

from __future__ import annotations
import math
from typing import Any, Dict, Mapping, Optional

from .formatting import format_number
from .models import Scenario
from .ranges import (
    HIGH_COST_RATIO,
    LOW_COST_IMPROVEMENT_CEILING,
    LOW_COST_RATIO,
    SMALL_TEAM_DEVELOPERS,
    SMALL_TEAM_SOLUTION_COST,
    VALIDATION_RANGES,
    Range,
)

ValidationErrors = Dict[str, str]

FIELD_DESCRIPTIONS: Mapping[str, Mapping[str, str]] = {
    "developer_count": {
        "label": "Number of Developers",
        "description": "Total number of software developers in your organization",
        "example": "AWS bank example: 1,000 developers",
        "placeholder": "1000",
    },
    "annual_cost_per_developer": {
        "label": "Annual Cost per Developer",
        "description": "Fully-loaded annual cost including salary, benefits, and tooling",
        "example": "AWS example: $130,000 per developer",
        "placeholder": "130000",
    },
    "cts_sw_improvement_percent": {
        "label": "Expected CTS-SW Improvement",
        "description": "Percentage improvement in Cost to Serve Software",
        "example": "AWS achieved: 15.9% improvement",
        "placeholder": "15",
    },
    "solution_cost": {
        "label": "Solution Investment Cost",
        "description": "Total cost of implementing the developer experience solution",
        "example": "AWS bank example: $2,000,000",
        "placeholder": "2000000",
    },
    "revenue_percentage": {
        "label": "Revenue from Software Development",
        "description": "Percentage of company revenue generated by software development",
        "example": "Tech companies typically: 60-80%",
        "placeholder": "60",
    },
}


def is_number(value: Any) -> bool:
    """True for ints and finite floats; bools, strings, None, NaN and inf are not numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints of any size are finite; math.isfinite would overflow on huge ones
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def _rng(name: str) -> Range:
    return VALIDATION_RANGES[name]


def validate_developer_count(count: Any) -> Optional[str]:
    r = _rng("developer_count")
    if not is_number(count):
        return "Developer count is required and must be a number"
    if not isinstance(count, int) and not float(count).is_integer():
        return "Developer count must be a whole number (no decimals)"
    if count < r.min:
        return f"Developer count must be at least {format_number(r.min)}"
    if count > r.max:
        return (f"Developer count cannot exceed {format_number(r.max)} "
                "(consider breaking into smaller teams)")
    return None


def validate_annual_cost_per_developer(cost: Any) -> Optional[str]:
    r = _rng("annual_cost_per_developer")
    if not is_number(cost):
        return "Annual cost per developer is required and must be a number"
    if cost <= 0:
        return "Annual cost per developer must be greater than zero"
    if cost < r.min:
        return (f"Annual cost per developer must be at least ${format_number(r.min)} "
                "(includes salary, benefits, and tooling)")
    if cost > r.max:
        return (f"Annual cost per developer cannot exceed ${format_number(r.max)} "
                "(AWS example: $130K)")
    return None


def validate_cts_sw_improvement(improvement: Any) -> Optional[str]:
    r = _rng("cts_sw_improvement_percent")
    if not is_number(improvement):
        return "CTS-SW improvement percentage is required and must be a number"
    if improvement <= 0:
        return "CTS-SW improvement percentage must be greater than zero"
    if improvement < r.min:
        return f"CTS-SW improvement must be at least {format_number(r.min)}%"
    if improvement > r.max:
        return (f"CTS-SW improvement cannot exceed {format_number(r.max)}% "
                "(be realistic about achievable gains)")
    return None


def validate_solution_cost(cost: Any) -> Optional[str]:
    r = _rng("solution_cost")
    if not is_number(cost):
        return "Solution cost is required and must be a number"
    if cost <= 0:
        return "Solution cost must be greater than zero"
    if cost < r.min:
        return f"Solution cost must be at least ${format_number(r.min)}"
    if cost > r.max:
        return f"Solution cost cannot exceed ${format_number(r.max)}"
    return None


def validate_revenue_percentage(percentage: Any) -> Optional[str]:
    r = _rng("revenue_percentage")
    if not is_number(percentage):
        return "Revenue percentage is required for tech companies"
    if percentage < r.min:
        return f"Revenue percentage must be at least {format_number(r.min)}%"
    if percentage > r.max:
        return f"Revenue percentage cannot exceed {format_number(r.max)}%"
    return None


def _cost_ratio(solution_cost: float, total_developer_cost: float) -> float:
    if total_developer_cost == 0:
        # IEEE division semantics: x/0 is +-inf, 0/0 is nan
        return math.copysign(math.inf, solution_cost) if solution_cost else math.nan
    return solution_cost / total_developer_cost


def as_float(value: Any) -> Optional[float]:
    """float(value) for numbers a float can hold, else None."""
    if not is_number(value):
        return None
    try:
        return float(value)
    except OverflowError:
        return None


def validate_cross_field_constraints(scenario: Scenario) -> ValidationErrors:
    """Heuristics relating investment size to team size and claimed gains.

    The cost-ratio rules need all four inputs as usable numbers. The
    small-team rule only needs the solution cost; a missing developer count
    counts as an empty team.
    """
    errors: ValidationErrors = {}
    developers = as_float(scenario.developer_count)
    cost = as_float(scenario.annual_cost_per_developer)
    solution = as_float(scenario.solution_cost)
    improvement = as_float(scenario.cts_sw_improvement_percent)

    if None not in (developers, cost, solution, improvement):
        total_developer_cost = developers * cost
        cost_ratio = _cost_ratio(solution, total_developer_cost)

        if cost_ratio > HIGH_COST_RATIO:
            errors["solution_cost"] = (
                f"Solution cost (${format_number(scenario.solution_cost)}) seems high relative to "
                f"total developer cost (${format_number(total_developer_cost)}). "
                "Consider if this investment is realistic."
            )

        if cost_ratio < LOW_COST_RATIO and improvement > LOW_COST_IMPROVEMENT_CEILING:
            errors["cts_sw_improvement_percent"] = (
                f"{format_number(scenario.cts_sw_improvement_percent)}% improvement may be unrealistic "
                f"for a relatively small investment (${format_number(scenario.solution_cost)})"
            )

    team = 0 if scenario.developer_count is None else developers
    if team is not None and solution is not None:
        if team < SMALL_TEAM_DEVELOPERS and solution > SMALL_TEAM_SOLUTION_COST:
            errors["general"] = (
                "High solution cost for a small team. Consider if this investment makes "
                f"sense for {format_number(team)} developers."
            )

    return errors


def validate_scenario(scenario: Scenario) -> ValidationErrors:
    """Run every per-field check and the cross-field heuristics.

    Returns a mapping of field name (or "general") to message; empty when the
    scenario can be calculated.
    """
    errors: ValidationErrors = {}
    checks = (
        ("developer_count", validate_developer_count, scenario.developer_count),
        ("annual_cost_per_developer", validate_annual_cost_per_developer, scenario.annual_cost_per_developer),
        ("cts_sw_improvement_percent", validate_cts_sw_improvement, scenario.cts_sw_improvement_percent),
        ("solution_cost", validate_solution_cost, scenario.solution_cost),
    )
    for name, check, value in checks:
        msg = check(value)
        if msg:
            errors[name] = msg

    if scenario.business_type == "tech":
        msg = validate_revenue_percentage(scenario.revenue_percentage)
        if msg:
            errors["revenue_percentage"] = msg

    errors.update(validate_cross_field_constraints(scenario))
    return errors


_FIELD_CHECKS = {
    "developer_count": validate_developer_count,
    "annual_cost_per_developer": validate_annual_cost_per_developer,
    "cts_sw_improvement_percent": validate_cts_sw_improvement,
    "solution_cost": validate_solution_cost,
}


def validate_field(field_name: str, value: Any, business_type: Optional[str] = None) -> Optional[str]:
    """Single-field check for as-you-type validation; no cross-field rules."""
    if not isinstance(field_name, str):
        return None
    if field_name == "revenue_percentage":
        if business_type == "tech":
            return validate_revenue_percentage(value)
        return None
    check = _FIELD_CHECKS.get(field_name)
    return check(value) if check else None


def get_validation_ranges() -> Dict[str, Dict[str, float]]:
    return {name: {"min": r.min, "max": r.max} for name, r in VALIDATION_RANGES.items()}
