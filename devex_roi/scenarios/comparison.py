from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from devex_roi.calculator import CalculationError, CalculationResults, Scenario, calculate
from devex_roi.calculator.validator import as_float
from devex_roi.calculator.formatting import (
    format_currency,
    format_multiple,
    format_number,
    format_percentage,
)

NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class ComparisonRow:
    metric: str
    values: Dict[str, str]  # scenario id -> formatted value
    best_value: str


@dataclass(frozen=True)
class Comparison:
    rows: List[ComparisonRow] = field(default_factory=list)
    results: Dict[str, CalculationResults] = field(default_factory=dict)
    invalid: Dict[str, str] = field(default_factory=dict)  # scenario id -> error message
    best_scenario_id: Optional[str] = None


def _placeholder(scenario: Scenario) -> CalculationResults:
    return CalculationResults(
        scenario_id=scenario.id,
        total_developer_cost=0,
        cost_avoidance=0,
        roi_multiple=0,
        roi_percentage=0,
    )


def _row(metric: str, items: Sequence[tuple], fmt: Callable[[float], str], pick: Callable) -> ComparisonRow:
    # items: (scenario id, raw value); values a float cannot hold show as N/A
    shown = [(sid, as_float(v)) for sid, v in items]
    numbers = [v for _, v in shown if v is not None]
    return ComparisonRow(
        metric=metric,
        values={sid: fmt(v) if v is not None else NOT_APPLICABLE for sid, v in shown},
        best_value=fmt(pick(numbers)) if numbers else NOT_APPLICABLE,
    )


def compare_scenarios(scenarios: Sequence[Scenario]) -> Comparison:
    """Calculate every scenario and lay the key metrics side by side.

    Scenarios that fail validation still get a column, filled from a
    zero-valued placeholder result, and their error is reported in
    ``invalid``.
    """
    if not scenarios:
        return Comparison()

    results: Dict[str, CalculationResults] = {}
    invalid: Dict[str, str] = {}
    for s in scenarios:
        try:
            results[s.id] = calculate(s)
        except CalculationError as e:
            invalid[s.id] = str(e)
            results[s.id] = _placeholder(s)

    res = [results[s.id] for s in scenarios]
    rows = [
        ComparisonRow(
            metric="Business Type",
            values={s.id: "Tech Company" if s.business_type == "tech" else "Traditional Business"
                    for s in scenarios},
            best_value=NOT_APPLICABLE,
        ),
        _row("Developers", [(s.id, s.developer_count) for s in scenarios], format_number, max),
        _row("Cost per Developer", [(s.id, s.annual_cost_per_developer) for s in scenarios],
             format_currency, min),
        _row("CTS-SW Improvement", [(s.id, s.cts_sw_improvement_percent) for s in scenarios],
             format_percentage, max),
        _row("Solution Cost", [(s.id, s.solution_cost) for s in scenarios], format_currency, min),
        _row("Total Developer Cost", [(r.scenario_id, r.total_developer_cost) for r in res],
             format_currency, max),
        _row("Cost Avoidance", [(r.scenario_id, r.cost_avoidance) for r in res], format_currency, max),
        _row("ROI Multiple", [(r.scenario_id, r.roi_multiple) for r in res], format_multiple, max),
        _row("ROI Percentage", [(r.scenario_id, r.roi_percentage) for r in res], format_percentage, max),
    ]

    tech_ids = {s.id for s in scenarios if s.business_type == "tech"}
    if tech_ids:
        for metric, attr, fmt in (
            ("Gross Margin Improvement", "gross_margin_improvement", format_currency),
            ("Profit Impact", "profit_impact", format_currency),
        ):
            values: Dict[str, str] = {}
            tech_values: List[float] = []
            for r in res:
                v = getattr(r, attr)
                if r.scenario_id in tech_ids and v is not None:
                    values[r.scenario_id] = fmt(v)
                    tech_values.append(v)
                else:
                    values[r.scenario_id] = NOT_APPLICABLE
            best = fmt(max(tech_values)) if tech_values else NOT_APPLICABLE
            rows.append(ComparisonRow(metric=metric, values=values, best_value=best))

    best_result = res[0]
    for r in res[1:]:
        if r.roi_multiple > best_result.roi_multiple:
            best_result = r

    return Comparison(rows=rows, results=results, invalid=invalid, best_scenario_id=best_result.scenario_id)


def comparison_to_dict(c: Comparison) -> Dict[str, Any]:
    return {
        "rows": [{"metric": r.metric, "values": r.values, "best_value": r.best_value} for r in c.rows],
        "results": {sid: r.to_dict() for sid, r in c.results.items()},
        "invalid": c.invalid,
        "best_scenario_id": c.best_scenario_id,
    }
