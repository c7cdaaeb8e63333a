from __future__ import annotations
import dataclasses
import logging
from typing import List

from devex_roi.logging_utils import log_event

from .errors import MissingRevenuePercentageError, ScenarioValidationError
from .formatting import format_number
from .models import CalculationResults, CalculationStep, Scenario, SupportingMetrics
from .ranges import BASELINE_PROFIT_MARGIN
from .validator import ValidationErrors, validate_scenario

logger = logging.getLogger(__name__)


def validate_inputs(scenario: Scenario) -> ValidationErrors:
    return validate_scenario(scenario)


def _require_valid(scenario: Scenario) -> None:
    errors = validate_inputs(scenario)
    if errors:
        log_event(logger, logging.DEBUG, "calculation.rejected",
                  scenario_id=scenario.id, fields=sorted(errors))
        raise ScenarioValidationError(errors)


def calculate_traditional_business(scenario: Scenario) -> CalculationResults:
    """CTS-SW model for businesses where software supports the product.

    Cost avoidance = developer count x annual cost x improvement %
    ROI multiple   = cost avoidance / solution cost
    ROI %          = (ROI multiple - 1) x 100
    """
    _require_valid(scenario)

    total_developer_cost = scenario.developer_count * scenario.annual_cost_per_developer
    cost_avoidance = total_developer_cost * (scenario.cts_sw_improvement_percent / 100)
    roi_multiple = cost_avoidance / scenario.solution_cost
    roi_percentage = (roi_multiple - 1) * 100

    steps = [
        CalculationStep(
            step=1,
            description="Calculate Total Developer Cost",
            formula="Developer Count × Annual Cost per Developer",
            calculation=(f"{format_number(scenario.developer_count)} × "
                         f"${format_number(scenario.annual_cost_per_developer)}"),
            result=total_developer_cost,
            explanation="Total annual cost of all developers including salaries, benefits, and tooling",
        ),
        CalculationStep(
            step=2,
            description="Calculate Cost Avoidance",
            formula="Total Developer Cost × CTS-SW Improvement %",
            calculation=(f"${format_number(total_developer_cost)} × "
                         f"{format_number(scenario.cts_sw_improvement_percent)}%"),
            result=cost_avoidance,
            explanation="Annual cost savings from improved developer productivity using CTS-SW framework",
        ),
        CalculationStep(
            step=3,
            description="Calculate ROI Multiple",
            formula="Cost Avoidance ÷ Solution Cost",
            calculation=(f"${format_number(cost_avoidance)} ÷ "
                         f"${format_number(scenario.solution_cost)}"),
            result=roi_multiple,
            explanation="Return on investment multiple - how many times the investment is returned annually",
        ),
    ]

    log_event(logger, logging.DEBUG, "calculation.completed",
              scenario_id=scenario.id, pipeline="traditional", roi_multiple=roi_multiple)
    return CalculationResults(
        scenario_id=scenario.id,
        total_developer_cost=total_developer_cost,
        cost_avoidance=cost_avoidance,
        roi_multiple=roi_multiple,
        roi_percentage=roi_percentage,
        calculation_steps=tuple(steps),
        supporting_metrics=SupportingMetrics(),
    )


def calculate_tech_company(scenario: Scenario) -> CalculationResults:
    """CTS-SW model for companies whose revenue comes from the software itself.

    Extends the traditional result with:
    - gross margin improvement = cost avoidance x revenue %
    - profit impact = gross margin improvement
    - profit boost % = profit impact / (total developer cost x 10%) x 100
    """
    _require_valid(scenario)

    # A zero share is accepted by the validator but not by this pipeline.
    if scenario.revenue_percentage is None or scenario.revenue_percentage == 0:
        raise MissingRevenuePercentageError()

    base = calculate_traditional_business(scenario)
    total_developer_cost = base.total_developer_cost
    cost_avoidance = base.cost_avoidance

    gross_margin_improvement = cost_avoidance * (scenario.revenue_percentage / 100)
    profit_impact = gross_margin_improvement
    estimated_current_profit = total_developer_cost * BASELINE_PROFIT_MARGIN
    profit_boost_percentage = (
        (profit_impact / estimated_current_profit) * 100 if estimated_current_profit > 0 else 0
    )

    steps: List[CalculationStep] = list(base.calculation_steps)
    steps.extend([
        CalculationStep(
            step=4,
            description="Calculate Gross Margin Improvement (Tech Company)",
            formula="Cost Avoidance × Revenue from Software Development %",
            calculation=(f"{format_number(cost_avoidance)} × "
                         f"{format_number(scenario.revenue_percentage)}%"),
            result=gross_margin_improvement,
            explanation=("For tech companies, developer productivity improvements directly "
                         "impact gross margins on software revenue"),
        ),
        CalculationStep(
            step=5,
            description="Calculate Profit Impact",
            formula="Gross Margin Improvement (flows to profit)",
            calculation=format_number(gross_margin_improvement),
            result=profit_impact,
            explanation="Gross margin improvements from developer productivity typically flow directly to profit",
        ),
        CalculationStep(
            step=6,
            description="Calculate Profit Boost Percentage",
            formula="Profit Impact ÷ Estimated Current Profit × 100",
            calculation=(f"{format_number(profit_impact)} ÷ "
                         f"{format_number(estimated_current_profit)} × 100"),
            result=profit_boost_percentage,
            explanation="Percentage increase in profit relative to baseline (assuming 10% current profit margin)",
        ),
    ])

    log_event(logger, logging.DEBUG, "calculation.completed",
              scenario_id=scenario.id, pipeline="tech", roi_multiple=base.roi_multiple)
    return dataclasses.replace(
        base,
        gross_margin_improvement=gross_margin_improvement,
        profit_impact=profit_impact,
        profit_boost_percentage=profit_boost_percentage,
        calculation_steps=tuple(steps),
    )


def calculate(scenario: Scenario) -> CalculationResults:
    """Pick the pipeline from the scenario's business type."""
    if scenario.business_type == "tech":
        return calculate_tech_company(scenario)
    return calculate_traditional_business(scenario)
