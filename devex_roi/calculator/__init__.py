"""CTS-SW calculation engine.

- ranges.py: validation ranges, heuristic thresholds and benchmark constants
- models.py: Scenario / CalculationStep / CalculationResults values
- validator.py: per-field and cross-field input validation
- engine.py: traditional and tech-company pipelines
- formatting.py: number formatting for step text and summaries
"""

from .engine import calculate, calculate_tech_company, calculate_traditional_business
from .errors import CalculationError, MissingRevenuePercentageError, ScenarioValidationError
from .models import CalculationResults, CalculationStep, Scenario
from .validator import validate_field, validate_scenario

__all__ = [
    "CalculationError",
    "CalculationResults",
    "CalculationStep",
    "MissingRevenuePercentageError",
    "Scenario",
    "ScenarioValidationError",
    "calculate",
    "calculate_tech_company",
    "calculate_traditional_business",
    "validate_field",
    "validate_scenario",
]
