from __future__ import annotations
from typing import Dict, Mapping


class CalculationError(ValueError):
    """Base class for scenarios the calculator refuses to compute."""


class ScenarioValidationError(CalculationError):
    """One or more validation messages were reported for the scenario."""

    def __init__(self, errors: Mapping[str, str]):
        self.errors: Dict[str, str] = dict(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors.values())}")


class MissingRevenuePercentageError(CalculationError):
    def __init__(self):
        super().__init__("Revenue percentage is required for tech company calculations")
