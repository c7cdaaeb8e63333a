import math
import unittest

from devex_roi.calculator import Scenario, validate_field, validate_scenario
from devex_roi.calculator.validator import (
    get_validation_ranges,
    validate_annual_cost_per_developer,
    validate_cross_field_constraints,
    validate_cts_sw_improvement,
    validate_developer_count,
    validate_revenue_percentage,
    validate_solution_cost,
)


def bank(**overrides):
    fields = dict(
        business_type="traditional",
        developer_count=1000,
        annual_cost_per_developer=130_000,
        cts_sw_improvement_percent=15,
        solution_cost=2_000_000,
    )
    fields.update(overrides)
    return Scenario(**fields)


class TestFieldValidators(unittest.TestCase):
    def test_developer_count_bounds(self):
        self.assertIsNone(validate_developer_count(1))
        self.assertIsNone(validate_developer_count(50_000))
        self.assertEqual(validate_developer_count(0), "Developer count must be at least 1")
        self.assertEqual(
            validate_developer_count(50_001),
            "Developer count cannot exceed 50,000 (consider breaking into smaller teams)",
        )
        self.assertEqual(validate_developer_count(1.5), "Developer count must be a whole number (no decimals)")

    def test_non_finite_values_are_reported_as_missing(self):
        table = (
            (validate_developer_count, "Developer count is required and must be a number"),
            (validate_annual_cost_per_developer, "Annual cost per developer is required and must be a number"),
            (validate_cts_sw_improvement, "CTS-SW improvement percentage is required and must be a number"),
            (validate_solution_cost, "Solution cost is required and must be a number"),
            (validate_revenue_percentage, "Revenue percentage is required for tech companies"),
        )
        for check, message in table:
            for bad in (None, "100", True, math.nan, math.inf, -math.inf):
                with self.subTest(check=check.__name__, value=bad):
                    self.assertEqual(check(bad), message)

    def test_range_bounds_are_inclusive(self):
        # (check, min, max, just below min, just above max)
        table = (
            (validate_developer_count, 1, 50_000, 0, 50_001),
            (validate_annual_cost_per_developer, 50_000, 300_000, 49_999.99, 300_000.01),
            (validate_cts_sw_improvement, 0.1, 50, 0.09, 50.01),
            (validate_solution_cost, 1_000, 100_000_000, 999.99, 100_000_000.01),
            (validate_revenue_percentage, 0, 100, -0.1, 100.1),
        )
        for check, lo, hi, below, above in table:
            with self.subTest(check=check.__name__):
                self.assertIsNone(check(lo))
                self.assertIsNone(check(hi))
                self.assertIsNotNone(check(below))
                self.assertIsNotNone(check(above))

    def test_huge_integers_are_above_max(self):
        huge = 10 ** 400
        self.assertEqual(
            validate_developer_count(huge),
            "Developer count cannot exceed 50,000 (consider breaking into smaller teams)",
        )
        self.assertEqual(validate_solution_cost(huge), "Solution cost cannot exceed $100,000,000")
        self.assertEqual(validate_field("solution_cost", huge), "Solution cost cannot exceed $100,000,000")
        self.assertEqual(list(validate_scenario(bank(developer_count=huge))), ["developer_count"])
        self.assertEqual(list(validate_scenario(bank(solution_cost=huge))), ["solution_cost"])

    def test_annual_cost(self):
        self.assertEqual(
            validate_annual_cost_per_developer(0),
            "Annual cost per developer must be greater than zero",
        )
        self.assertEqual(
            validate_annual_cost_per_developer(49_999),
            "Annual cost per developer must be at least $50,000 (includes salary, benefits, and tooling)",
        )
        self.assertEqual(
            validate_annual_cost_per_developer(300_001),
            "Annual cost per developer cannot exceed $300,000 (AWS example: $130K)",
        )
        self.assertIsNone(validate_annual_cost_per_developer(300_000))

    def test_improvement(self):
        self.assertEqual(validate_cts_sw_improvement(0.05), "CTS-SW improvement must be at least 0.1%")
        self.assertEqual(
            validate_cts_sw_improvement(51),
            "CTS-SW improvement cannot exceed 50% (be realistic about achievable gains)",
        )
        self.assertEqual(
            validate_cts_sw_improvement(-1), "CTS-SW improvement percentage must be greater than zero"
        )
        self.assertIsNone(validate_cts_sw_improvement(0.1))

    def test_solution_cost(self):
        self.assertEqual(validate_solution_cost(999), "Solution cost must be at least $1,000")
        self.assertEqual(validate_solution_cost(100_000_001), "Solution cost cannot exceed $100,000,000")

    def test_revenue_percentage(self):
        self.assertIsNone(validate_revenue_percentage(0))
        self.assertIsNone(validate_revenue_percentage(100))
        self.assertEqual(validate_revenue_percentage(None), "Revenue percentage is required for tech companies")
        self.assertEqual(validate_revenue_percentage(101), "Revenue percentage cannot exceed 100%")


class TestScenarioValidation(unittest.TestCase):
    def test_bank_benchmark_is_valid(self):
        self.assertEqual(validate_scenario(bank()), {})

    def test_revenue_only_checked_for_tech(self):
        self.assertEqual(validate_scenario(bank(revenue_percentage=None)), {})
        errors = validate_scenario(bank(business_type="tech"))
        self.assertEqual(errors, {"revenue_percentage": "Revenue percentage is required for tech companies"})

    def test_high_cost_ratio(self):
        errors = validate_scenario(bank(developer_count=10, annual_cost_per_developer=100_000, solution_cost=600_000))
        self.assertEqual(
            errors["solution_cost"],
            "Solution cost ($600,000) seems high relative to total developer cost ($1,000,000). "
            "Consider if this investment is realistic.",
        )
        self.assertNotIn("general", errors)

    def test_low_cost_with_large_improvement(self):
        errors = validate_scenario(bank(solution_cost=500_000, cts_sw_improvement_percent=20))
        self.assertEqual(
            errors,
            {"cts_sw_improvement_percent":
             "20% improvement may be unrealistic for a relatively small investment ($500,000)"},
        )
        # 15% is not above the ceiling
        self.assertEqual(validate_scenario(bank(solution_cost=500_000)), {})

    def test_small_team_with_large_solution(self):
        errors = validate_scenario(bank(developer_count=5, annual_cost_per_developer=300_000, solution_cost=600_000))
        self.assertEqual(
            errors,
            {"general": "High solution cost for a small team. Consider if this investment makes sense for 5 developers."},
        )

    def test_cost_ratio_rules_need_every_input(self):
        s = bank(developer_count="1000", solution_cost=90_000_000)
        self.assertEqual(validate_cross_field_constraints(s), {})
        self.assertEqual(list(validate_scenario(s)), ["developer_count"])

    def test_missing_team_size_counts_as_small_team(self):
        errors = validate_scenario(bank(developer_count=None, solution_cost=90_000_000))
        self.assertEqual(sorted(errors), ["developer_count", "general"])
        self.assertEqual(
            errors["general"],
            "High solution cost for a small team. Consider if this investment makes sense for 0 developers.",
        )
        self.assertEqual(validate_cross_field_constraints(bank(developer_count=None, solution_cost=None)), {})

    def test_validate_field(self):
        self.assertEqual(validate_field("developer_count", 0), "Developer count must be at least 1")
        self.assertIsNone(validate_field("solution_cost", 2_000_000))
        self.assertIsNone(validate_field("unknown_field", 1))
        self.assertIsNone(validate_field(["developer_count"], 1))
        self.assertIsNone(validate_field("revenue_percentage", None, "traditional"))
        self.assertEqual(
            validate_field("revenue_percentage", None, "tech"),
            "Revenue percentage is required for tech companies",
        )

    def test_ranges_exposed(self):
        ranges = get_validation_ranges()
        self.assertEqual(ranges["developer_count"], {"min": 1, "max": 50_000})
        self.assertEqual(ranges["revenue_percentage"], {"min": 0, "max": 100})


if __name__ == '__main__':
    unittest.main()
