import unittest

from devex_roi.calculator import Scenario
from devex_roi.scenarios.comparison import compare_scenarios, comparison_to_dict


def scenario(sid, **overrides):
    fields = dict(
        id=sid,
        name=sid.title(),
        business_type="traditional",
        developer_count=1000,
        annual_cost_per_developer=130_000,
        cts_sw_improvement_percent=15,
        solution_cost=2_000_000,
    )
    fields.update(overrides)
    return Scenario(**fields)


BANK = scenario("bank")
TECH = scenario("tech", business_type="tech", developer_count=400, annual_cost_per_developer=150_000,
                solution_cost=1_000_000, revenue_percentage=60)
BROKEN = scenario("broken", developer_count=0)


class TestComparison(unittest.TestCase):
    def _row(self, comparison, metric):
        for row in comparison.rows:
            if row.metric == metric:
                return row
        self.fail(f"missing row {metric}")

    def test_best_scenario_by_roi(self):
        c = compare_scenarios([TECH, BANK])
        self.assertEqual(c.best_scenario_id, "bank")
        self.assertEqual(self._row(c, "ROI Multiple").best_value, "9.75x")
        self.assertEqual(self._row(c, "ROI Multiple").values["tech"], "9.00x")
        self.assertEqual(self._row(c, "Developers").best_value, "1,000")
        self.assertEqual(self._row(c, "Solution Cost").best_value, "$1M")
        self.assertEqual(self._row(c, "Business Type").values["tech"], "Tech Company")
        self.assertEqual(self._row(c, "Business Type").best_value, "N/A")

    def test_tech_rows_only_with_tech_scenarios(self):
        c = compare_scenarios([BANK, TECH])
        row = self._row(c, "Gross Margin Improvement")
        self.assertEqual(row.values["bank"], "N/A")
        self.assertTrue(row.values["tech"].startswith("$5.4"))
        self.assertEqual(row.best_value, row.values["tech"])
        self._row(c, "Profit Impact")

        c = compare_scenarios([BANK])
        self.assertNotIn("Profit Impact", [r.metric for r in c.rows])

    def test_invalid_scenario_gets_placeholder(self):
        c = compare_scenarios([BANK, BROKEN])
        self.assertIn("broken", c.invalid)
        self.assertTrue(c.invalid["broken"].startswith("Validation failed: "))
        self.assertEqual(c.results["broken"].roi_multiple, 0)
        self.assertEqual(self._row(c, "ROI Multiple").values["broken"], "0.00x")
        self.assertEqual(c.best_scenario_id, "bank")

    def test_empty(self):
        c = compare_scenarios([])
        self.assertEqual(c.rows, [])
        self.assertIsNone(c.best_scenario_id)

    def test_values_too_large_for_float_show_na(self):
        huge = scenario("huge", developer_count=10 ** 400)
        c = compare_scenarios([BANK, huge])
        self.assertIn("huge", c.invalid)
        self.assertEqual(self._row(c, "Developers").values["huge"], "N/A")
        self.assertEqual(self._row(c, "Developers").best_value, "1,000")

    def test_to_dict(self):
        d = comparison_to_dict(compare_scenarios([BANK, TECH]))
        self.assertEqual(d["best_scenario_id"], "bank")
        self.assertIn("tech", d["results"])
        self.assertEqual(d["rows"][0]["metric"], "Business Type")


if __name__ == '__main__':
    unittest.main()
