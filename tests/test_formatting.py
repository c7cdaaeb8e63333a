import unittest

from devex_roi.calculator.formatting import (
    format_currency,
    format_multiple,
    format_number,
    format_percentage,
    format_tooltip,
    generate_alternative_scenarios,
    get_roi_context_message,
    get_scale_indicator,
    get_scale_warning_message,
    should_show_scale_warning,
)


class TestFormatting(unittest.TestCase):
    def test_format_number(self):
        self.assertEqual(format_number(1000), "1,000")
        self.assertEqual(format_number(15.0), "15")
        self.assertEqual(format_number(1234.5678), "1,234.568")
        self.assertEqual(format_number(0), "0")
        self.assertEqual(format_number(10 ** 20), "100,000,000,000,000,000,000")

    def test_format_currency_abbreviated(self):
        self.assertEqual(format_currency(2_000_000), "$2M")
        self.assertEqual(format_currency(19_500_000), "$19.5M")
        self.assertEqual(format_currency(130_000), "$130K")
        self.assertEqual(format_currency(1_500), "$1.5K")
        self.assertEqual(format_currency(2_500_000_000), "$2.50B")
        self.assertEqual(format_currency(999), "$999")
        self.assertEqual(format_currency(-5_000), "-$5K")

    def test_format_currency_full(self):
        self.assertEqual(format_currency(19_500_000, "full"), "$19,500,000")

    def test_multiple_and_percentage(self):
        self.assertEqual(format_multiple(9.75), "9.75x")
        self.assertEqual(format_multiple(12.34), "12.3x")
        self.assertEqual(format_multiple(150), "150x")
        self.assertEqual(format_percentage(875), "875%")
        self.assertEqual(format_percentage(15.9), "15.9%")
        self.assertEqual(format_percentage(9), "9.00%")

    def test_scale(self):
        self.assertEqual(get_scale_indicator(2_000_000), "small")
        self.assertEqual(get_scale_indicator(19_500_000), "medium")
        self.assertEqual(get_scale_indicator(130_000_000), "large")
        self.assertEqual(get_scale_indicator(200_000_000), "enterprise")
        self.assertFalse(should_show_scale_warning(10_000_000))
        self.assertTrue(should_show_scale_warning(10_000_001))
        self.assertIsNone(get_scale_warning_message(5_000_000))
        self.assertTrue(get_scale_warning_message(200_000_000).startswith("These are enterprise-scale results"))
        self.assertTrue(get_scale_warning_message(20_000_000).startswith("This result represents"))

    def test_tooltip(self):
        self.assertEqual(
            format_tooltip(19_500_000, "Cost Avoidance"),
            "Cost Avoidance: $19,500,000 (Medium organization (100-500 developers))",
        )

    def test_roi_context(self):
        self.assertTrue(get_roi_context_message(25).startswith("Exceptional ROI"))
        self.assertTrue(get_roi_context_message(9.75).startswith("Strong ROI"))
        self.assertTrue(get_roi_context_message(1).startswith("Low ROI"))

    def test_alternative_scenarios(self):
        alts = generate_alternative_scenarios(2000, 130_000, 20, 6_000_000)
        self.assertEqual(len(alts), 4)
        self.assertEqual(alts[0]["adjustments"], {"developer_count": 500, "solution_cost": 3_000_000})
        self.assertEqual(alts[1]["adjustments"], {"cts_sw_improvement_percent": 15})
        self.assertAlmostEqual(alts[2]["adjustments"]["cts_sw_improvement_percent"], 14)
        self.assertEqual(generate_alternative_scenarios(100, 120_000, 10, 500_000), [])


if __name__ == '__main__':
    unittest.main()
