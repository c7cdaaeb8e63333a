from __future__ import annotations
from typing import Any, Dict, List, Literal

NumberFormat = Literal["abbreviated", "full"]

# Upper bound of total cost per organization scale
SCALE_THRESHOLDS = (
    ("small", 2_500_000),
    ("medium", 65_000_000),
    ("large", 140_000_000),
)
ENTERPRISE_WARNING_THRESHOLD = 10_000_000

SCALE_DESCRIPTIONS = {
    "small": "Small organization (25-100 developers)",
    "medium": "Medium organization (100-500 developers)",
    "large": "Large organization (500-1000 developers)",
    "enterprise": "Enterprise organization (1000+ developers)",
}


def format_number(value: float) -> str:
    """Thousands separators, at most 3 decimals, no trailing zeros."""
    if isinstance(value, int):
        return f"{value:,}"
    text = f"{value:,.3f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_currency(amount: float, fmt: NumberFormat = "abbreviated") -> str:
    sign = "-" if amount < 0 else ""
    a = abs(amount)
    if fmt == "full":
        return f"{sign}${a:,.0f}"
    if a >= 1_000_000_000:
        return f"{sign}${_scaled(a / 1_000_000_000, 1, 2)}B"
    if a >= 1_000_000:
        return f"{sign}${_scaled(a / 1_000_000, 1, 2)}M"
    if a >= 1_000:
        return f"{sign}${_scaled(a / 1_000, 0, 1)}K"
    return f"{sign}${a:.0f}"


def _scaled(v: float, big_dp: int, small_dp: int) -> str:
    if v % 1 == 0:
        return f"{v:.0f}"
    return f"{v:.{big_dp if v >= 10 else small_dp}f}"


def _precision(v: float) -> int:
    if v >= 100:
        return 0
    if v >= 10:
        return 1
    return 2


def format_multiple(multiple: float) -> str:
    return f"{multiple:.{_precision(multiple)}f}x"


def format_percentage(percent: float) -> str:
    return f"{percent:.{_precision(percent)}f}%"


def get_scale_indicator(amount: float) -> str:
    a = abs(amount)
    for scale, upper in SCALE_THRESHOLDS:
        if a <= upper:
            return scale
    return "enterprise"


def should_show_scale_warning(amount: float) -> bool:
    return abs(amount) > ENTERPRISE_WARNING_THRESHOLD


def get_scale_warning_message(amount: float) -> str | None:
    if not should_show_scale_warning(amount):
        return None
    if get_scale_indicator(amount) == "enterprise":
        return ("These are enterprise-scale results. Consider reviewing your inputs "
                "or exploring smaller-scale scenarios for comparison.")
    return ("This result represents a significant investment. Please verify your "
            "inputs are realistic for your organization size.")


def format_tooltip(amount: float, label: str | None = None) -> str:
    full = format_currency(amount, "full")
    desc = SCALE_DESCRIPTIONS[get_scale_indicator(amount)]
    if label:
        return f"{label}: {full} ({desc})"
    return f"{full} ({desc})"


def get_roi_context_message(roi_multiple: float) -> str:
    if roi_multiple >= 20:
        return "Exceptional ROI - This represents transformational business impact"
    if roi_multiple >= 10:
        return "Outstanding ROI - Matches AWS enterprise case studies"
    if roi_multiple >= 5:
        return "Strong ROI - Exceeds typical business investment thresholds"
    if roi_multiple >= 2:
        return "Moderate ROI - May justify targeted investments"
    return "Low ROI - Consider alternative approaches or reduced scope"


def generate_alternative_scenarios(
    developer_count: int,
    annual_cost_per_developer: float,
    cts_sw_improvement_percent: float,
    solution_cost: float,
) -> List[Dict[str, Any]]:
    """Suggest smaller or more conservative variants of a large scenario.

    Each suggestion is {"description", "adjustments"} where adjustments maps
    scenario field names to replacement values.
    """
    out: List[Dict[str, Any]] = []
    if developer_count > 1000:
        out.append({
            "description": "Medium-scale scenario (quarter of current team size)",
            "adjustments": {
                "developer_count": developer_count // 4,
                "solution_cost": solution_cost // 2,
            },
        })
    if cts_sw_improvement_percent > 15:
        out.append({
            "description": "Conservative improvement (AWS benchmark level)",
            "adjustments": {"cts_sw_improvement_percent": 15},
        })
    if solution_cost > 5_000_000:
        out.append({
            "description": "Phased implementation (50% of solution cost)",
            "adjustments": {
                "solution_cost": solution_cost // 2,
                "cts_sw_improvement_percent": max(5, cts_sw_improvement_percent * 0.7),
            },
        })
    if developer_count > 500 or annual_cost_per_developer > 140_000:
        out.append({
            "description": "Typical mid-size company scenario",
            "adjustments": {
                "developer_count": 250,
                "annual_cost_per_developer": 120_000,
                "cts_sw_improvement_percent": 12,
                "solution_cost": 600_000,
            },
        })
    return out
