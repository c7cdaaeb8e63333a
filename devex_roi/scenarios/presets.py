"""Preset scenarios built from published CTS-SW case studies.

All presets are plain Scenario values with stable ids, so they can be
calculated directly or saved into the catalog as a starting point.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from devex_roi.calculator.models import CalculationResults, Scenario
from devex_roi.calculator.ranges import BENCHMARKS


@dataclass(frozen=True)
class OrganizationSizeConfig:
    label: str
    description: str
    developer_range: Tuple[int, int]
    cost_range: Tuple[int, int]
    solution_cost_multiplier: float
    examples: Tuple[str, ...]
    help_text: str


ORGANIZATION_SIZE_CONFIGS: Mapping[str, OrganizationSizeConfig] = {
    "small": OrganizationSizeConfig(
        label="Small Team",
        description="25-100 developers",
        developer_range=(25, 100),
        cost_range=(100_000, 120_000),
        solution_cost_multiplier=2.0,
        examples=("Startup", "Small SaaS company", "Department team"),
        help_text=("Small teams often see faster implementation and higher relative impact "
                   "from developer experience improvements."),
    ),
    "medium": OrganizationSizeConfig(
        label="Medium Team",
        description="100-500 developers",
        developer_range=(100, 500),
        cost_range=(110_000, 130_000),
        solution_cost_multiplier=2.5,
        examples=("Growing tech company", "Mid-size enterprise", "Multiple product teams"),
        help_text=("Medium teams balance implementation complexity with significant ROI "
                   "potential, similar to many AWS case studies."),
    ),
    "large": OrganizationSizeConfig(
        label="Large Team",
        description="500-1000 developers",
        developer_range=(500, 1000),
        cost_range=(120_000, 140_000),
        solution_cost_multiplier=3.0,
        examples=("Large enterprise", "Major tech company", "Multiple business units"),
        help_text=("Large teams can achieve substantial cost savings but require more "
                   "sophisticated tooling and change management."),
    ),
    "enterprise": OrganizationSizeConfig(
        label="Enterprise",
        description="1000+ developers",
        developer_range=(1000, 5000),
        cost_range=(130_000, 150_000),
        solution_cost_multiplier=3.5,
        examples=("Fortune 500 company", "Global tech giant", "AWS bank example scale"),
        help_text=("Enterprise scale matches AWS's published case studies and can achieve "
                   "the highest absolute cost savings."),
    ),
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _preset(now: datetime, **fields: Any) -> Scenario:
    return Scenario(created_at=now, updated_at=now, **fields)


def aws_benchmark_scenarios() -> List[Scenario]:
    now = _now()
    b = BENCHMARKS
    return [
        _preset(
            now,
            id="aws-bank-benchmark",
            name="AWS Bank Example (Benchmark)",
            business_type="traditional",
            developer_count=b.bank_developer_count,
            annual_cost_per_developer=b.bank_annual_cost_per_developer,
            cts_sw_improvement_percent=b.bank_improvement_percent,
            solution_cost=b.bank_solution_cost,
            organization_size="enterprise",
            notes="Based on AWS bank case study. Expected: $19.5M cost avoidance, 9.75x ROI",
        ),
        _preset(
            now,
            id="aws-tech-benchmark",
            name="AWS Tech Company Example (Benchmark)",
            business_type="tech",
            developer_count=b.tech_developer_count,
            annual_cost_per_developer=b.tech_annual_cost_per_developer,
            cts_sw_improvement_percent=b.tech_improvement_percent,
            solution_cost=b.tech_solution_cost,
            revenue_percentage=b.tech_revenue_percentage,
            organization_size="medium",
            notes=("Based on AWS tech company case study. Expected: 9 percentage point "
                   "gross margin improvement"),
        ),
        _preset(
            now,
            id="aws-achieved-benchmark",
            name="AWS Achieved Results (15.9%)",
            business_type="traditional",
            developer_count=b.bank_developer_count,
            annual_cost_per_developer=b.bank_annual_cost_per_developer,
            cts_sw_improvement_percent=b.achieved_improvement,
            solution_cost=b.bank_solution_cost,
            organization_size="enterprise",
            notes="AWS actually achieved 15.9% CTS-SW improvement, exceeding their 15% target",
        ),
    ]


IMPROVEMENT_LEVELS = ((5, "Conservative"), (10, "Moderate"), (15, "AWS Target"), (20, "Aggressive"))


def improvement_level_presets(base: Optional[Dict[str, Any]] = None) -> List[Scenario]:
    """One scenario per improvement level over a shared base (overridable)."""
    now = _now()
    b: Dict[str, Any] = {
        "business_type": "traditional",
        "developer_count": 500,
        "annual_cost_per_developer": 120_000,
        "solution_cost": 1_000_000,
        "organization_size": "medium",
        "revenue_percentage": None,
    }
    b.update(base or {})
    return [
        _preset(
            now,
            id=f"preset-{pct}pct-improvement",
            name=f"{label} Improvement ({pct}%)",
            business_type=b["business_type"],
            developer_count=b["developer_count"],
            annual_cost_per_developer=b["annual_cost_per_developer"],
            cts_sw_improvement_percent=pct,
            solution_cost=b["solution_cost"],
            organization_size=b["organization_size"],
            revenue_percentage=b["revenue_percentage"] if b["business_type"] == "tech" else None,
            notes=f"{label} CTS-SW improvement scenario ({pct}% productivity gain)",
        )
        for pct, label in IMPROVEMENT_LEVELS
    ]


TEAM_SIZES = (
    (25, "Small Team", 110_000),
    (100, "Medium Team", 120_000),
    (500, "Large Team", 130_000),
    (1000, "Enterprise", 135_000),
    (2500, "Large Enterprise", 140_000),
)


def _size_for(developers: int) -> str:
    if developers <= 100:
        return "small"
    if developers <= 500:
        return "medium"
    if developers <= 1000:
        return "large"
    return "enterprise"


def team_size_presets() -> List[Scenario]:
    now = _now()
    return [
        _preset(
            now,
            id=f"preset-team-{size}",
            name=f"{label} ({size} developers)",
            business_type="traditional",
            developer_count=size,
            annual_cost_per_developer=cost,
            cts_sw_improvement_percent=15,
            solution_cost=max(100_000, size * 2000),
            organization_size=_size_for(size),
            notes=f"{label} scenario with {size} developers",
        )
        for size, label, cost in TEAM_SIZES
    ]


def industry_presets() -> List[Scenario]:
    now = _now()
    rows = (
        ("preset-fintech", "FinTech Company", "tech", 200, 160_000, 12, 800_000, 80, "medium",
         "FinTech company where software is the primary product"),
        ("preset-ecommerce", "E-commerce Platform", "tech", 300, 140_000, 15, 1_200_000, 70, "medium",
         "E-commerce platform with significant software development focus"),
        ("preset-bank", "Traditional Bank", "traditional", 800, 125_000, 15, 1_800_000, None, "large",
         "Traditional bank with software supporting business operations"),
        ("preset-retail", "Retail Chain", "traditional", 150, 115_000, 10, 500_000, None, "medium",
         "Retail chain with moderate software development needs"),
        ("preset-manufacturing", "Manufacturing Company", "traditional", 100, 110_000, 8, 400_000, None,
         "small", "Manufacturing company with software supporting operations"),
    )
    return [
        _preset(
            now,
            id=pid,
            name=name,
            business_type=btype,
            developer_count=devs,
            annual_cost_per_developer=cost,
            cts_sw_improvement_percent=pct,
            solution_cost=solution,
            revenue_percentage=revenue,
            organization_size=size,
            notes=notes,
        )
        for pid, name, btype, devs, cost, pct, solution, revenue, size, notes in rows
    ]


def organization_size_presets(organization_size: str) -> List[Scenario]:
    """Three traditional and two tech scenarios sized from the org-size config.

    Raises KeyError for an unknown size.
    """
    cfg = ORGANIZATION_SIZE_CONFIGS[organization_size]
    now = _now()
    developers = _round_half_up(sum(cfg.developer_range) / 2)
    cost = _round_half_up(sum(cfg.cost_range) / 2)
    solution = _round_half_up(developers * cfg.solution_cost_multiplier * 1000)
    label = cfg.label.lower()

    conservative = {"small": 8, "medium": 10}.get(organization_size, 12)
    aggressive = {"small": 18, "medium": 20}.get(organization_size, 22)
    tech_revenue = {"small": 70, "medium": 65}.get(organization_size, 60)

    def make(suffix: str, name: str, btype: str, pct: float, notes: str) -> Scenario:
        tech = btype == "tech"
        return _preset(
            now,
            id=f"{organization_size}-{suffix}",
            name=f"{cfg.label} - {name}",
            business_type=btype,
            developer_count=developers,
            # Tech companies typically pay more
            annual_cost_per_developer=cost + 10_000 if tech else cost,
            cts_sw_improvement_percent=pct,
            solution_cost=solution,
            revenue_percentage=tech_revenue if tech else None,
            organization_size=organization_size,
            notes=notes,
        )

    return [
        make("traditional-conservative", "Conservative (Traditional)", "traditional", conservative,
             f"Conservative improvement scenario for {label} traditional business"),
        make("traditional-target", "AWS Target (Traditional)", "traditional", 15,
             f"AWS target 15% improvement for {label} traditional business"),
        make("traditional-aggressive", "Aggressive (Traditional)", "traditional", aggressive,
             f"Aggressive improvement scenario for {label} traditional business"),
        make("tech-conservative", "Conservative (Tech)", "tech", conservative,
             f"Conservative improvement scenario for {label} tech company"),
        make("tech-target", "AWS Target (Tech)", "tech", 15,
             f"AWS target 15% improvement for {label} tech company"),
    ]


def default_scenario_for_size(organization_size: str) -> Scenario:
    presets = organization_size_presets(organization_size)
    for s in presets:
        if "traditional-target" in s.id:
            return s
    return presets[0]


def all_presets() -> Dict[str, List[Scenario]]:
    return {
        "aws_benchmarks": aws_benchmark_scenarios(),
        "improvement_levels": improvement_level_presets(),
        "team_sizes": team_size_presets(),
        "industries": industry_presets(),
    }


def all_presets_for_size(organization_size: str) -> Dict[str, List[Scenario]]:
    return {"organization_size": organization_size_presets(organization_size), **all_presets()}


def find_preset(preset_id: str) -> Optional[Scenario]:
    """Look a preset up by id across every group, including all org sizes."""
    groups = list(all_presets().values())
    groups.extend(organization_size_presets(size) for size in ORGANIZATION_SIZE_CONFIGS)
    for group in groups:
        for s in group:
            if s.id == preset_id:
                return s
    return None


def benchmark_indicators() -> Dict[str, Any]:
    return {
        "achieved_improvement": BENCHMARKS.achieved_improvement,
        "target_improvement": BENCHMARKS.target_improvement,
        "bank_roi_multiple": BENCHMARKS.bank_roi_multiple,
        "tech_margin_improvement": BENCHMARKS.tech_margin_improvement_points,
        "success_factors": [
            "Automated deployment pipelines",
            "Reduced manual interventions",
            "Faster incident resolution",
            "Improved developer productivity",
            "Better tooling and infrastructure",
        ],
        "implementation_timeline": {
            "planning": "2-3 months",
            "implementation": "6-12 months",
            "full_realization": "12-18 months",
        },
    }


def compare_to_benchmarks(scenario: Scenario, results: CalculationResults) -> Dict[str, Any]:
    """Grade a calculated scenario against the AWS improvement and ROI benchmarks."""
    ind = benchmark_indicators()
    pct = scenario.cts_sw_improvement_percent
    if pct >= ind["achieved_improvement"]:
        improvement_status = "exceeds"
    elif pct >= ind["target_improvement"]:
        improvement_status = "meets"
    else:
        improvement_status = "below"

    roi = results.roi_multiple
    bank = ind["bank_roi_multiple"]
    if roi >= bank:
        roi_status = "exceeds"
    elif roi >= bank * 0.8:
        roi_status = "competitive"
    else:
        roi_status = "below"

    recommendations: List[str] = []
    if improvement_status == "below":
        recommendations.append(
            f"Consider targeting {ind['target_improvement']:g}% improvement to match AWS's original target"
        )
    if roi_status == "below":
        recommendations.append(
            "ROI is below AWS benchmark - consider optimizing solution cost or improvement percentage"
        )
    if scenario.business_type == "traditional" and scenario.developer_count < 500:
        recommendations.append("Small teams may see different ROI patterns than AWS's large-scale examples")

    return {
        "improvement_vs_aws": {
            "scenario": pct,
            "aws_target": ind["target_improvement"],
            "aws_achieved": ind["achieved_improvement"],
            "status": improvement_status,
        },
        "roi_vs_aws": {
            "scenario": roi,
            "aws_benchmark": bank,
            "status": roi_status,
        },
        "recommendations": recommendations,
    }
