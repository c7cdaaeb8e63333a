from __future__ import annotations
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Tuple

BusinessType = Literal["traditional", "tech"]
OrganizationSize = Literal["small", "medium", "large", "enterprise"]

BUSINESS_TYPES: Tuple[str, ...] = ("traditional", "tech")
ORGANIZATION_SIZES: Tuple[str, ...] = ("small", "medium", "large", "enterprise")


@dataclass(frozen=True)
class Scenario:
    # Calculation inputs. Values are stored as given; the validator decides
    # whether they are usable.
    business_type: BusinessType
    developer_count: int
    annual_cost_per_developer: float  # fully loaded, currency units
    cts_sw_improvement_percent: float  # percentage points (15 == 15%)
    solution_cost: float
    revenue_percentage: Optional[float] = None  # tech companies only

    # Bookkeeping, never read by the calculator
    id: str = ""
    name: str = ""
    organization_size: Optional[OrganizationSize] = None
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class CalculationStep:
    step: int
    description: str
    formula: str
    calculation: str
    result: float
    explanation: str


@dataclass(frozen=True)
class SupportingMetrics:
    deployments_per_builder: float = 0
    interventions_reduction: float = 0
    incident_reduction: float = 0


@dataclass(frozen=True)
class CalculationResults:
    scenario_id: str
    total_developer_cost: float
    cost_avoidance: float
    roi_multiple: float
    roi_percentage: float
    calculation_steps: Tuple[CalculationStep, ...] = ()
    supporting_metrics: SupportingMetrics = field(default_factory=SupportingMetrics)

    # Tech company pipeline only
    gross_margin_improvement: Optional[float] = None
    profit_impact: Optional[float] = None
    profit_boost_percentage: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict for JSON; tech-only fields are left out when unset."""
        out: Dict[str, Any] = {
            "scenario_id": self.scenario_id,
            "total_developer_cost": self.total_developer_cost,
            "cost_avoidance": self.cost_avoidance,
            "roi_multiple": self.roi_multiple,
            "roi_percentage": self.roi_percentage,
        }
        for name in ("gross_margin_improvement", "profit_impact", "profit_boost_percentage"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        out["supporting_metrics"] = asdict(self.supporting_metrics)
        out["calculation_steps"] = [asdict(s) for s in self.calculation_steps]
        return out


def _iso(d: Optional[datetime]) -> Optional[str]:
    return d.isoformat() if d is not None else None


def _parse_dt(raw: Any) -> Optional[datetime]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def scenario_to_dict(s: Scenario) -> Dict[str, Any]:
    out = asdict(s)
    out["created_at"] = _iso(s.created_at)
    out["updated_at"] = _iso(s.updated_at)
    return out


def scenario_from_dict(data: Dict[str, Any]) -> Scenario:
    """Build a Scenario from a JSON-shaped dict.

    Numeric fields are passed through untouched so that validation can
    report on them; unknown keys are ignored.
    """
    return Scenario(
        business_type=data.get("business_type", "traditional"),
        developer_count=data.get("developer_count"),
        annual_cost_per_developer=data.get("annual_cost_per_developer"),
        cts_sw_improvement_percent=data.get("cts_sw_improvement_percent"),
        solution_cost=data.get("solution_cost"),
        revenue_percentage=data.get("revenue_percentage"),
        id=str(data.get("id") or ""),
        name=str(data.get("name") or ""),
        organization_size=data.get("organization_size"),
        notes=data.get("notes") or "",
        created_at=_parse_dt(data.get("created_at")),
        updated_at=_parse_dt(data.get("updated_at")),
    )
