"""Command line entry point.

Usage:
  python -m devex_roi.cli calculate --developers 1000 --cost-per-developer 130000 \
      --improvement 15 --solution-cost 2000000
  python -m devex_roi.cli calculate --preset aws-tech-benchmark
  python -m devex_roi.cli validate --stdin < scenario.json
  python -m devex_roi.cli presets --size small

Output: JSON to stdout, errors to stderr.
"""

from __future__ import annotations
import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from devex_roi.calculator import CalculationError, Scenario, ScenarioValidationError, calculate, validate_scenario
from devex_roi.calculator.formatting import get_roi_context_message
from devex_roi.calculator.models import BUSINESS_TYPES, ORGANIZATION_SIZES, scenario_from_dict, scenario_to_dict
from devex_roi.logging_utils import configure_logging
from devex_roi.scenarios.presets import all_presets, all_presets_for_size, compare_to_benchmarks, find_preset

_FLAG_FIELDS = (
    ("developers", "developer_count"),
    ("cost_per_developer", "annual_cost_per_developer"),
    ("improvement", "cts_sw_improvement_percent"),
    ("solution_cost", "solution_cost"),
    ("revenue_percentage", "revenue_percentage"),
)


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _add_scenario_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--stdin", action="store_true", help="Read a scenario JSON object from stdin")
    p.add_argument("--preset", help="Start from a preset id (flags override its values)")
    p.add_argument("--business-type", choices=BUSINESS_TYPES, help="traditional or tech")
    p.add_argument("--developers", type=int, help="Number of developers")
    p.add_argument("--cost-per-developer", type=float, help="Fully loaded annual cost per developer ($)")
    p.add_argument("--improvement", type=float, help="Expected CTS-SW improvement (%%)")
    p.add_argument("--solution-cost", type=float, help="Solution investment cost ($)")
    p.add_argument("--revenue-percentage", type=float, help="Revenue from software development (%%, tech only)")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="devex-roi", description="Developer experience ROI calculator")
    p.add_argument("--log-level", help="Override LOG_LEVEL")
    sub = p.add_subparsers(dest="command", required=True)

    calc = sub.add_parser("calculate", help="Calculate ROI for a scenario")
    _add_scenario_args(calc)

    val = sub.add_parser("validate", help="Validate a scenario without calculating")
    _add_scenario_args(val)

    pre = sub.add_parser("presets", help="List preset scenarios")
    pre.add_argument("--size", choices=ORGANIZATION_SIZES, help="Include presets for an organization size")
    return p.parse_args(argv)


def _scenario_from_args(args: argparse.Namespace) -> Scenario:
    data: Dict[str, Any] = {}
    if args.preset:
        preset = find_preset(args.preset)
        if preset is None:
            _fail(f"unknown preset: {args.preset}")
        data.update(scenario_to_dict(preset))
    if args.stdin:
        try:
            body = json.load(sys.stdin)
        except ValueError as e:
            _fail(f"invalid JSON on stdin: {e}")
        if not isinstance(body, dict):
            _fail("stdin must contain a JSON object")
        data.update(body)
    if args.business_type:
        data["business_type"] = args.business_type
    for flag, field in _FLAG_FIELDS:
        value = getattr(args, flag)
        if value is not None:
            data[field] = value
    return scenario_from_dict(data)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "presets":
        groups = all_presets_for_size(args.size) if args.size else all_presets()
        out: Any = {name: [scenario_to_dict(s) for s in group] for name, group in groups.items()}
    elif args.command == "validate":
        errors = validate_scenario(_scenario_from_args(args))
        out = {"valid": not errors, "errors": errors}
    else:
        scenario = _scenario_from_args(args)
        try:
            results = calculate(scenario)
        except ScenarioValidationError as e:
            print(json.dumps({"error": str(e), "errors": e.errors}, indent=2), file=sys.stderr)
            sys.exit(1)
        except CalculationError as e:
            _fail(str(e))
        out = {
            "results": results.to_dict(),
            "context": get_roi_context_message(results.roi_multiple),
            "benchmarks": compare_to_benchmarks(scenario, results),
        }

    print(json.dumps(out, indent=2))


if __name__ == "__main__":
    main()
