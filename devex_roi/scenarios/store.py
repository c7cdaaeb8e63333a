from __future__ import annotations
import dataclasses
import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from devex_roi.calculator.models import BUSINESS_TYPES, Scenario, scenario_from_dict, scenario_to_dict
from devex_roi.config.env import get_store_config
from devex_roi.logging_utils import log_event

logger = logging.getLogger(__name__)

# Fields callers may change through update(); id and timestamps are managed here.
EDITABLE_FIELDS = (
    "name",
    "business_type",
    "developer_count",
    "annual_cost_per_developer",
    "cts_sw_improvement_percent",
    "solution_cost",
    "revenue_percentage",
    "organization_size",
    "notes",
)

_NUMERIC_FIELDS = (
    "developer_count",
    "annual_cost_per_developer",
    "cts_sw_improvement_percent",
    "solution_cost",
)


class ScenarioStoreError(RuntimeError):
    """The catalog file could not be written."""


class ScenarioImportError(ValueError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_num(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def is_valid_scenario_dict(data: Any) -> bool:
    """Structural check used on import; value ranges are the validator's business."""
    if not isinstance(data, dict):
        return False
    if not isinstance(data.get("id"), str) or not isinstance(data.get("name"), str):
        return False
    if data.get("business_type") not in BUSINESS_TYPES:
        return False
    if not all(_is_num(data.get(k)) for k in _NUMERIC_FIELDS):
        return False
    rev = data.get("revenue_percentage")
    return rev is None or _is_num(rev)


class ScenarioStore:
    """Scenario catalog kept as one JSON array on disk.

    Every mutation rewrites the whole file. There is no locking; one process
    owns the file at a time.
    """

    def __init__(self, path: str | Path | None = None, clock: Callable[[], datetime] = _utcnow):
        self.path = Path(path) if path is not None else get_store_config().path
        self._clock = clock

    # -- file io ---------------------------------------------------------

    def _load_raw(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log_event(logger, logging.ERROR, "store.load_failed", path=self.path, error=str(e))
            return []
        if not isinstance(data, list):
            log_event(logger, logging.ERROR, "store.load_failed", path=self.path, error="not a list")
            return []
        return [d for d in data if isinstance(d, dict)]

    def _write(self, scenarios: List[Scenario]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            body = json.dumps([scenario_to_dict(s) for s in scenarios], indent=2)
            self.path.write_text(body, encoding="utf-8")
        except OSError as e:
            raise ScenarioStoreError(f"Failed to write scenario store {self.path}: {e}") from e

    def _new_id(self) -> str:
        return f"scenario-{uuid.uuid4().hex[:12]}"

    # -- queries ---------------------------------------------------------

    def all(self) -> List[Scenario]:
        out: List[Scenario] = []
        for d in self._load_raw():
            try:
                out.append(scenario_from_dict(d))
            except ValueError as e:
                log_event(logger, logging.WARNING, "store.entry_skipped", id=d.get("id"), error=str(e))
        return out

    def get(self, scenario_id: str) -> Optional[Scenario]:
        for s in self.all():
            if s.id == scenario_id:
                return s
        return None

    def recent(self, limit: int | None = None) -> List[Scenario]:
        """Most recently updated first."""
        floor = datetime.min.replace(tzinfo=timezone.utc)
        ordered = sorted(self.all(), key=lambda s: s.updated_at or floor, reverse=True)
        return ordered[:limit] if limit else ordered

    def search(self, query: str) -> List[Scenario]:
        q = query.lower()
        return [s for s in self.all() if q in s.name.lower() or (s.notes and q in s.notes.lower())]

    def stats(self) -> Dict[str, Any]:
        scenarios = self.all()
        body = json.dumps([scenario_to_dict(s) for s in scenarios])
        return {
            "count": len(scenarios),
            "size_kb": round(len(body.encode("utf-8")) / 1024, 2),
        }

    # -- mutations -------------------------------------------------------

    def save(self, scenario: Scenario) -> Scenario:
        """Insert or replace by id; stamps updated_at and returns the stored value."""
        scenarios = self.all()
        stored = dataclasses.replace(scenario, updated_at=self._clock())
        for i, s in enumerate(scenarios):
            if s.id == stored.id:
                scenarios[i] = stored
                break
        else:
            scenarios.append(stored)
        self._write(scenarios)
        log_event(logger, logging.INFO, "scenario.saved", id=stored.id, name=stored.name)
        return stored

    def create(self, scenario: Scenario) -> Scenario:
        """Store a copy of scenario under a fresh id with new timestamps."""
        now = self._clock()
        fresh = dataclasses.replace(scenario, id=self._new_id(), created_at=now, updated_at=now)
        return self.save(fresh)

    def update(self, scenario_id: str, **changes: Any) -> Optional[Scenario]:
        current = self.get(scenario_id)
        if current is None:
            return None
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown scenario fields: {', '.join(sorted(unknown))}")
        return self.save(dataclasses.replace(current, **changes))

    def delete(self, scenario_id: str) -> bool:
        scenarios = self.all()
        kept = [s for s in scenarios if s.id != scenario_id]
        if len(kept) == len(scenarios):
            return False
        self._write(kept)
        log_event(logger, logging.INFO, "scenario.deleted", id=scenario_id)
        return True

    def duplicate(self, scenario_id: str, new_name: str | None = None) -> Optional[Scenario]:
        original = self.get(scenario_id)
        if original is None:
            return None
        note = f"Duplicated from: {original.name}"
        notes = f"{original.notes}\n\n{note}" if original.notes else note
        return self.create(dataclasses.replace(
            original,
            name=new_name or f"{original.name} (Copy)",
            notes=notes,
        ))

    def clear(self) -> None:
        if self.path.exists():
            try:
                self.path.unlink()
            except OSError as e:
                raise ScenarioStoreError(f"Failed to clear scenario store {self.path}: {e}") from e

    # -- import / export -------------------------------------------------

    def export_json(self) -> str:
        return json.dumps([scenario_to_dict(s) for s in self.all()], indent=2)

    def import_json(self, text: str, overwrite: bool = False) -> int:
        """Merge scenarios from an exported JSON array; returns how many were added.

        Structurally invalid entries are skipped. Entries whose id is already
        taken get a fresh id.
        """
        try:
            incoming = json.loads(text)
        except ValueError as e:
            raise ScenarioImportError("Failed to import scenarios: Invalid JSON format") from e
        if not isinstance(incoming, list):
            raise ScenarioImportError("Failed to import scenarios: Invalid JSON format")

        scenarios = [] if overwrite else self.all()
        count = 0
        for entry in incoming:
            if not is_valid_scenario_dict(entry):
                log_event(logger, logging.WARNING, "scenario.import_skipped", entry=entry)
                continue
            try:
                s = scenario_from_dict(entry)
            except ValueError:
                log_event(logger, logging.WARNING, "scenario.import_skipped", entry=entry)
                continue
            if any(existing.id == s.id for existing in scenarios):
                s = dataclasses.replace(s, id=self._new_id())
            now = self._clock()
            s = dataclasses.replace(s, created_at=s.created_at or now, updated_at=s.updated_at or now)
            scenarios.append(s)
            count += 1

        self._write(scenarios)
        log_event(logger, logging.INFO, "scenario.import", added=count, overwrite=overwrite)
        return count
