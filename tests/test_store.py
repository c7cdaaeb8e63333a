import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from devex_roi.calculator import Scenario
from devex_roi.scenarios.store import ScenarioImportError, ScenarioStore


class _Clock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now = self.now + timedelta(minutes=1)
        return self.now


def sample(name="Bank", **overrides):
    fields = dict(
        name=name,
        business_type="traditional",
        developer_count=1000,
        annual_cost_per_developer=130_000,
        cts_sw_improvement_percent=15,
        solution_cost=2_000_000,
    )
    fields.update(overrides)
    return Scenario(**fields)


class TestScenarioStore(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "store" / "scenarios.json"
        self.store = ScenarioStore(self.path, clock=_Clock())

    def tearDown(self):
        self._tmp.cleanup()

    def test_empty_store(self):
        self.assertEqual(self.store.all(), [])
        self.assertEqual(self.store.stats()["count"], 0)

    def test_create_and_get(self):
        s = self.store.create(sample())
        self.assertTrue(s.id.startswith("scenario-"))
        self.assertIsNotNone(s.created_at)
        self.assertTrue(self.path.exists())
        self.assertEqual(self.store.get(s.id), s)
        self.assertIsNone(self.store.get("missing"))

    def test_update(self):
        s = self.store.create(sample())
        u = self.store.update(s.id, name="Renamed", cts_sw_improvement_percent=10)
        self.assertEqual(u.name, "Renamed")
        self.assertEqual(u.created_at, s.created_at)
        self.assertGreater(u.updated_at, s.updated_at)
        self.assertEqual(self.store.get(s.id).cts_sw_improvement_percent, 10)
        self.assertIsNone(self.store.update("missing", name="x"))
        with self.assertRaises(ValueError):
            self.store.update(s.id, id="other")

    def test_delete(self):
        s = self.store.create(sample())
        self.assertTrue(self.store.delete(s.id))
        self.assertFalse(self.store.delete(s.id))
        self.assertEqual(self.store.all(), [])

    def test_duplicate(self):
        s = self.store.create(sample(notes="from workshop"))
        d = self.store.duplicate(s.id)
        self.assertNotEqual(d.id, s.id)
        self.assertEqual(d.name, "Bank (Copy)")
        self.assertEqual(d.notes, "from workshop\n\nDuplicated from: Bank")
        self.assertEqual(d.solution_cost, s.solution_cost)
        named = self.store.duplicate(s.id, "Variant")
        self.assertEqual(named.name, "Variant")
        self.assertIsNone(self.store.duplicate("missing"))
        self.assertEqual(len(self.store.all()), 3)

    def test_recent_and_search(self):
        a = self.store.create(sample("Alpha"))
        b = self.store.create(sample("Beta", notes="retail pilot"))
        self.store.update(a.id, notes="touched")
        self.assertEqual([s.id for s in self.store.recent()], [a.id, b.id])
        self.assertEqual([s.id for s in self.store.recent(1)], [a.id])
        self.assertEqual([s.id for s in self.store.search("ALPHA")], [a.id])
        self.assertEqual([s.id for s in self.store.search("retail")], [b.id])
        self.assertEqual(self.store.search("nothing"), [])

    def test_corrupt_file_reads_as_empty(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("devex_roi.scenarios.store", level="ERROR"):
            self.assertEqual(self.store.all(), [])

    def test_export_import(self):
        self.store.create(sample("Alpha"))
        self.store.create(sample("Beta", business_type="tech", revenue_percentage=60))
        exported = self.store.export_json()
        self.assertEqual(len(json.loads(exported)), 2)

        other = ScenarioStore(Path(self._tmp.name) / "other.json", clock=_Clock())
        self.assertEqual(other.import_json(exported), 2)
        self.assertEqual(sorted(s.name for s in other.all()), ["Alpha", "Beta"])

        # Importing into the same catalog re-keys colliding ids
        self.assertEqual(self.store.import_json(exported), 2)
        ids = [s.id for s in self.store.all()]
        self.assertEqual(len(ids), 4)
        self.assertEqual(len(set(ids)), 4)

        self.assertEqual(other.import_json(exported, overwrite=True), 2)
        self.assertEqual(len(other.all()), 2)

    def test_import_rejects_bad_input(self):
        with self.assertRaises(ScenarioImportError):
            self.store.import_json("not json")
        with self.assertRaises(ScenarioImportError):
            self.store.import_json('{"id": "x"}')
        self.assertEqual(self.store.import_json('[{"id": "x"}, 5]'), 0)

    def test_clear(self):
        self.store.create(sample())
        self.store.clear()
        self.assertFalse(self.path.exists())
        self.assertEqual(self.store.all(), [])


if __name__ == '__main__':
    unittest.main()
