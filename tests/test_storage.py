"""
Unit tests for the target store.

Storage contract:
- Missing/invalid file -> no pending targets
- Records with checked == true are skipped
- mark_as_found flags exactly the record with the given id
"""

import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from slotwatch.storage import load_pending_targets, mark_as_found


def _record(target_id, checked=False):
    return {
        "id": target_id,
        "facility": "富山県総合体育センター",
        "room": "大アリーナ全面",
        "date": "2026-11-03",
        "time_slots": ["9:00", "13:00"],
        "checked": checked,
    }


class TestTargetStore(unittest.TestCase):
    def test_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(load_pending_targets(Path(d) / "missing.json"), [])

    def test_broken_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "targets.json"
            p.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_pending_targets(p), [])

    def test_only_unchecked_targets_are_pending(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "targets.json"
            payload = {"targets": [_record("t1"), _record("t2", checked=True), {"id": "t3", "room": "x"}]}
            p.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")

            with self.assertLogs("slotwatch.storage", level="WARNING"):
                pending = load_pending_targets(p)

            self.assertEqual([t.target_id for t in pending], ["t1"])
            self.assertEqual(pending[0].time_slots, ("9:00", "13:00"))

    def test_mark_as_found_flags_record(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "targets.json"
            p.write_text(json.dumps({"targets": [_record("t1"), _record("t2")]}), encoding="utf-8")

            now = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
            self.assertTrue(mark_as_found(p, "t1", iter(["9:00"]), now=now))

            data = json.loads(p.read_text(encoding="utf-8"))
            t1, t2 = data["targets"]
            self.assertTrue(t1["checked"])
            self.assertEqual(t1["found_slots"], ["9:00"])
            self.assertEqual(t1["found_at"], now.isoformat())
            self.assertFalse(t2["checked"])

            self.assertEqual([t.target_id for t in load_pending_targets(p)], ["t2"])

    def test_mark_unknown_id(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "targets.json"
            p.write_text(json.dumps({"targets": [_record("t1")]}), encoding="utf-8")
            self.assertFalse(mark_as_found(p, "nope", ["9:00"]))


if __name__ == "__main__":
    unittest.main()
