"""
Tests for CLI entry points.

These tests focus on:
- config errors exiting nonzero without starting a browser
- the offline "parse" command on a saved page
- "pending" with an empty store (no browser needed)
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from slotwatch.cli import main
from slotwatch.model import RawRow


PAGE = (
    "<table><tr><th>施設</th><th>9</th><th>10</th></tr>"
    "<tr><td>大アリーナ</td><td>●</td><td>×</td><td>●</td><td>×</td></tr></table>"
)


class TestCLI(unittest.TestCase):
    def _run(self, argv):
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(SystemExit) as ctx:
                main(argv)
        return ctx.exception.code, out.getvalue()

    def test_check_with_missing_config_exits_1(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with mock.patch("slotwatch.cli.open_page") as open_page:
                code, out = self._run(["check", "-c", str(Path(d) / "missing.json")])

        self.assertEqual(code, 1)
        self.assertIn("Failed to load config", out)
        open_page.assert_not_called()

    def test_parse_saved_page(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "page.html"
            p.write_text(PAGE, encoding="utf-8")
            code, out = self._run(["parse", str(p), "--room", "大アリーナ", "--times", "9", "9:30", "10:00"])

        self.assertEqual(code, 0)
        self.assertIn("大アリーナ (4 slots)", out)
        self.assertIn("9:30: reserved", out)
        self.assertIn("Available for 大アリーナ: 9, 10:00", out)

    def test_parse_missing_file(self) -> None:
        code, _ = self._run(["parse", "/nonexistent/page.html"])
        self.assertEqual(code, 1)

    def test_pending_with_empty_store(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with mock.patch("slotwatch.cli.open_page") as open_page:
                code, out = self._run(["pending", "--store", str(Path(d) / "targets.json")])

        self.assertEqual(code, 0)
        open_page.assert_not_called()
        payload = json.loads(out.strip().splitlines()[-1])
        self.assertEqual(payload["total_targets"], 0)
        self.assertEqual(payload["results"], [])

    def test_pending_flags_found_targets(self) -> None:
        record = {
            "id": "t1",
            "facility": "富山県総合体育センター",
            "room": "大アリーナ",
            "date": "2026-11-03",
            "time_slots": ["9:00"],
            "checked": False,
        }
        rows = [RawRow("大アリーナ", ("●", "×"), ("9", "10"))]

        with tempfile.TemporaryDirectory() as d:
            store = Path(d) / "targets.json"
            store.write_text(json.dumps({"targets": [record]}, ensure_ascii=False), encoding="utf-8")

            with mock.patch("slotwatch.cli.open_page"), mock.patch("slotwatch.checker.scrape") as scrape:
                scrape.read_raw_rows.return_value = rows
                code, out = self._run(["pending", "--store", str(store), "--delay", "0"])

            saved = json.loads(store.read_text(encoding="utf-8"))["targets"][0]

        self.assertEqual(code, 0)
        self.assertTrue(saved["checked"])
        self.assertEqual(saved["found_slots"], ["9:00"])
        payload = json.loads(out.strip().splitlines()[-1])
        self.assertEqual(payload["found_availability"], 1)

    def test_pending_survives_store_write_error(self) -> None:
        record = {
            "id": "t1",
            "facility": "富山県総合体育センター",
            "room": "大アリーナ",
            "date": "2026-11-03",
            "time_slots": ["9:00"],
            "checked": False,
        }
        rows = [RawRow("大アリーナ", ("●", "×"), ("9", "10"))]

        with tempfile.TemporaryDirectory() as d:
            store = Path(d) / "targets.json"
            store.write_text(json.dumps({"targets": [record]}, ensure_ascii=False), encoding="utf-8")

            with mock.patch("slotwatch.cli.open_page"), mock.patch("slotwatch.checker.scrape") as scrape, mock.patch(
                "slotwatch.cli.mark_as_found", side_effect=PermissionError("read-only")
            ):
                scrape.read_raw_rows.return_value = rows
                code, out = self._run(["pending", "--store", str(store), "--delay", "0"])

        self.assertEqual(code, 0)
        payload = json.loads(out.strip().splitlines()[-1])
        self.assertEqual(payload["found_availability"], 1)


if __name__ == "__main__":
    unittest.main()
