"""
Tests for CLI entry points.

These tests focus on:
- Exit codes of the sub-commands
- Safe persistence of the selection using a temporary file
  (to avoid touching real user data during tests)
- generate / conflicts / export on a small catalog snapshot
"""

import json
import tempfile
import unittest
from pathlib import Path

import schedulebuilder.storage as storage
from schedulebuilder.cli import main

CATALOG = {
    "data": [
        {
            "courseNumber": "COMS 2270",
            "title": "Object-oriented Programming",
            "sections": [
                {
                    "number": "1",
                    "instructionalFormat": "Lecture",
                    "meetingPatterns": "MWF | 9:00 AM - 9:50 AM",
                    "instructors": "Ada Lovelace",
                    "openSeats": 12,
                },
                {
                    "number": "2",
                    "instructionalFormat": "Lecture",
                    "meetingPatterns": "TR | 1:10 PM - 2:25 PM",
                    "instructors": "Alan Turing",
                    "openSeats": 3,
                },
            ],
        },
        {
            "courseNumber": "MATH 1650",
            "title": "Calculus I",
            "sections": [
                {
                    "number": "1",
                    "instructionalFormat": "Lecture",
                    "meetingPatterns": "MWF | 9:30 AM - 10:20 AM",
                    "instructors": "Emmy Noether",
                },
            ],
        },
    ]
}


def run(argv: list[str]) -> int:
    try:
        main(argv)
    except SystemExit as e:
        return int(e.code or 0)
    return 0


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.dir = Path(self._tmp.name)
        self.selection = self.dir / "selection.json"
        self.catalog = self.dir / "catalog.json"
        self.catalog.write_text(json.dumps(CATALOG), encoding="utf-8")

    def cli(self, *args: str) -> int:
        return run(["--selection", str(self.selection), *args])

    def test_cli_add_and_remove_roundtrip(self) -> None:
        self.assertEqual(self.cli("add", "coms  2270"), 0)
        self.assertEqual(storage.load_selected_course_ids(self.selection), ["COMS 2270"])

        self.assertEqual(self.cli("remove", "COMS 2270"), 0)
        self.assertEqual(storage.load_selected_course_ids(self.selection), [])

    def test_cli_add_requires_text(self) -> None:
        self.assertNotEqual(self.cli("add", "  "), 0)

    def test_courses_missing_catalog(self) -> None:
        self.assertEqual(self.cli("courses", str(self.dir / "nope.json")), 1)

    def test_courses_search(self) -> None:
        self.assertEqual(self.cli("courses", str(self.catalog), "--search", "calculus"), 0)

    def test_generate_without_selection_fails(self) -> None:
        self.assertEqual(self.cli("generate", str(self.catalog)), 1)

    def test_generate_from_stored_selection(self) -> None:
        storage.save_selected_course_ids(["COMS 2270", "MATH 1650"], self.selection)
        self.assertEqual(self.cli("generate", str(self.catalog), "--unique", "--explain"), 0)

    def test_generate_without_results_is_not_an_error(self) -> None:
        code = self.cli("generate", str(self.catalog), "-c", "COMS 2270", "-c", "MATH 1650", "--max", "0")
        self.assertEqual(code, 0)

    def test_export_needs_term_start(self) -> None:
        out = self.dir / "out.ics"
        self.assertEqual(self.cli("generate", str(self.catalog), "-c", "COMS 2270", "--export", str(out)), 1)
        self.assertFalse(out.exists())

    def test_export_writes_file(self) -> None:
        out = self.dir / "out.ics"
        code = self.cli(
            "generate",
            str(self.catalog),
            "-c",
            "MATH 1650",
            "--export",
            str(out),
            "--term-start",
            "2026-08-24",
        )
        self.assertEqual(code, 0)
        self.assertIn("DTSTART:20260824T093000", out.read_text(encoding="utf-8"))

    def test_prefs_roundtrip(self) -> None:
        self.assertEqual(self.cli("prefs", "--days", "Mon,Wed", "--time", "morning"), 0)
        prefs = storage.load_preferences(self.selection)
        self.assertEqual(prefs.preferred_days, ("Mon", "Wed"))
        self.assertEqual(self.cli("prefs", "--clear"), 0)
        self.assertTrue(storage.load_preferences(self.selection).is_empty)

    def test_conflicts(self) -> None:
        self.assertEqual(self.cli("conflicts", str(self.catalog), "-c", "COMS 2270", "-c", "MATH 1650"), 0)


if __name__ == "__main__":
    unittest.main()
