"""
Unit tests for local storage of the course selection and preferences.

Storage contract:
- Missing/invalid file -> empty selection, empty preferences
- IDs are normalized on save/load (collapsed whitespace + uppercase), order kept
- JSON schema: {"selected_course_ids": [...], "preferences": {...}}
"""

import json
import tempfile
import unittest
from pathlib import Path

from schedulebuilder.model import GapPreference, SchedulePreferences, ScheduleStyle, TimeOfDay
from schedulebuilder.storage import (
    load_preferences,
    load_selected_course_ids,
    save_preferences,
    save_selected_course_ids,
)


class TestStorage(unittest.TestCase):
    def test_load_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "missing.json"
            self.assertEqual(load_selected_course_ids(p), [])
            self.assertTrue(load_preferences(p).is_empty)

    def test_corrupt_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "selection.json"
            p.write_text("[1, 2", encoding="utf-8")
            self.assertEqual(load_selected_course_ids(p), [])

    def test_save_and_load_roundtrip(self) -> None:
        # IDs should be normalized and persisted in JSON schema
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "selection.json"
            save_selected_course_ids(["coms 2270", " MATH  1650 ", "COMS 2270"], p)
            self.assertEqual(load_selected_course_ids(p), ["COMS 2270", "MATH 1650"])

            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual(data["selected_course_ids"], ["COMS 2270", "MATH 1650"])

    def test_preferences_roundtrip_keeps_selection(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "selection.json"
            save_selected_course_ids(["COMS 2270"], p)
            prefs = SchedulePreferences(
                preferred_days=("Mon", "Wed"),
                time_of_day=TimeOfDay.MORNING,
                gap=GapPreference.SHORT,
                style=ScheduleStyle.COMPACT,
            )
            save_preferences(prefs, p)

            self.assertEqual(load_preferences(p), prefs)
            self.assertEqual(load_selected_course_ids(p), ["COMS 2270"])


class TestPreferencesFromDict(unittest.TestCase):
    def test_loose_values(self) -> None:
        prefs = SchedulePreferences.from_dict(
            {"preferred_days": "monday, Wed,xyz", "time_of_day": "Evening", "gap": "", "style": None}
        )
        self.assertEqual(prefs.preferred_days, ("Mon", "Wed"))
        self.assertEqual(prefs.time_of_day, TimeOfDay.EVENING)
        self.assertEqual(prefs.gap, GapPreference.NONE)
        self.assertFalse(prefs.is_empty)

    def test_unknown_value_warns_and_defaults(self) -> None:
        with self.assertLogs("schedulebuilder.model", level="WARNING"):
            prefs = SchedulePreferences.from_dict({"style": "chaotic"})
        self.assertEqual(prefs.style, ScheduleStyle.NONE)
        self.assertTrue(prefs.is_empty)

    def test_gap_windows(self) -> None:
        self.assertEqual(SchedulePreferences(gap=GapPreference.MINIMAL).gap_window(), (0, 15))
        self.assertEqual(SchedulePreferences(gap=GapPreference.LONG).gap_window(), (60, None))


if __name__ == "__main__":
    unittest.main()
