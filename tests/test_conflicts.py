"""
Unit tests for conflict detection.

Definition used here:
- A conflict exists if two sections share a day and their times overlap,
  or the gap between them is shorter than the buffer (default 10 minutes).
- Online and TBD sections never conflict.
"""

import unittest

from schedulebuilder.conflicts import find_conflicts, sections_conflict, unresolvable_pairs
from schedulebuilder.model import Course, DeliveryMode, Section


def sec(days, start, end, course_id="A", number="1", fmt="Lecture", mode=DeliveryMode.IN_PERSON) -> Section:
    return Section(course_id, number, fmt, mode, days=tuple(days), start=start, end=end)


class TestConflicts(unittest.TestCase):
    def test_overlap_same_day(self) -> None:
        a = sec(["Mon"], "10:00 AM", "11:00 AM")
        b = sec(["Mon", "Wed"], "10:30 AM", "12:00 PM", course_id="B")
        self.assertTrue(sections_conflict(a, b))

    def test_buffer_violation_without_overlap(self) -> None:
        a = sec(["Tue"], "9:00 AM", "10:00 AM")
        b = sec(["Tue"], "10:05 AM", "11:00 AM", course_id="B")
        self.assertTrue(sections_conflict(a, b, buffer_minutes=10))
        self.assertTrue(sections_conflict(b, a, buffer_minutes=10))

    def test_touching_end_is_conflict(self) -> None:
        a = sec(["Tue"], "9:00 AM", "10:00 AM")
        b = sec(["Tue"], "10:00 AM", "11:00 AM", course_id="B")
        self.assertTrue(sections_conflict(a, b))

    def test_gap_equal_to_buffer_is_fine(self) -> None:
        a = sec(["Tue"], "9:00 AM", "9:50 AM")
        b = sec(["Tue"], "10:00 AM", "10:50 AM", course_id="B")
        self.assertFalse(sections_conflict(a, b, buffer_minutes=10))
        self.assertTrue(sections_conflict(a, b, buffer_minutes=15))

    def test_different_day_no_conflict(self) -> None:
        a = sec(["Mon"], "10:00 AM", "11:00 AM")
        b = sec(["Tue"], "10:30 AM", "12:00 PM", course_id="B")
        self.assertFalse(sections_conflict(a, b))

    def test_online_and_tbd_never_conflict(self) -> None:
        a = sec(["Mon"], "10:00 AM", "11:00 AM")
        online = sec(["Mon"], "10:00 AM", "11:00 AM", course_id="B", mode=DeliveryMode.ONLINE)
        tbd = sec([], "TBD", "TBD", course_id="C")
        self.assertFalse(sections_conflict(a, online))
        self.assertFalse(sections_conflict(a, tbd))

    def test_find_conflicts_lists_each_pair_once(self) -> None:
        sections = [
            sec(["Mon"], "10:00 AM", "11:00 AM", course_id="A"),
            sec(["Mon"], "10:30 AM", "11:30 AM", course_id="B"),
            sec(["Mon"], "1:00 PM", "2:00 PM", course_id="C"),
        ]
        confs = find_conflicts(sections)
        self.assertEqual(len(confs), 1)
        self.assertEqual((confs[0][0].course_id, confs[0][1].course_id), ("A", "B"))


class TestUnresolvablePairs(unittest.TestCase):
    def test_pair_without_any_compatible_combination(self) -> None:
        x = Course("X", "X", sections=(sec(["Mon"], "9:00 AM", "9:50 AM", course_id="X"),))
        y = Course("Y", "Y", sections=(sec(["Mon"], "9:30 AM", "10:20 AM", course_id="Y"),))
        z = Course("Z", "Z", sections=(sec(["Fri"], "9:00 AM", "9:50 AM", course_id="Z"),))
        self.assertEqual(unresolvable_pairs([x, y, z]), [("X", "Y")])

    def test_alternative_section_resolves(self) -> None:
        x = Course("X", "X", sections=(sec(["Mon"], "9:00 AM", "9:50 AM", course_id="X"),))
        y = Course(
            "Y",
            "Y",
            sections=(
                sec(["Mon"], "9:30 AM", "10:20 AM", course_id="Y", number="1"),
                sec(["Tue"], "9:30 AM", "10:20 AM", course_id="Y", number="2"),
            ),
        )
        self.assertEqual(unresolvable_pairs([x, y]), [])


if __name__ == "__main__":
    unittest.main()
