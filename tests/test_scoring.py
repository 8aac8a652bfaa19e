"""
Unit tests for schedule scoring.

Scores are small integers, so the expected values below are worked out by hand:
balance = 30 - 5 * (most classes on one day), +5 per class starting 9:00-15:00,
+25 for complete lecture/secondary pairing.
"""

import unittest

from schedulebuilder.model import (
    Course,
    GapPreference,
    Schedule,
    SchedulePreferences,
    ScheduleStyle,
    Section,
    TimeOfDay,
)
from schedulebuilder.scoring import meetings, preference_score, score_breakdown, score_schedule
from schedulebuilder.times import Clock


def sec(course_id, number, fmt, days, start, end) -> Section:
    return Section(course_id, number, fmt, days=tuple(days), start=start, end=end)


def schedule_of(*sections: Section) -> tuple[Schedule, dict]:
    by_course: dict = {}
    for s in sections:
        by_course.setdefault(s.course_id, ())
        by_course[s.course_id] = by_course[s.course_id] + (s,)
    courses = {cid: Course(cid, cid, sections=combo) for cid, combo in by_course.items()}
    return Schedule(sections_by_course=by_course), courses


class TestStructuralScore(unittest.TestCase):
    def test_single_class(self) -> None:
        schedule, courses = schedule_of(sec("A", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM"))
        # balance 25 + hours 5 + pairing 25
        self.assertEqual(score_schedule(schedule, courses), 55)

    def test_short_gap_bonus(self) -> None:
        schedule, courses = schedule_of(
            sec("A", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM"),
            sec("B", "1", "Lecture", ["Mon"], "10:00 AM", "10:50 AM"),
        )
        b = score_breakdown(schedule, courses)
        self.assertEqual(b.gaps, 15)
        self.assertEqual(b.balance, 20)
        self.assertEqual(b.hours, 10)
        self.assertEqual(b.total, 70)

    def test_long_gap_penalty(self) -> None:
        schedule, courses = schedule_of(
            sec("A", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM"),
            sec("B", "1", "Lecture", ["Mon"], "1:00 PM", "1:50 PM"),
        )
        # gap 190 minutes -> -6
        self.assertEqual(score_breakdown(schedule, courses).gaps, -6)

    def test_medium_gap(self) -> None:
        schedule, courses = schedule_of(
            sec("A", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM"),
            sec("B", "1", "Lecture", ["Mon"], "10:40 AM", "11:30 AM"),
        )
        self.assertEqual(score_breakdown(schedule, courses).gaps, 10)

    def test_online_sections_are_ignored(self) -> None:
        schedule, courses = schedule_of(
            sec("A", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM"),
            sec("B", "1", "Lecture", [], "Online", "Online"),
        )
        b = score_breakdown(schedule, courses)
        self.assertEqual((b.gaps, b.balance, b.hours), (0, 25, 5))

    def test_incomplete_pairing_is_penalized(self) -> None:
        lecture = sec("C", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM")
        lab = sec("C", "A", "Lab", ["Tue"], "9:00 AM", "10:50 AM")
        course = Course("C", "Chem", sections=(lecture, lab))
        schedule = Schedule(sections_by_course={"C": (lecture,)})
        self.assertEqual(score_breakdown(schedule, {"C": course}).completeness, -50)

    def test_empty_preferences_do_not_change_score(self) -> None:
        schedule, courses = schedule_of(sec("A", "1", "Lecture", ["Mon", "Wed"], "8:00 AM", "8:50 AM"))
        self.assertEqual(
            score_schedule(schedule, courses, preferences=SchedulePreferences()),
            score_schedule(schedule, courses),
        )


class TestPreferenceScore(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = Clock()

    def _score(self, prefs: SchedulePreferences, *sections: Section) -> int:
        items = meetings(list(sections), self.clock)
        starts = [self.clock.minutes(s.start) for s in sections]
        return preference_score(items, starts, prefs)

    def test_preferred_days(self) -> None:
        s = sec("A", "1", "Lecture", ["Mon", "Tue"], "9:00 AM", "9:50 AM")
        self.assertEqual(self._score(SchedulePreferences(preferred_days=("Mon",)), s), 15 - 5)

    def test_time_of_day(self) -> None:
        morning = sec("A", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM")
        prefs = SchedulePreferences(time_of_day=TimeOfDay.AFTERNOON)
        # +15 (no preferred days means every day counts) - 10 (wrong bucket)
        self.assertEqual(self._score(prefs, morning), 5)

    def test_gap_window(self) -> None:
        a = sec("A", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM")
        b = sec("B", "1", "Lecture", ["Mon"], "10:10 AM", "11:00 AM")
        self.assertEqual(self._score(SchedulePreferences(gap=GapPreference.SHORT), a, b), 30 + 15)
        self.assertEqual(self._score(SchedulePreferences(gap=GapPreference.LONG), a, b), 30 - 5)

    def test_compact_and_spread(self) -> None:
        a = sec("A", "1", "Lecture", ["Mon"], "9:00 AM", "9:50 AM")
        b = sec("B", "1", "Lecture", ["Mon"], "10:10 AM", "11:00 AM")
        self.assertEqual(self._score(SchedulePreferences(style=ScheduleStyle.COMPACT), a, b), 30 + 40 + 10)
        self.assertEqual(self._score(SchedulePreferences(style=ScheduleStyle.SPREAD), a, b), 30 + 10 - 10)


if __name__ == "__main__":
    unittest.main()
