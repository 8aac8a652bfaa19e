"""
Schedule scoring.

Structural heuristics (always applied):
- gaps between consecutive classes on the same day:
    10-30 min: +15, 30-60 min: +10, above 60: -(gap / 30), below 10: -20
- day balance: 30 - 5 * (most classes on any one day)
- reasonable hours: +5 per class starting between 9:00 and 15:00
- pairing completeness: +25 if every lecture/secondary requirement holds, else -50

User preferences (only when not empty):
- preferred days: +15 per class day on a preferred day, -5 otherwise
- time of day: +20 per class starting in the requested bucket, -10 otherwise
- gap window: +15 per same-day gap inside the window, -5 otherwise
- style: compact = (5 - days used) * 10 + 5 * max per day,
         spread  = 10 * days used - 5 * max per day

Only in-person sections with real times are considered; online and TBD
sections do not occupy the week.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from schedulebuilder.model import Course, GapPreference, Schedule, SchedulePreferences, ScheduleStyle, Section, TimeOfDay
from schedulebuilder.search import is_valid_assignment
from schedulebuilder.times import Clock, day_index, is_schedulable, time_of_day

MIN_BUFFER = 10
REASONABLE_START = 9 * 60
REASONABLE_END = 15 * 60

Meeting = tuple[str, int, int, Section]


@dataclass(frozen=True)
class ScoreBreakdown:
    gaps: int = 0
    balance: int = 0
    hours: int = 0
    completeness: int = 0
    preferences: int = 0

    @property
    def total(self) -> int:
        return self.gaps + self.balance + self.hours + self.completeness + self.preferences


def meetings(sections: list[Section], clock: Clock) -> list[Meeting]:
    """
    Expand in-person sections into (day, start, end, section), sorted by day then start.
    """
    out: list[Meeting] = []
    for s in sections:
        if not is_schedulable(s):
            continue
        start, end = clock.window(s)
        for day in s.days:
            out.append((day, start, end, s))
    out.sort(key=lambda m: (day_index(m[0]), m[1], m[2]))
    return out


def same_day_gaps(items: list[Meeting]) -> list[int]:
    gaps: list[int] = []
    for prev, cur in zip(items, items[1:]):
        if prev[0] == cur[0]:
            gaps.append(cur[1] - prev[2])
    return gaps


def _gap_points(gap: int) -> int:
    if gap < MIN_BUFFER:
        return -20
    if gap <= 30:
        return 15
    if gap <= 60:
        return 10
    return -(gap // 30)


def preference_score(items: list[Meeting], starts: list[int], preferences: SchedulePreferences) -> int:
    score = 0

    # preferred days
    for day, _, _, _ in items:
        score += 15 if preferences.is_day_preferred(day) else -5

    # time of day, once per section
    if preferences.time_of_day is not TimeOfDay.NONE:
        for start in starts:
            score += 20 if time_of_day(start) is preferences.time_of_day else -10

    low, high = preferences.gap_window()
    if preferences.gap is not GapPreference.NONE:
        for gap in same_day_gaps(items):
            inside = gap >= low and (high is None or gap <= high)
            score += 15 if inside else -5

    per_day = Counter(day for day, _, _, _ in items)
    days_used = len(per_day)
    max_per_day = max(per_day.values(), default=0)
    if preferences.style is ScheduleStyle.COMPACT:
        score += (5 - days_used) * 10 + max_per_day * 5
    elif preferences.style is ScheduleStyle.SPREAD:
        score += days_used * 10 - max_per_day * 5

    return score


def score_breakdown(
    schedule: Schedule,
    courses_by_id: dict[str, Course],
    clock: Optional[Clock] = None,
    preferences: Optional[SchedulePreferences] = None,
) -> ScoreBreakdown:
    clock = clock or Clock()
    sections = list(schedule.sections())
    items = meetings(sections, clock)

    gaps = sum(_gap_points(g) for g in same_day_gaps(items))

    per_day = Counter(day for day, _, _, _ in items)
    balance = 30 - max(per_day.values(), default=0) * 5

    hours = 0
    for s in sections:
        if is_schedulable(s) and REASONABLE_START <= clock.minutes(s.start) <= REASONABLE_END:
            hours += 5

    assignment = tuple(schedule.sections_by_course.items())
    completeness = 25 if is_valid_assignment(assignment, courses_by_id) else -50

    pref = 0
    if preferences is not None and not preferences.is_empty:
        starts = [clock.minutes(s.start) for s in sections if is_schedulable(s)]
        pref = preference_score(items, starts, preferences)

    return ScoreBreakdown(gaps=gaps, balance=balance, hours=hours, completeness=completeness, preferences=pref)


def score_schedule(
    schedule: Schedule,
    courses_by_id: dict[str, Course],
    clock: Optional[Clock] = None,
    preferences: Optional[SchedulePreferences] = None,
) -> int:
    return score_breakdown(schedule, courses_by_id, clock, preferences).total
