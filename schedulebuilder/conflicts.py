"""
Conflict detection.

Two sections conflict if they meet on a shared day and either
- their time intervals overlap:  start < other_end AND end > other_start
- or the gap between them is shorter than the buffer (minimum commute time).

Online and TBD sections never conflict with anything.
"""

from __future__ import annotations

from itertools import product
from typing import Optional

from schedulebuilder.model import Course, Section
from schedulebuilder.sections import section_combinations
from schedulebuilder.times import Clock, is_schedulable

DEFAULT_BUFFER_MINUTES = 10


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def _too_close(a_start: int, a_end: int, b_start: int, b_end: int, buffer_minutes: int) -> bool:
    if a_end <= b_start:
        return b_start - a_end < buffer_minutes
    if b_end <= a_start:
        return a_start - b_end < buffer_minutes
    return False


def sections_conflict(
    a: Section,
    b: Section,
    clock: Optional[Clock] = None,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> bool:
    if not is_schedulable(a) or not is_schedulable(b):
        return False
    if not set(a.days) & set(b.days):
        return False

    clock = clock or Clock()
    a_start, a_end = clock.window(a)
    b_start, b_end = clock.window(b)

    if _overlaps(a_start, a_end, b_start, b_end):
        return True
    return _too_close(a_start, a_end, b_start, b_end, buffer_minutes)


def combination_conflicts(
    combo: tuple[Section, ...],
    placed: tuple[Section, ...],
    clock: Clock,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> bool:
    """
    True if any section of `combo` clashes with another one of `combo`
    or with an already placed section.
    """
    for i, s in enumerate(combo):
        for other in combo[i + 1 :]:
            if sections_conflict(s, other, clock, buffer_minutes):
                return True
        for other in placed:
            if sections_conflict(s, other, clock, buffer_minutes):
                return True
    return False


def find_conflicts(
    sections: list[Section],
    clock: Optional[Clock] = None,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> list[tuple[Section, Section]]:
    """
    Find conflicting section pairs (A,B), each pair appears once (i<j).
    """
    clock = clock or Clock()
    conflicts: list[tuple[Section, Section]] = []

    # O(n^2) is fine for one student's schedule
    for i in range(len(sections)):
        for j in range(i + 1, len(sections)):
            if sections_conflict(sections[i], sections[j], clock, buffer_minutes):
                conflicts.append((sections[i], sections[j]))

    return conflicts


def unresolvable_pairs(
    courses: list[Course],
    clock: Optional[Clock] = None,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> list[tuple[str, str]]:
    """
    Course pairs for which every combination of the two courses clashes.

    Used to explain why a search came back empty.
    """
    clock = clock or Clock()
    combos = [(c.course_id, section_combinations(c)) for c in courses if c.sections]
    bad: list[tuple[str, str]] = []

    for i in range(len(combos)):
        a_id, a_combos = combos[i]
        for j in range(i + 1, len(combos)):
            b_id, b_combos = combos[j]
            if not a_combos or not b_combos:
                continue
            if not any(
                not combination_conflicts(ca + cb, (), clock, buffer_minutes) for ca, cb in product(a_combos, b_combos)
            ):
                bad.append((a_id, b_id))
    return bad
