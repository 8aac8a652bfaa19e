"""
Backtracking search over the selected courses.

Courses are assigned in input order, one combination at a time. A branch is
pruned as soon as the new combination clashes with a section already placed.
Each branch carries its own immutable tuples, so nothing is shared or undone
between siblings.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from schedulebuilder.conflicts import DEFAULT_BUFFER_MINUTES, combination_conflicts
from schedulebuilder.model import Course, Section, SectionRole
from schedulebuilder.sections import Combination, classify_section, needs_pairing
from schedulebuilder.times import Clock

Assignment = tuple[tuple[str, Combination], ...]


def is_valid_assignment(assignment: Assignment, courses_by_id: dict[str, Course]) -> bool:
    """
    Final safety net: every course whose section set mixes primary and
    secondary sections must have exactly one of each in its combination.
    """
    for course_id, combo in assignment:
        course = courses_by_id.get(course_id)
        if course is None:
            return False
        if not needs_pairing(course.sections):
            continue
        roles = [classify_section(s) for s in combo]
        if roles.count(SectionRole.PRIMARY) != 1 or roles.count(SectionRole.SECONDARY) != 1:
            return False
    return True


class ScheduleSearch:
    """
    Enumerates conflict-free assignments, one combination per course.

    `plan` is the ordered list of (course, combinations); courses without
    combinations must already be filtered out. `max_explored` optionally caps
    the number of partial assignments visited.
    """

    def __init__(
        self,
        plan: list[tuple[Course, list[Combination]]],
        clock: Optional[Clock] = None,
        buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
        max_explored: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.plan = plan
        self.clock = clock or Clock(logger)
        self.buffer_minutes = buffer_minutes
        self.max_explored = max_explored
        self.log = logger or logging.getLogger(__name__)
        self.courses_by_id = {course.course_id: course for course, _ in plan}
        self.explored = 0
        self.budget_exhausted = False

    def run(self, limit: int) -> list[Assignment]:
        results: list[Assignment] = []
        if limit <= 0 or not self.plan:
            return results

        for assignment in self._extend(0, (), ()):
            results.append(assignment)
            if len(results) >= limit:
                break

        if self.budget_exhausted:
            self.log.warning(
                "Search stopped after exploring %d partial schedules (%d found)", self.explored, len(results)
            )
        self.log.debug("Search explored %d partial schedules, found %d", self.explored, len(results))
        return results

    def _extend(self, index: int, chosen: Assignment, placed: tuple[Section, ...]) -> Iterator[Assignment]:
        if index == len(self.plan):
            if is_valid_assignment(chosen, self.courses_by_id):
                yield chosen
            return

        course, combos = self.plan[index]
        for combo in combos:
            if self.max_explored is not None and self.explored >= self.max_explored:
                self.budget_exhausted = True
                return
            self.explored += 1

            if combination_conflicts(combo, placed, self.clock, self.buffer_minutes):
                continue
            yield from self._extend(index + 1, chosen + ((course.course_id, combo),), placed + combo)
