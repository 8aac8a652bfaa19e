"""
Public entry point of the scheduling engine.

    generate(courses, max_schedules, preferences, unique_only) -> [Schedule]

Pipeline:
    filter unusable input -> per-course combinations -> backtracking search
    -> optional duplicate filter -> scoring -> stable sort -> truncate

The engine never raises on bad catalog data. Malformed entries are skipped
with a warning and the worst outcome is an empty list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from schedulebuilder.conflicts import DEFAULT_BUFFER_MINUTES
from schedulebuilder.dedupe import unique_schedules
from schedulebuilder.model import Course, Schedule, SchedulePreferences
from schedulebuilder.scoring import score_schedule
from schedulebuilder.search import ScheduleSearch
from schedulebuilder.sections import Combination, section_combinations
from schedulebuilder.times import Clock

ABSOLUTE_MAX_SCHEDULES = 100


@dataclass(frozen=True)
class EngineConfig:
    """
    Knobs for one search. Passed explicitly, the engine keeps no global state.

    search_budget: how many valid schedules the search collects before
    ranking (never less than the requested count).
    max_explored: optional cap on partial schedules visited.
    """

    absolute_max: int = ABSOLUTE_MAX_SCHEDULES
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES
    search_budget: int = ABSOLUTE_MAX_SCHEDULES
    max_explored: Optional[int] = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("schedulebuilder"))


def _usable_courses(courses: list[Course], log: logging.Logger) -> list[Course]:
    """
    Drop sections without identifiers, empty courses and repeated course IDs.
    """
    out: list[Course] = []
    seen: set[str] = set()
    for course in courses:
        cid = course.course_id.strip()
        if not cid:
            log.warning("Skipping course without an id (%r)", course.name)
            continue
        if cid in seen:
            log.warning("Skipping duplicate course %s", cid)
            continue

        sections = tuple(s for s in course.sections if s.course_id.strip() and s.number.strip())
        if len(sections) != len(course.sections):
            log.warning(
                "Skipping %d section(s) of %s without course id or number",
                len(course.sections) - len(sections),
                cid,
            )
        if not sections:
            log.warning("Course %s has no usable sections, leaving it out", cid)
            continue

        seen.add(cid)
        out.append(replace(course, sections=sections) if len(sections) != len(course.sections) else course)
    return out


def build_plan(courses: list[Course], log: logging.Logger) -> list[tuple[Course, list[Combination]]]:
    plan: list[tuple[Course, list[Combination]]] = []
    for course in courses:
        combos = section_combinations(course)
        if not combos:
            log.warning("Course %s has no valid section combinations, leaving it out", course.course_id)
            continue
        log.debug("Course %s: %d combination(s)", course.course_id, len(combos))
        plan.append((course, combos))
    return plan


def generate(
    courses: list[Course],
    max_schedules: int,
    preferences: Optional[SchedulePreferences] = None,
    unique_only: bool = False,
    config: Optional[EngineConfig] = None,
) -> list[Schedule]:
    """
    Return up to `max_schedules` conflict-free schedules, best score first.

    `max_schedules` is clamped to config.absolute_max. Equal scores keep the
    order in which the search produced them, so the output is deterministic.
    """
    config = config or EngineConfig()
    log = config.logger

    limit = min(max_schedules, config.absolute_max)
    if limit <= 0:
        return []

    plan = build_plan(_usable_courses(courses, log), log)
    if not plan:
        log.info("No schedulable courses given")
        return []

    clock = Clock(log)
    search = ScheduleSearch(
        plan,
        clock=clock,
        buffer_minutes=config.buffer_minutes,
        max_explored=config.max_explored,
        logger=log,
    )
    assignments = search.run(max(limit, config.search_budget))

    schedules = [Schedule(sections_by_course=dict(a)) for a in assignments]
    if unique_only:
        before = len(schedules)
        schedules = unique_schedules(schedules)
        log.debug("Duplicate filter kept %d of %d schedules", len(schedules), before)

    courses_by_id = {course.course_id: course for course, _ in plan}
    if preferences is not None and preferences.is_empty:
        preferences = None
    scored = [
        replace(s, score=score_schedule(s, courses_by_id, clock, preferences)) for s in schedules
    ]
    scored.sort(key=lambda s: s.score, reverse=True)

    log.info("Generated %d schedule(s), returning %d", len(scored), min(len(scored), limit))
    return scored[:limit]
