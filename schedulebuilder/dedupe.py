"""
Duplicate filtering for "unique schedules only".

Two schedules are duplicates when they look the same on a weekly grid:
same courses, same formats, same days and times. Instructor, room and
section number are ignored.
"""

from __future__ import annotations

from schedulebuilder.model import Schedule, Section


def _section_key(section: Section) -> tuple[str, str, str]:
    return (",".join(section.days), section.start, section.end)


def schedule_signature(schedule: Schedule) -> str:
    parts: list[str] = []
    for course_id in sorted(schedule.sections_by_course):
        combo = sorted(schedule.sections_by_course[course_id], key=_section_key)
        parts.append(f"{course_id}:")
        for s in combo:
            parts.append(f"{s.format_text}-{','.join(s.days)}-{s.start}-{s.end};")
    return "".join(parts)


def unique_schedules(schedules: list[Schedule]) -> list[Schedule]:
    """
    Keep the first schedule per signature, in the given order.
    """
    seen: set[str] = set()
    out: list[Schedule] = []
    for schedule in schedules:
        sig = schedule_signature(schedule)
        if sig in seen:
            continue
        seen.add(sig)
        out.append(schedule)
    return out
