"""
Section classification and per-course combinations.

A course offers "primary" sections (usually lectures) and sometimes
"secondary" ones (labs, recitations, discussions, ...). When a course has
both, a student must take exactly one of each, so every schedulable unit of
such a course is a (primary, secondary) pair.

Classification heuristic:
- exact "Lecture" -> primary
- a secondary keyword anywhere in the format -> secondary
- unknown format -> look at the section number: leading letter ("A", "L1")
  means secondary, anything else primary
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from schedulebuilder.model import Course, InstructionalFormat, Section, SectionRole

log = logging.getLogger(__name__)

Combination = tuple[Section, ...]

# Raw catalog format -> (format, role). Checked in order, substring match.
# "lecture" is only matched exactly, see format_of().
SECONDARY_KEYWORDS: tuple[tuple[str, InstructionalFormat], ...] = (
    ("recitation", InstructionalFormat.RECITATION),
    ("discussion", InstructionalFormat.DISCUSSION),
    ("laboratory", InstructionalFormat.LAB),
    ("lab", InstructionalFormat.LAB),
    ("quiz", InstructionalFormat.OTHER),
    ("workshop", InstructionalFormat.OTHER),
    ("tutorial", InstructionalFormat.OTHER),
    ("studio", InstructionalFormat.OTHER),
    ("seminar", InstructionalFormat.OTHER),
    ("arranged", InstructionalFormat.OTHER),
)

_LEADING_DIGITS = re.compile(r"^\d+")


def format_of(text: Optional[str]) -> tuple[InstructionalFormat, Optional[SectionRole]]:
    """
    Map a raw instructional format string to (format, role).

    The role is None when the string says nothing about it.
    """
    raw = (text or "").strip().lower()
    if not raw:
        return InstructionalFormat.OTHER, None
    if raw == "lecture":
        return InstructionalFormat.LECTURE, SectionRole.PRIMARY
    for keyword, fmt in SECONDARY_KEYWORDS:
        if keyword in raw:
            return fmt, SectionRole.SECONDARY
    return InstructionalFormat.OTHER, None


def instructional_format(section: Section) -> InstructionalFormat:
    return format_of(section.format_text)[0]


def classify_section(section: Section) -> SectionRole:
    _, role = format_of(section.format_text)
    if role is not None:
        return role
    number = section.number.strip()
    if number and number[0].isalpha():
        return SectionRole.SECONDARY
    return SectionRole.PRIMARY


def split_by_role(sections: tuple[Section, ...] | list[Section]) -> tuple[list[Section], list[Section]]:
    primary: list[Section] = []
    secondary: list[Section] = []
    for s in sections:
        if classify_section(s) is SectionRole.PRIMARY:
            primary.append(s)
        else:
            secondary.append(s)
    return primary, secondary


def needs_pairing(sections: tuple[Section, ...] | list[Section]) -> bool:
    """
    True if the section set has both primary and secondary sections.
    """
    primary, secondary = split_by_role(sections)
    return bool(primary) and bool(secondary)


def _lab_instructors(secondary: list[Section]) -> set[str]:
    return {
        s.instructor.strip().lower()
        for s in secondary
        if instructional_format(s) is InstructionalFormat.LAB and s.instructor.strip()
    }


def _same_instructor(a: Section, b: Section) -> bool:
    return bool(a.instructor.strip()) and a.instructor.strip().lower() == b.instructor.strip().lower()


def _numeric_prefix(number: str) -> str:
    m = _LEADING_DIGITS.match(number.strip())
    return m.group(0) if m else ""


def is_compatible(primary: Section, secondary: Section, lab_instructor_count: int) -> bool:
    """
    Decide whether a primary section may be taken together with a secondary one.

    Lecture + Lab: the instructor must match only when the course's labs are
    taught by more than one instructor; otherwise labs are interchangeable.
    Any other secondary type pairs permissively because catalogs rarely encode
    the lecture link for them.
    """
    p_fmt = instructional_format(primary)
    s_fmt = instructional_format(secondary)

    if p_fmt is InstructionalFormat.LECTURE and s_fmt is InstructionalFormat.LAB:
        if lab_instructor_count > 1:
            return _same_instructor(primary, secondary)
        return True

    if _same_instructor(primary, secondary):
        return True
    p_num = primary.number.strip()
    s_num = secondary.number.strip()
    if p_num and s_num.startswith(p_num):
        return True
    p_prefix = _numeric_prefix(p_num)
    if p_prefix and p_prefix == _numeric_prefix(s_num):
        return True

    log.debug("No explicit link between %s and %s, pairing anyway", primary.label, secondary.label)
    return True


def section_combinations(course: Course) -> list[Combination]:
    """
    Return every valid combination of sections for one course.

    Each combination is one schedulable unit: a lone primary, a lone
    secondary, or a compatible (primary, secondary) pair.
    """
    primary, secondary = split_by_role(course.sections)

    if primary and secondary:
        lab_count = len(_lab_instructors(secondary))
        pairs = [(p, s) for p in primary for s in secondary if is_compatible(p, s, lab_count)]
        if not pairs:
            # never leave a course without options when it has sections
            log.warning(
                "No compatible primary/secondary pairs for %s, allowing all %d pairs",
                course.course_id,
                len(primary) * len(secondary),
            )
            pairs = [(p, s) for p in primary for s in secondary]
        return pairs

    if primary:
        return [(p,) for p in primary]
    return [(s,) for s in secondary]
