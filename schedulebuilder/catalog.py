"""
Catalog parsing (course-search JSON -> Course/Section objects).

- Reads a catalog snapshot saved from the course-search API
- Extracts each course and its sections
- Splits "meetingPatterns" ("MWF | 1:10 PM - 2:00 PM") into days and times

Important rules:
- a broken course or section is skipped with a warning, never fatal
- courses without any usable section are dropped
- online sections without a slot get days=() and times "Online"
- in-person sections without a slot get days=() and times "TBD"
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from schedulebuilder.model import Course, DeliveryMode, Section
from schedulebuilder.times import expand_day_codes, is_sentinel, normalize_day

log = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when a catalog file cannot be read at all."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _text(node: dict[str, Any], *keys: str, default: str = "") -> str:
    """
    First non-empty string value among `keys`.
    """
    for key in keys:
        value = node.get(key)
        if value is None:
            continue
        if isinstance(value, list):
            value = "; ".join(str(x).strip() for x in value if str(x).strip())
        value = str(value).strip()
        if value:
            return value
    return default


def _int(value: Any, default: int = 0) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return default


def parse_days(text: str) -> tuple[str, ...]:
    """
    'MWF' -> ('Mon', 'Wed', 'Fri'); 'Mon,Wed' / 'Monday, Wednesday' also work.
    Sentinels and garbage give ().
    """
    raw = text.strip()
    if is_sentinel(raw):
        return ()
    if "," in raw or " " in raw:
        days: list[str] = []
        for part in raw.replace(",", " ").split():
            day = normalize_day(part)
            if day and day not in days:
                days.append(day)
        return tuple(days)
    day = normalize_day(raw)
    if day:
        return (day,)
    return expand_day_codes(raw)


def parse_meeting_pattern(pattern: str) -> tuple[tuple[str, ...], str, str]:
    """
    Parse 'MWF | 1:10 PM - 2:00 PM' into (days, start, end).

    Missing parts come back as () / "N/A".
    """
    days: tuple[str, ...] = ()
    start = end = "N/A"

    raw = (pattern or "").strip()
    if not raw or "|" not in raw:
        return days, start, end

    day_part, _, time_part = raw.partition("|")
    days = parse_days(day_part)

    times = [t.strip() for t in time_part.split("-")]
    if len(times) == 2 and times[0] and times[1]:
        start, end = times[0], times[1]

    return days, start, end


# ---------------------------------------------------------------------------
# Section / course parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def parse_section(node: dict[str, Any], fallback_course_id: str = "") -> Optional[Section]:
    """
    Parse one section object. Returns None if required fields are missing.
    """
    if not isinstance(node, dict):
        return None

    course_id = _text(node, "courseNumber", "courseId", default=fallback_course_id)
    number = _text(node, "number", "sectionNumber")
    if not course_id or not number:
        log.warning("Section missing required fields: courseId=%r, number=%r", course_id, number)
        return None

    days, start, end = parse_meeting_pattern(_text(node, "meetingPatterns"))
    delivery = DeliveryMode.from_text(_text(node, "deliveryMode", default="In-Person"))

    has_days = bool(days)
    has_time = not is_sentinel(start) and not is_sentinel(end)

    if delivery is DeliveryMode.ONLINE:
        if not has_time:
            start = end = "Online"
            log.info("Section %s %s is online, no meeting times", course_id, number)
    elif not has_days or not has_time:
        if not has_time:
            start = end = "TBD"
        log.info("Section %s %s has no complete meeting pattern, marking it TBD", course_id, number)

    location = _text(node, "locations", "location") or None

    return Section(
        course_id=course_id,
        number=number,
        format_text=_text(node, "instructionalFormat", default="Unknown"),
        delivery_mode=delivery,
        days=days,
        start=start,
        end=end,
        instructor=_text(node, "instructors", "instructor", default="TBA"),
        open_seats=_int(node.get("openSeats")),
        location=location,
        credits=_text(node, "credits") or None,
    )


def parse_course(node: dict[str, Any]) -> Optional[Course]:
    """
    Parse one course object with its sections. Returns None for unusable courses.
    """
    if not isinstance(node, dict):
        return None

    course_id = _text(node, "courseNumber", "number", "courseId")
    if not course_id:
        log.warning("Course missing courseNumber/number, skipping")
        return None

    sections: list[Section] = []
    raw_sections = node.get("sections")
    if isinstance(raw_sections, list):
        for sec_node in raw_sections:
            section = parse_section(sec_node, fallback_course_id=course_id)
            if section is not None:
                sections.append(section)

    if not sections:
        log.warning("Course %s has no usable sections, skipping", course_id)
        return None

    return Course(
        course_id=course_id,
        name=_text(node, "title", "name"),
        description=_text(node, "description"),
        sections=tuple(sections),
    )


def parse_courses(data: Any) -> list[Course]:
    """
    Parse a whole catalog: a list of courses or {"data": [...]}.
    """
    if isinstance(data, dict):
        data = data.get("data", data.get("courses"))
    if not isinstance(data, list):
        log.warning("Catalog data is not a list of courses")
        return []

    courses: list[Course] = []
    for node in data:
        course = parse_course(node)
        if course is not None:
            courses.append(course)
    return courses


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_catalog(path: str | Path) -> list[Course]:
    """
    Load and parse a catalog JSON file.

    Raises CatalogError if the file is missing or not valid JSON.
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {p}") from e
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogError(f"Cannot read catalog {p}: {e}") from e

    courses = parse_courses(data)
    log.debug("Loaded %d course(s) from %s", len(courses), p)
    return courses


def find_courses(courses: list[Course], course_ids: list[str]) -> tuple[list[Course], list[str]]:
    """
    Pick courses by id (case-insensitive), in the order requested.
    Returns (found, missing_ids).
    """
    by_id = {c.course_id.strip().upper(): c for c in courses}
    found: list[Course] = []
    missing: list[str] = []
    for cid in course_ids:
        course = by_id.get(cid.strip().upper())
        if course is None:
            missing.append(cid)
        elif course not in found:
            found.append(course)
    return found, missing
