"""
Time and day helpers.

Catalog times use the 12-hour convention "h:mm a" (e.g. "1:10 PM").
The sentinels "TBD", "Online" and "N/A" mark sections without a fixed slot;
those never take part in conflict checks.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from schedulebuilder.model import DeliveryMode, Section, SectionCategory, TimeOfDay

SENTINELS = frozenset({"tbd", "online", "n/a"})

DAY_ORDER = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# single-letter codes used by the course-search API ("MWF", "TR")
DAY_CODES = {"M": "Mon", "T": "Tue", "W": "Wed", "R": "Thu", "F": "Fri", "S": "Sat", "U": "Sun"}

FULL_DAY_NAMES = {
    "monday": "Mon",
    "tuesday": "Tue",
    "wednesday": "Wed",
    "thursday": "Thu",
    "friday": "Fri",
    "saturday": "Sat",
    "sunday": "Sun",
}

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")


def is_sentinel(text: Optional[str]) -> bool:
    return text is None or text.strip().lower() in SENTINELS or not text.strip()


def normalize_day(text: str) -> Optional[str]:
    """
    'monday' / 'Mon' / 'mon' / 'M' -> 'Mon'. Returns None for anything else.
    """
    raw = text.strip()
    if not raw:
        return None
    low = raw.lower()
    if low in FULL_DAY_NAMES:
        return FULL_DAY_NAMES[low]
    for day in DAY_ORDER:
        if low == day.lower():
            return day
    if raw.upper() in DAY_CODES and len(raw) == 1:
        return DAY_CODES[raw.upper()]
    return None


def expand_day_codes(codes: str) -> tuple[str, ...]:
    """
    'MWF' -> ('Mon', 'Wed', 'Fri'). Unknown letters are ignored.
    """
    out: list[str] = []
    for ch in codes.strip().upper():
        day = DAY_CODES.get(ch)
        if day and day not in out:
            out.append(day)
    return tuple(out)


def day_index(day: str) -> int:
    try:
        return DAY_ORDER.index(day)
    except ValueError:
        return len(DAY_ORDER)


def parse_clock(text: str) -> Optional[int]:
    """
    Convert 'h:mm AM/PM' to minutes since midnight.
    Returns None for invalid formats.
    """
    m = _CLOCK_RE.match(text or "")
    if not m:
        return None
    h = int(m.group(1))
    minute = int(m.group(2))
    period = m.group(3).upper()
    if not (1 <= h <= 12 and 0 <= minute <= 59):
        return None
    if period == "PM" and h != 12:
        h += 12
    if period == "AM" and h == 12:
        h = 0
    return h * 60 + minute


def format_minutes(minutes: int) -> str:
    """
    Minutes since midnight -> 'h:mm AM/PM'.
    """
    h, m = divmod(minutes, 60)
    period = "PM" if h >= 12 else "AM"
    display = 12 if h % 12 == 0 else h % 12
    return f"{display}:{m:02d} {period}"


def time_of_day(minutes: int) -> TimeOfDay:
    """
    Bucket a start time: morning [8,12), afternoon [12,17), evening [17,21).
    """
    hour = minutes // 60
    if 8 <= hour < 12:
        return TimeOfDay.MORNING
    if 12 <= hour < 17:
        return TimeOfDay.AFTERNOON
    if 17 <= hour < 21:
        return TimeOfDay.EVENING
    return TimeOfDay.NONE


def section_category(section: Section) -> SectionCategory:
    """
    Online beats TBD; everything with days and times is in person.
    """
    online_markers = (section.start, section.end, section.location or "")
    if section.delivery_mode is DeliveryMode.ONLINE or any(
        x.strip().lower() == "online" for x in online_markers
    ):
        return SectionCategory.ONLINE
    if section.delivery_mode is DeliveryMode.TBD or not section.days:
        return SectionCategory.TBD
    if is_sentinel(section.start) or is_sentinel(section.end):
        return SectionCategory.TBD
    return SectionCategory.IN_PERSON


def is_schedulable(section: Section) -> bool:
    return section_category(section) is SectionCategory.IN_PERSON


class Clock:
    """
    Per-search time parser.

    Caches parsed values so the hot conflict loop never re-parses a string,
    and warns once per malformed string. Invalid times degrade to 0 minutes
    instead of failing the whole search.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger or logging.getLogger(__name__)
        self._cache: dict[str, int] = {}
        self.invalid: set[str] = set()

    def minutes(self, text: str) -> int:
        if text in self._cache:
            return self._cache[text]
        value = parse_clock(text)
        if value is None:
            self.log.warning("Invalid time %r, treating it as 0 minutes", text)
            self.invalid.add(text)
            value = 0
        self._cache[text] = value
        return value

    def window(self, section: Section) -> tuple[int, int]:
        return self.minutes(section.start), self.minutes(section.end)
