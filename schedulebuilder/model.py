"""
Central data model definitions used across the project.

This module defines the canonical structure of Course, Section, preference
and Schedule objects so that:
- all modules share the same field names
- the catalog loader, the engine and the terminal UI agree on one shape
- nothing in the engine depends on object identity (schedules are keyed by course_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

log = logging.getLogger(__name__)


class InstructionalFormat(str, Enum):
    LECTURE = "Lecture"
    LAB = "Lab"
    RECITATION = "Recitation"
    DISCUSSION = "Discussion"
    OTHER = "Other"


class SectionRole(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class DeliveryMode(str, Enum):
    IN_PERSON = "In-Person"
    ONLINE = "Online"
    TBD = "TBD"

    @classmethod
    def from_text(cls, text: Optional[str]) -> "DeliveryMode":
        raw = (text or "").strip().lower()
        if raw == "online":
            return cls.ONLINE
        if raw in ("tbd", "tba"):
            return cls.TBD
        return cls.IN_PERSON


class SectionCategory(str, Enum):
    IN_PERSON = "in-person"
    ONLINE = "online"
    TBD = "tbd"


class TimeOfDay(str, Enum):
    NONE = "none"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class GapPreference(str, Enum):
    NONE = "none"
    MINIMAL = "minimal"
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class ScheduleStyle(str, Enum):
    NONE = "none"
    COMPACT = "compact"
    SPREAD = "spread"


# (min, max) minutes between two consecutive classes on the same day
GAP_WINDOWS: dict[GapPreference, tuple[int, Optional[int]]] = {
    GapPreference.NONE: (0, None),
    GapPreference.MINIMAL: (0, 15),
    GapPreference.SHORT: (15, 30),
    GapPreference.MEDIUM: (30, 60),
    GapPreference.LONG: (60, None),
}


@dataclass(frozen=True)
class Section:
    """
    One schedulable offering of a course (lecture, lab, recitation, ...).

    `days` holds day abbreviations ("Mon".."Sun"); `start`/`end` are "h:mm a"
    strings such as "1:10 PM", or one of the sentinels "TBD", "Online", "N/A".
    """

    course_id: str
    number: str
    format_text: str = ""
    delivery_mode: DeliveryMode = DeliveryMode.IN_PERSON
    days: tuple[str, ...] = ()
    start: str = "N/A"
    end: str = "N/A"
    instructor: str = "TBA"
    open_seats: int = 0
    location: Optional[str] = None
    credits: Optional[str] = None

    @property
    def label(self) -> str:
        fmt = self.format_text or "Section"
        return f"{self.course_id} {fmt} {self.number}"


@dataclass(frozen=True)
class Course:
    """
    Represents one course of the catalog snapshot together with its sections.
    """

    course_id: str
    name: str
    description: str = ""
    sections: tuple[Section, ...] = ()


@dataclass(frozen=True)
class SchedulePreferences:
    """
    Optional user preferences. The default instance means "no preferences".
    """

    preferred_days: tuple[str, ...] = ()
    time_of_day: TimeOfDay = TimeOfDay.NONE
    gap: GapPreference = GapPreference.NONE
    style: ScheduleStyle = ScheduleStyle.NONE

    @property
    def is_empty(self) -> bool:
        return (
            not self.preferred_days
            and self.time_of_day is TimeOfDay.NONE
            and self.gap is GapPreference.NONE
            and self.style is ScheduleStyle.NONE
        )

    def gap_window(self) -> tuple[int, Optional[int]]:
        return GAP_WINDOWS[self.gap]

    def is_day_preferred(self, day: str) -> bool:
        # no preferred days means every day is fine
        return not self.preferred_days or day in self.preferred_days

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchedulePreferences":
        """
        Build preferences from loosely typed data (stored JSON, CLI flags).

        Unknown values fall back to the default with a warning instead of raising.
        """
        from schedulebuilder.times import normalize_day

        days: list[str] = []
        raw_days = data.get("preferred_days") or []
        if isinstance(raw_days, str):
            raw_days = [d for d in raw_days.split(",")]
        for d in raw_days:
            day = normalize_day(str(d))
            if day and day not in days:
                days.append(day)

        return cls(
            preferred_days=tuple(days),
            time_of_day=_enum_value(TimeOfDay, data.get("time_of_day"), TimeOfDay.NONE),
            gap=_enum_value(GapPreference, data.get("gap"), GapPreference.NONE),
            style=_enum_value(ScheduleStyle, data.get("style"), ScheduleStyle.NONE),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "preferred_days": list(self.preferred_days),
            "time_of_day": self.time_of_day.value,
            "gap": self.gap.value,
            "style": self.style.value,
        }


def _enum_value(enum_cls: Any, raw: Any, default: Any) -> Any:
    text = str(raw or "").strip().lower()
    if not text:
        return default
    try:
        return enum_cls(text)
    except ValueError:
        log.warning("Unknown %s value %r, using %r", enum_cls.__name__, raw, default.value)
        return default


@dataclass(frozen=True)
class Schedule:
    """
    One conflict-free timetable: course_id -> chosen combination (1-2 sections).

    Courses keep the order in which the search assigned them.
    """

    sections_by_course: dict[str, tuple[Section, ...]] = field(default_factory=dict)
    score: int = 0

    @property
    def course_ids(self) -> list[str]:
        return list(self.sections_by_course)

    def sections(self) -> Iterator[Section]:
        for combo in self.sections_by_course.values():
            yield from combo
