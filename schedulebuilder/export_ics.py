"""
iCalendar (.ics) export of one weekly schedule.

Every in-person section becomes one weekly recurring event per meeting day,
starting on the first matching weekday on or after the term start.
Online and TBD sections have no slot and are left out.

The file can be imported into Google Calendar, Outlook or Apple Calendar.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from schedulebuilder.model import Schedule
from schedulebuilder.times import DAY_ORDER, Clock, is_schedulable

ICS_DAYS = {"Mon": "MO", "Tue": "TU", "Wed": "WE", "Thu": "TH", "Fri": "FR", "Sat": "SA", "Sun": "SU"}


def _ics_escape(text: str) -> str:
    """
    Escape commas, semicolons, backslashes and newlines in ICS text values.
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _first_day_on_or_after(start: date, day: str) -> date:
    offset = (DAY_ORDER.index(day) - start.weekday()) % 7
    return start + timedelta(days=offset)


def _dt_local(d: date, minutes: int) -> str:
    """
    Date + minutes since midnight -> ICS local datetime 'YYYYMMDDTHHMM00'.
    """
    dt = datetime(d.year, d.month, d.day) + timedelta(minutes=minutes)
    return dt.strftime("%Y%m%dT%H%M00")


def export_schedule_to_ics(
    schedule: Schedule,
    out_path: str | Path,
    term_start: date,
    weeks: int = 15,
    course_names: dict[str, str] | None = None,
) -> int:
    """
    Export a schedule to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    names = course_names or {}
    clock = Clock()

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//schedulebuilder//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    count = 0
    for course_id, combo in schedule.sections_by_course.items():
        for section in combo:
            if not is_schedulable(section):
                continue
            start, end = clock.window(section)
            if end <= start:
                continue

            for day in section.days:
                if day not in ICS_DAYS:
                    continue
                first = _first_day_on_or_after(term_start, day)
                title = names.get(course_id, "")
                summary = f"{course_id} {section.format_text}".strip()
                if title:
                    summary = f"{summary} - {title}"
                uid = f"{course_id}-{section.number}-{day}-{first.isoformat()}@schedulebuilder".replace(" ", "")

                lines.append("BEGIN:VEVENT")
                lines.append(f"UID:{_ics_escape(uid)}")
                lines.append(f"DTSTAMP:{dtstamp}")
                lines.append(f"DTSTART:{_dt_local(first, start)}")
                lines.append(f"DTEND:{_dt_local(first, end)}")
                lines.append(f"RRULE:FREQ=WEEKLY;COUNT={max(weeks, 1)}")
                lines.append(f"SUMMARY:{_ics_escape(summary)}")
                if section.location:
                    lines.append(f"LOCATION:{_ics_escape(section.location)}")
                lines.append(f"DESCRIPTION:{_ics_escape(f'Section {section.number}, {section.instructor}')}")
                lines.append("END:VEVENT")
                count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
