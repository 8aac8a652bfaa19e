"""
Terminal rendering of courses and generated schedules with rich.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table

from schedulebuilder.model import Course, Schedule, Section
from schedulebuilder.scoring import ScoreBreakdown
from schedulebuilder.times import DAY_ORDER, Clock, day_index, format_minutes, is_schedulable, section_category

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri"]


def _short(text: str, max_len: int = 30) -> str:
    text = text.strip()
    if len(text) > max_len:
        return text[: max_len - 1].rstrip() + "…"
    return text


def section_line(section: Section, rich: bool = False) -> str:
    if is_schedulable(section):
        when = f"{'/'.join(section.days)} {section.start}-{section.end}"
    else:
        when = section_category(section).value
    fmt = section.format_text or "Section"
    instr = _short(section.instructor)
    if rich:
        bits = [f"[bold cyan]{section.course_id}[/]", f"[green]{fmt}[/] {section.number}", when]
        if instr:
            bits.append(f"[magenta]{instr}[/]")
    else:
        bits = [section.course_id, f"{fmt} {section.number}", when]
        if instr:
            bits.append(instr)
    if section.location:
        bits.append(f"@ {section.location}")
    return " | ".join(bits)


def courses_table(courses: list[Course], title: str = "Courses") -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Course")
    table.add_column("Title")
    table.add_column("Sections", justify="right")
    table.add_column("Open seats", justify="right")
    for c in courses:
        seats = sum(s.open_seats for s in c.sections)
        table.add_row(f"[bold cyan]{c.course_id}[/]", c.name or "(no title)", str(len(c.sections)), f"[yellow]{seats}[/]")
    return table


def summary_table(schedules: list[Schedule]) -> Table:
    """
    One row per ranked schedule: score, days on campus, earliest and latest class.
    """
    clock = Clock()
    table = Table(title="Generated schedules", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Days")
    table.add_column("Earliest")
    table.add_column("Latest")

    for i, schedule in enumerate(schedules, start=1):
        placed = [s for s in schedule.sections() if is_schedulable(s)]
        days = sorted({d for s in placed for d in s.days}, key=day_index)
        if placed:
            earliest = format_minutes(min(clock.minutes(s.start) for s in placed))
            latest = format_minutes(max(clock.minutes(s.end) for s in placed))
        else:
            earliest = latest = "-"
        table.add_row(str(i), f"[yellow]{schedule.score}[/]", " ".join(days) or "-", earliest, latest)
    return table


def timetable(schedule: Schedule, title: str = "") -> Table:
    """
    Weekly grid, one column per day (Mon-Fri plus weekend days in use).
    """
    clock = Clock()
    placed = [s for s in schedule.sections() if is_schedulable(s)]
    used = {d for s in placed for d in s.days}
    columns = WEEKDAYS + [d for d in DAY_ORDER[5:] if d in used]

    buckets: dict[str, list[Section]] = {d: [] for d in columns}
    for s in sorted(placed, key=lambda x: clock.minutes(x.start)):
        for d in s.days:
            if d in buckets:
                buckets[d].append(s)

    table = Table(title=title or None, box=box.SIMPLE)
    for day in columns:
        table.add_column(day)

    max_len = max((len(v) for v in buckets.values()), default=0)
    for r in range(max_len):
        row = []
        for day in columns:
            if r < len(buckets[day]):
                s = buckets[day][r]
                row.append(f"{s.start}-{s.end}\n[bold cyan]{s.course_id}[/] {s.format_text} {s.number}")
            else:
                row.append("")
        table.add_row(*row)
    return table


def print_schedule(
    console: Console,
    index: int,
    schedule: Schedule,
    breakdown: ScoreBreakdown | None = None,
) -> None:
    console.print(timetable(schedule, title=f"Schedule {index} (score {schedule.score})"))

    off_grid = [s for s in schedule.sections() if not is_schedulable(s)]
    if off_grid:
        console.print("[bold]Online / TBD:[/]")
        for s in off_grid:
            console.print(f"  - {section_line(s, rich=True)}")

    if breakdown is not None:
        console.print(
            f"gaps {breakdown.gaps}, balance {breakdown.balance}, hours {breakdown.hours}, "
            f"pairing {breakdown.completeness}, preferences {breakdown.preferences}"
        )
