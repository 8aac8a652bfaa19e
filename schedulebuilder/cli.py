"""
CLI (Command Line Interface).

Quick terminal commands around the scheduling engine, e.g.:

    schedulebuilder courses catalog.json --search calculus
    schedulebuilder add "MATH 1650"
    schedulebuilder remove "MATH 1650"
    schedulebuilder prefs --days Mon,Wed,Fri --time morning --style compact
    schedulebuilder generate catalog.json --max 20 --unique --show 3
    schedulebuilder generate catalog.json --export fall.ics --term-start 2026-08-24
    schedulebuilder conflicts catalog.json

The catalog is a JSON snapshot saved from the course-search API; this tool
does not fetch it.
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

from schedulebuilder.builder import ABSOLUTE_MAX_SCHEDULES, EngineConfig, generate
from schedulebuilder.catalog import CatalogError, find_courses, load_catalog
from schedulebuilder.conflicts import DEFAULT_BUFFER_MINUTES, unresolvable_pairs
from schedulebuilder.export_ics import export_schedule_to_ics
from schedulebuilder.model import Course, GapPreference, SchedulePreferences, ScheduleStyle, TimeOfDay
from schedulebuilder.render import courses_table, print_schedule, summary_table
from schedulebuilder.scoring import score_breakdown
from schedulebuilder.storage import (
    load_preferences,
    load_selected_course_ids,
    save_preferences,
    save_selected_course_ids,
)

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(path: str) -> Optional[list[Course]]:
    """
    Load the catalog, printing a message instead of crashing.
    """
    try:
        return load_catalog(path)
    except CatalogError as e:
        console.print(f"[red]{e}[/]")
        return None


def _chosen_courses(args: argparse.Namespace, courses: list[Course]) -> Optional[list[Course]]:
    """
    Courses from --course, or the stored selection when none are given.
    """
    ids = list(args.course or []) or load_selected_course_ids(args.selection)
    if not ids:
        console.print("No courses selected. Use 'add COURSE_ID' or --course.")
        return None

    found, missing = find_courses(courses, ids)
    for cid in missing:
        console.print(f"[yellow]Warning:[/] course '{cid}' not found in catalog (ignored).")
    if not found:
        console.print("None of the selected courses are in the catalog.")
        return None
    return found


def _preferences_from_args(args: argparse.Namespace, base: SchedulePreferences) -> SchedulePreferences:
    """
    Command line flags override the stored preferences field by field.
    """
    data: dict[str, Any] = base.to_dict()
    if args.days is not None:
        data["preferred_days"] = args.days
    if args.time is not None:
        data["time_of_day"] = args.time
    if args.gap is not None:
        data["gap"] = args.gap
    if args.style is not None:
        data["style"] = args.style
    return SchedulePreferences.from_dict(data)


def _cmd_courses(args: argparse.Namespace) -> int:
    """
    List catalog courses, optionally filtered by a search text.
    """
    courses = _load(args.catalog)
    if courses is None:
        return 1

    query = (args.search or "").strip().lower()
    if query:
        courses = [
            c
            for c in courses
            if query in f"{c.course_id} {c.name} {' '.join(s.instructor for s in c.sections)}".lower()
        ]

    if not courses:
        console.print("No results.")
        return 0

    console.print(courses_table(courses[:50], title=f"Courses ({len(courses)})"))
    if len(courses) > 50:
        console.print(f"... and {len(courses) - 50} more results")
    return 0


def _cmd_add(args: argparse.Namespace) -> int:
    cid = " ".join((args.course_id or "").split()).upper()
    if not cid:
        console.print("Please provide a course_id.")
        return 1

    selected = load_selected_course_ids(args.selection)
    if cid in selected:
        console.print(f"Already selected: {cid}")
        return 0

    selected.append(cid)
    save_selected_course_ids(selected, args.selection)
    console.print(f"Added: {cid} (selected: {len(selected)})")
    return 0


def _cmd_remove(args: argparse.Namespace) -> int:
    cid = " ".join((args.course_id or "").split()).upper()
    if not cid:
        console.print("Please provide a course_id.")
        return 1

    selected = load_selected_course_ids(args.selection)
    if cid not in selected:
        console.print(f"Not selected: {cid}")
        return 0

    selected.remove(cid)
    save_selected_course_ids(selected, args.selection)
    console.print(f"Removed: {cid} (selected: {len(selected)})")
    return 0


def _cmd_prefs(args: argparse.Namespace) -> int:
    """
    Show, update or clear stored preferences.
    """
    if args.clear:
        prefs = SchedulePreferences()
        save_preferences(prefs, args.selection)
    else:
        current = load_preferences(args.selection)
        prefs = _preferences_from_args(args, current)
        if prefs != current:
            save_preferences(prefs, args.selection)

    if prefs.is_empty:
        console.print("No preferences set.")
    else:
        console.print(
            f"days={','.join(prefs.preferred_days) or 'any'} | time={prefs.time_of_day.value} | "
            f"gap={prefs.gap.value} | style={prefs.style.value}"
        )
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    courses = _load(args.catalog)
    if courses is None:
        return 1
    chosen = _chosen_courses(args, courses)
    if chosen is None:
        return 1

    if args.export and args.term_start is None:
        console.print("--export needs --term-start YYYY-MM-DD.")
        return 1

    preferences = _preferences_from_args(args, load_preferences(args.selection))
    config = EngineConfig(buffer_minutes=args.buffer, max_explored=args.max_explored)

    schedules = generate(chosen, args.max, preferences=preferences, unique_only=args.unique, config=config)
    if not schedules:
        console.print(
            "No valid schedules found. This may be due to conflicting times, "
            "insufficient commute time, or missing required recitations/labs."
        )
        for a, b in unresolvable_pairs(chosen, buffer_minutes=args.buffer):
            console.print(f"  - {a} <-> {b} can never be taken together")
        return 0

    console.print(f"Generated {len(schedules)} schedule(s) for {len(chosen)} course(s).")
    console.print(summary_table(schedules))

    courses_by_id = {c.course_id: c for c in chosen}
    for i, schedule in enumerate(schedules[: max(args.show, 0)], start=1):
        breakdown = score_breakdown(schedule, courses_by_id, preferences=preferences) if args.explain else None
        print_schedule(console, i, schedule, breakdown)

    if args.export:
        pick = args.pick if 1 <= args.pick <= len(schedules) else 1
        names = {c.course_id: c.name for c in chosen}
        n = export_schedule_to_ics(schedules[pick - 1], args.export, args.term_start, args.weeks, names)
        console.print(f"Exported {n} weekly events of schedule {pick} to: {Path(args.export).resolve()}")
    return 0


def _cmd_conflicts(args: argparse.Namespace) -> int:
    """
    Print course pairs that can never be scheduled together.
    """
    courses = _load(args.catalog)
    if courses is None:
        return 1
    chosen = _chosen_courses(args, courses)
    if chosen is None:
        return 1

    pairs = unresolvable_pairs(chosen, buffer_minutes=args.buffer)
    if not pairs:
        console.print("No unresolvable conflicts found.")
        return 0

    console.print(f"Unresolvable course pairs: {len(pairs)}")
    for a, b in pairs:
        console.print(f"- {a}  <->  {b}")
    return 0


def _date(text: str) -> date:
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {text!r}, expected YYYY-MM-DD") from e


def _add_pref_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--days", type=str, default=None, help="Preferred days, e.g. Mon,Wed,Fri")
    p.add_argument("--time", type=str, default=None, choices=[t.value for t in TimeOfDay])
    p.add_argument("--gap", type=str, default=None, choices=[g.value for g in GapPreference])
    p.add_argument("--style", type=str, default=None, choices=[s.value for s in ScheduleStyle])


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="schedulebuilder", description="Conflict-free class schedule builder")
    parser.add_argument("--selection", type=Path, default=None, help="Selection file (default ~/.schedulebuilder)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_courses = sub.add_parser("courses", help="List courses of a catalog")
    p_courses.add_argument("catalog", type=str, help="Catalog JSON file")
    p_courses.add_argument("--search", "-s", type=str, default="", help="Search text")

    p_add = sub.add_parser("add", help="Add course by course_id")
    p_add.add_argument("course_id", type=str, help="Course ID (e.g. 'COMS 2270')")

    p_remove = sub.add_parser("remove", help="Remove course by course_id")
    p_remove.add_argument("course_id", type=str, help="Course ID (e.g. 'COMS 2270')")

    p_prefs = sub.add_parser("prefs", help="Show or store schedule preferences")
    _add_pref_flags(p_prefs)
    p_prefs.add_argument("--clear", action="store_true", help="Remove all preferences")

    p_gen = sub.add_parser("generate", help="Generate ranked schedules")
    p_gen.add_argument("catalog", type=str, help="Catalog JSON file")
    p_gen.add_argument("--course", "-c", action="append", help="Course ID (repeatable, default: stored selection)")
    p_gen.add_argument("--max", type=int, default=ABSOLUTE_MAX_SCHEDULES, help="Maximum schedules (capped at 100)")
    p_gen.add_argument("--unique", action="store_true", help="Hide schedules that look identical on the grid")
    p_gen.add_argument("--buffer", type=int, default=DEFAULT_BUFFER_MINUTES, help="Minimum minutes between classes")
    p_gen.add_argument("--max-explored", type=int, default=None, help="Stop after this many partial schedules")
    p_gen.add_argument("--show", type=int, default=1, help="How many timetables to print")
    p_gen.add_argument("--explain", action="store_true", help="Print the score breakdown")
    p_gen.add_argument("--export", type=str, default=None, help="Write one schedule to this .ics file")
    p_gen.add_argument("--pick", type=int, default=1, help="Schedule number to export")
    p_gen.add_argument("--term-start", type=_date, default=None, help="First day of classes (YYYY-MM-DD)")
    p_gen.add_argument("--weeks", type=int, default=15, help="Number of weeks in the term")
    _add_pref_flags(p_gen)

    p_conf = sub.add_parser("conflicts", help="Show course pairs that can never be combined")
    p_conf.add_argument("catalog", type=str, help="Catalog JSON file")
    p_conf.add_argument("--course", "-c", action="append", help="Course ID (repeatable, default: stored selection)")
    p_conf.add_argument("--buffer", type=int, default=DEFAULT_BUFFER_MINUTES, help="Minimum minutes between classes")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.command == "courses":
        raise SystemExit(_cmd_courses(args))
    if args.command == "add":
        raise SystemExit(_cmd_add(args))
    if args.command == "remove":
        raise SystemExit(_cmd_remove(args))
    if args.command == "prefs":
        raise SystemExit(_cmd_prefs(args))
    if args.command == "generate":
        raise SystemExit(_cmd_generate(args))
    if args.command == "conflicts":
        raise SystemExit(_cmd_conflicts(args))

    raise SystemExit(2)
