"""
Persistent storage for the user's course selection and preferences.

This module manages one small JSON file (by default
~/.schedulebuilder/selection.json):

    {
      "selected_course_ids": ["COMS 2270", "MATH 1650"],
      "preferences": {"preferred_days": ["Mon"], "time_of_day": "morning", ...}
    }

The catalog snapshot itself is never written here; only the user's own
choices are kept between runs. Generated schedules are not stored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from schedulebuilder.model import SchedulePreferences


def _default_selection_path() -> Path:
    """
    ~/.schedulebuilder/selection.json, resolved at call time.
    """
    return Path.home() / ".schedulebuilder" / "selection.json"


def _normalize_id(x: Any) -> str:
    return " ".join(str(x).split()).upper()


def _read(path: str | Path | None) -> dict[str, Any]:
    """
    Load the whole file. Returns {} if it does not exist or is invalid.
    """
    selection_path = Path(path) if path is not None else _default_selection_path()
    if not selection_path.exists():
        return {}
    try:
        data = json.loads(selection_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _write(data: dict[str, Any], path: str | Path | None) -> None:
    selection_path = Path(path) if path is not None else _default_selection_path()
    selection_path.parent.mkdir(parents=True, exist_ok=True)
    selection_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def load_selected_course_ids(path: str | Path | None = None) -> list[str]:
    """
    Load selected course IDs in the order they were added.

    Returns an empty list if the file does not exist or is invalid.
    """
    ids = _read(path).get("selected_course_ids", [])
    if not isinstance(ids, list):
        return []
    out: list[str] = []
    for x in ids:
        if isinstance(x, str):
            cid = _normalize_id(x)
            if cid and cid not in out:
                out.append(cid)
    return out


def save_selected_course_ids(ids: Iterable[str], path: str | Path | None = None) -> None:
    """
    Save selected course IDs, keeping order and dropping duplicates.

    Stored preferences are left untouched.
    """
    norm: list[str] = []
    for x in ids:
        cid = _normalize_id(x)
        if cid and cid not in norm:
            norm.append(cid)

    data = _read(path)
    data["selected_course_ids"] = norm
    _write(data, path)


def load_preferences(path: str | Path | None = None) -> SchedulePreferences:
    raw = _read(path).get("preferences")
    if not isinstance(raw, dict):
        return SchedulePreferences()
    return SchedulePreferences.from_dict(raw)


def save_preferences(preferences: SchedulePreferences, path: str | Path | None = None) -> None:
    data = _read(path)
    data["preferences"] = preferences.to_dict()
    _write(data, path)
