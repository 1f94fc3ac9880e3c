"""Plain-text and JSON rendering of reminders and lists."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from pydantic_core import to_jsonable_python

from reminders_mcp.core.models import ReminderItem, ReminderPriority

_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def to_pretty_json(value: Any) -> str:
    """Render models (or lists of them) as indented, key-sorted JSON.

    Unset optional fields are omitted and datetimes use ISO 8601.
    """
    data = to_jsonable_python(value, by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)


def format_relative(when: datetime, now: datetime | None = None) -> str:
    """Describe *when* relative to *now*, e.g. ``in 2 days`` or ``3 hours ago``."""
    reference = now or datetime.now(tz=when.tzinfo)
    seconds = int((when - reference).total_seconds())
    magnitude = abs(seconds)
    if magnitude < 1:
        return "now"
    for unit, size in _UNITS:
        if magnitude >= size:
            count = magnitude // size
            label = f"{count} {unit}" + ("" if count == 1 else "s")
            return f"in {label}" if seconds > 0 else f"{label} ago"
    return "now"


def format_reminder(
    reminder: ReminderItem,
    index: int | None = None,
    list_name: str | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """Single-line summary: ``[list:] [index:] title [(notes)] [(due)] [(priority: p)]``."""
    parts: list[str] = []
    if list_name is not None:
        parts.append(f"{list_name}:")
    if index is not None:
        parts.append(f"{index}:")
    parts.append(reminder.title)
    if reminder.notes:
        parts.append(f"({reminder.notes})")
    if reminder.due_date is not None:
        parts.append(f"({format_relative(reminder.due_date, now)})")
    if reminder.priority is not ReminderPriority.NONE:
        parts.append(f"(priority: {reminder.priority.value})")
    return " ".join(parts)
