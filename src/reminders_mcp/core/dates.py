"""Due-date parsing and filtering helpers."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reminders_mcp.core.models import ReminderItem

SUPPORTED_FORMATS_HINT = "today, tomorrow, next week, yyyy-MM-dd, yyyy-MM-dd HH:mm, MM/dd/yyyy, MM/dd"

# Tried in order; the first format that matches wins.
_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m/%d/%Y",
)
_MONTH_DAY = "%m/%d"


def _now() -> datetime:
    return datetime.now().astimezone()


def start_of_day(when: datetime) -> datetime:
    return when.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_date(text: str, *, now: datetime | None = None) -> datetime | None:
    """Parse a user-supplied date string into a timezone-aware local datetime.

    Accepts the keywords ``today``, ``tomorrow`` and ``next week`` (midnight
    of the relevant day, case-insensitive) and the explicit formats
    ``yyyy-MM-dd HH:mm``, ``yyyy-MM-dd``, ``MM/dd/yyyy`` and ``MM/dd`` (the
    latter in the current year).  Returns ``None`` when nothing matches.
    """
    current = now or _now()
    tzinfo = current.tzinfo
    keyword = text.strip().lower()

    if keyword == "today":
        return start_of_day(current)
    if keyword == "tomorrow":
        return start_of_day(current) + timedelta(days=1)
    if keyword == "next week":
        return start_of_day(current) + timedelta(weeks=1)

    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=tzinfo)
        except ValueError:
            continue

    # Month/day alone means the current year; parse with the year attached so
    # Feb 29 is accepted in leap years.
    try:
        parsed = datetime.strptime(f"{text}/{current.year}", f"{_MONTH_DAY}/%Y")
    except ValueError:
        return None
    return parsed.replace(tzinfo=tzinfo)


def filter_by_due_date(
    reminders: Iterable[ReminderItem],
    due_date: str | None,
    *,
    include_overdue: bool = False,
    now: datetime | None = None,
) -> list[ReminderItem]:
    """Keep reminders due on or before the day named by *due_date*.

    No filtering happens when *due_date* is ``None`` or cannot be parsed.
    Reminders without a due date are dropped once a filter applies.  Items
    due before today are dropped too unless *include_overdue* is set.
    """
    items = list(reminders)
    if due_date is None:
        return items

    current = now or _now()
    target = parse_date(due_date, now=current)
    if target is None:
        return items

    today = start_of_day(current)
    end_of_target = start_of_day(target) + timedelta(days=1)

    kept: list[ReminderItem] = []
    for item in items:
        if item.due_date is None:
            continue
        due = item.due_date if item.due_date.tzinfo else item.due_date.replace(tzinfo=current.tzinfo)
        if due >= end_of_target:
            continue
        if not include_overdue and due < today:
            continue
        kept.append(item)
    return kept
