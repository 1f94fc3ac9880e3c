"""Reminders domain — models, the store capability, dates and formatting."""

from reminders_mcp.core.errors import (
    AccessDeniedError,
    ListNotFoundError,
    OperationFailedError,
    ReminderNotFoundError,
    RemindersError,
    WriteOnlyAccessError,
)
from reminders_mcp.core.models import (
    DueDateChange,
    ReminderDraft,
    ReminderItem,
    ReminderList,
    ReminderPriority,
    ReminderUpdate,
)
from reminders_mcp.core.store import LocalRemindersStore, RemindersStore

__all__ = [
    "AccessDeniedError",
    "DueDateChange",
    "ListNotFoundError",
    "LocalRemindersStore",
    "OperationFailedError",
    "ReminderDraft",
    "ReminderItem",
    "ReminderList",
    "ReminderNotFoundError",
    "ReminderPriority",
    "ReminderUpdate",
    "RemindersError",
    "RemindersStore",
    "WriteOnlyAccessError",
]
