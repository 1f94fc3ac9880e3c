"""Domain models for reminders, lists, drafts and partial updates.

Every model is an immutable snapshot detached from the backing store.  JSON
keys follow the platform's camelCase names (``isCompleted``, ``listID``...)
while Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)

# ---------------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------------


class ReminderPriority(str, Enum):
    """Semantic priority level, mapped onto the platform's 0-9 integer scale.

    Platform ranges: ``0`` none, ``1-4`` high, ``5`` medium, ``6-9`` low.
    """

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def platform_value(self) -> int:
        """The canonical platform integer for this priority."""
        return _PLATFORM_VALUES[self]

    @classmethod
    def from_platform_value(cls, value: int) -> ReminderPriority:
        """Map a platform integer onto a priority; out-of-range means none."""
        if 1 <= value <= 4:
            return cls.HIGH
        if value == 5:
            return cls.MEDIUM
        if 6 <= value <= 9:
            return cls.LOW
        return cls.NONE

    @classmethod
    def parse(cls, text: str) -> ReminderPriority | None:
        """Case-insensitive lookup by name, ``None`` when unknown."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None


_PLATFORM_VALUES = {
    ReminderPriority.NONE: 0,
    ReminderPriority.HIGH: 1,
    ReminderPriority.MEDIUM: 5,
    ReminderPriority.LOW: 9,
}


# ---------------------------------------------------------------------------
# Lists and items
# ---------------------------------------------------------------------------


class ReminderList(BaseModel):
    """A named list (calendar) of reminders."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str


class ReminderItem(BaseModel):
    """A snapshot of a single reminder."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    notes: str | None = None
    is_completed: bool = Field(default=False, alias="isCompleted")
    completion_date: datetime | None = Field(default=None, alias="completionDate")
    priority: ReminderPriority = ReminderPriority.NONE
    due_date: datetime | None = Field(default=None, alias="dueDate")
    list_id: str = Field(alias="listID")
    list_name: str = Field(alias="listName")


class ReminderDraft(BaseModel):
    """The fields needed to create a new reminder."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    notes: str | None = None
    due_date: datetime | None = Field(default=None, alias="dueDate")
    priority: ReminderPriority = ReminderPriority.NONE


# ---------------------------------------------------------------------------
# Partial updates
# ---------------------------------------------------------------------------


class DueDateAction(str, Enum):
    """What a partial update does to the due date."""

    UNSET = "unset"
    CLEAR = "clear"
    SET = "set"


class DueDateChange(BaseModel):
    """Three-state due-date field: leave alone, clear, or set to ``value``."""

    model_config = ConfigDict(frozen=True)

    action: DueDateAction = DueDateAction.UNSET
    value: datetime | None = None

    @model_validator(mode="after")
    def _value_matches_action(self) -> DueDateChange:
        if (self.action is DueDateAction.SET) != (self.value is not None):
            msg = "a due date value is required exactly when the action is 'set'"
            raise ValueError(msg)
        return self

    @classmethod
    def unset(cls) -> DueDateChange:
        return cls()

    @classmethod
    def clear(cls) -> DueDateChange:
        return cls(action=DueDateAction.CLEAR)

    @classmethod
    def to(cls, value: datetime) -> DueDateChange:
        return cls(action=DueDateAction.SET, value=value)

    @property
    def is_unset(self) -> bool:
        return self.action is DueDateAction.UNSET


class ReminderUpdate(BaseModel):
    """Optional fields for a partial update to an existing reminder.

    ``None`` on any plain field means "do not change".  The due date uses
    :class:`DueDateChange` so that "do not change" and "clear it" stay
    distinct.  In JSON, an absent ``dueDate`` key means unset, an explicit
    ``null`` means clear, and a timestamp means set.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str | None = None
    notes: str | None = None
    due_date: DueDateChange = Field(default_factory=DueDateChange.unset, alias="dueDate")
    priority: ReminderPriority | None = None
    list_name: str | None = Field(default=None, alias="listName")
    is_completed: bool | None = Field(default=None, alias="isCompleted")

    @model_validator(mode="before")
    @classmethod
    def _wrap_due_date(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        for key in ("dueDate", "due_date"):
            if key not in data:
                continue
            raw = data[key]
            if isinstance(raw, DueDateChange):
                return data
            data = dict(data)
            data[key] = (
                DueDateChange.clear()
                if raw is None
                else {"action": DueDateAction.SET, "value": raw}
            )
            return data
        return data

    @model_serializer(mode="wrap")
    def _flatten_due_date(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        data: dict[str, Any] = handler(self)
        key = "dueDate" if info.by_alias else "due_date"
        data.pop(key, None)
        change = self.due_date
        if change.action is DueDateAction.CLEAR:
            data[key] = None
        elif change.action is DueDateAction.SET and change.value is not None:
            data[key] = change.value.isoformat() if info.mode == "json" else change.value
        return data

    @property
    def is_empty(self) -> bool:
        """``True`` when applying this update would change nothing."""
        return (
            self.title is None
            and self.notes is None
            and self.due_date.is_unset
            and self.priority is None
            and self.list_name is None
            and self.is_completed is None
        )
