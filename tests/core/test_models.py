"""Tests for reminders domain models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from reminders_mcp.core.models import (
    DueDateAction,
    DueDateChange,
    ReminderDraft,
    ReminderItem,
    ReminderPriority,
    ReminderUpdate,
)

WHEN = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestReminderPriority:
    @pytest.mark.parametrize(
        ("priority", "value"),
        [
            (ReminderPriority.NONE, 0),
            (ReminderPriority.HIGH, 1),
            (ReminderPriority.MEDIUM, 5),
            (ReminderPriority.LOW, 9),
        ],
    )
    def test_platform_value(self, priority: ReminderPriority, value: int) -> None:
        assert priority.platform_value == value
        assert ReminderPriority.from_platform_value(value) is priority

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2, ReminderPriority.HIGH),
            (4, ReminderPriority.HIGH),
            (6, ReminderPriority.LOW),
            (8, ReminderPriority.LOW),
            (10, ReminderPriority.NONE),
            (-1, ReminderPriority.NONE),
        ],
    )
    def test_platform_ranges(self, value: int, expected: ReminderPriority) -> None:
        assert ReminderPriority.from_platform_value(value) is expected

    def test_parse_is_case_insensitive(self) -> None:
        assert ReminderPriority.parse(" Medium ") is ReminderPriority.MEDIUM
        assert ReminderPriority.parse("urgent") is None


class TestReminderItem:
    def test_json_uses_platform_keys(self) -> None:
        item = ReminderItem(
            id="1",
            title="Milk",
            is_completed=True,
            completion_date=WHEN,
            list_id="L1",
            list_name="Groceries",
        )
        data = item.model_dump(mode="json", by_alias=True, exclude_none=True)
        assert data == {
            "id": "1",
            "title": "Milk",
            "isCompleted": True,
            "completionDate": "2025-06-01T12:00:00Z",
            "priority": "none",
            "listID": "L1",
            "listName": "Groceries",
        }

    def test_decodes_aliases(self) -> None:
        item = ReminderItem.model_validate(
            {"id": "1", "title": "x", "listID": "L", "listName": "N", "dueDate": "2025-06-01T12:00:00Z"}
        )
        assert item.list_id == "L"
        assert item.due_date == WHEN

    def test_is_frozen(self) -> None:
        item = ReminderItem(id="1", title="x", list_id="L", list_name="N")
        with pytest.raises(ValidationError):
            item.title = "y"  # type: ignore[misc]


class TestReminderDraft:
    def test_defaults(self) -> None:
        draft = ReminderDraft(title="x")
        assert draft.priority is ReminderPriority.NONE
        assert draft.notes is None
        assert draft.due_date is None


class TestDueDateChange:
    def test_constructors(self) -> None:
        assert DueDateChange.unset().is_unset
        assert DueDateChange.clear().action is DueDateAction.CLEAR
        assert DueDateChange.to(WHEN).value == WHEN

    def test_set_requires_value(self) -> None:
        with pytest.raises(ValidationError):
            DueDateChange(action=DueDateAction.SET)

    def test_clear_rejects_value(self) -> None:
        with pytest.raises(ValidationError):
            DueDateChange(action=DueDateAction.CLEAR, value=WHEN)


class TestReminderUpdate:
    def test_absent_due_date_is_unset(self) -> None:
        update = ReminderUpdate.model_validate({"title": "x"})
        assert update.due_date.is_unset

    def test_null_due_date_clears(self) -> None:
        update = ReminderUpdate.model_validate({"dueDate": None})
        assert update.due_date.action is DueDateAction.CLEAR

    def test_value_due_date_sets(self) -> None:
        update = ReminderUpdate.model_validate({"dueDate": "2025-06-01T12:00:00Z"})
        assert update.due_date == DueDateChange.to(WHEN)

    def test_python_name_accepted(self) -> None:
        update = ReminderUpdate(due_date=DueDateChange.clear())
        assert update.due_date.action is DueDateAction.CLEAR

    def test_serialises_three_states(self) -> None:
        unset = ReminderUpdate(title="x").model_dump(mode="json", by_alias=True)
        cleared = ReminderUpdate.model_validate({"dueDate": None}).model_dump(
            mode="json", by_alias=True
        )
        set_ = ReminderUpdate(due_date=DueDateChange.to(WHEN)).model_dump(
            mode="json", by_alias=True
        )
        assert "dueDate" not in unset
        assert cleared["dueDate"] is None
        assert set_["dueDate"] == WHEN.isoformat()

    def test_is_empty(self) -> None:
        assert ReminderUpdate().is_empty
        assert not ReminderUpdate(is_completed=False).is_empty
        assert not ReminderUpdate.model_validate({"dueDate": None}).is_empty
