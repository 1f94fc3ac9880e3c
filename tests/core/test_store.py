"""Tests for LocalRemindersStore."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import pytest

from reminders_mcp.core.errors import (
    AccessDeniedError,
    ListNotFoundError,
    OperationFailedError,
    ReminderNotFoundError,
    WriteOnlyAccessError,
)
from reminders_mcp.core.models import (
    DueDateChange,
    ReminderDraft,
    ReminderPriority,
    ReminderUpdate,
)
from reminders_mcp.core.store import LocalRemindersStore, RemindersStore

if TYPE_CHECKING:
    from pathlib import Path

FIXED_NOW = datetime(2025, 5, 5, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> LocalRemindersStore:
    return LocalRemindersStore(
        initial_lists=("Reminders", "Work"),
        sources=("Local", "iCloud"),
        clock=lambda: FIXED_NOW,
    )


async def _seed(store: LocalRemindersStore, *titles: str, list_name: str = "Work") -> None:
    for title in titles:
        await store.add_reminder(ReminderDraft(title=title), list_name)


class TestAccess:
    async def test_full_access(self) -> None:
        await LocalRemindersStore().request_access()

    async def test_denied(self) -> None:
        with pytest.raises(AccessDeniedError, match="Privacy & Security"):
            await LocalRemindersStore(access="denied").request_access()

    async def test_write_only(self) -> None:
        with pytest.raises(WriteOnlyAccessError, match="full access is required"):
            await LocalRemindersStore(access="write_only").request_access()

    def test_satisfies_protocol(self, store: LocalRemindersStore) -> None:
        assert isinstance(store, RemindersStore)


class TestLists:
    async def test_seeded_lists(self, store: LocalRemindersStore) -> None:
        assert [lst.title for lst in await store.lists()] == ["Reminders", "Work"]
        assert await store.default_list_name() == "Reminders"

    async def test_no_default_list_when_empty(self) -> None:
        assert await LocalRemindersStore(initial_lists=()).default_list_name() is None

    async def test_create_list_in_default_source(self, store: LocalRemindersStore) -> None:
        created = await store.create_list("Errands")
        assert created.title == "Errands"
        assert created.id
        assert [lst.title for lst in await store.lists()][-1] == "Errands"

    async def test_create_list_matches_source_case_insensitively(
        self, store: LocalRemindersStore
    ) -> None:
        created = await store.create_list("Shared", "ICLOUD")
        assert created.title == "Shared"

    async def test_create_list_unknown_source(self, store: LocalRemindersStore) -> None:
        with pytest.raises(OperationFailedError, match="Available sources: Local, iCloud"):
            await store.create_list("Shared", "Exchange")

    async def test_create_list_blank_name(self, store: LocalRemindersStore) -> None:
        with pytest.raises(OperationFailedError):
            await store.create_list("   ")


class TestReading:
    async def test_list_lookup_is_case_insensitive(self, store: LocalRemindersStore) -> None:
        await _seed(store, "a")
        assert [r.title for r in await store.reminders("WORK")] == ["a"]

    async def test_unknown_list_names_available_lists(self, store: LocalRemindersStore) -> None:
        with pytest.raises(ListNotFoundError) as excinfo:
            await store.reminders("Nope")
        assert "Available lists: Reminders, Work." in str(excinfo.value)

    async def test_completion_filters(self, store: LocalRemindersStore) -> None:
        await _seed(store, "a", "b", "c")
        await store.set_complete(True, "1", "Work")

        open_items = await store.reminders("Work", include_completed=False)
        everything = await store.reminders("Work", include_completed=True)
        done = await store.reminders("Work", include_completed=True, only_completed=True)

        assert [r.title for r in open_items] == ["a", "c"]
        assert [r.title for r in everything] == ["a", "b", "c"]
        assert [r.title for r in done] == ["b"]

    async def test_all_lists(self, store: LocalRemindersStore) -> None:
        await _seed(store, "w")
        await _seed(store, "r", list_name="Reminders")
        items = await store.reminders()
        assert {(r.title, r.list_name) for r in items} == {("w", "Work"), ("r", "Reminders")}


class TestWriting:
    async def test_add_reminder(self, store: LocalRemindersStore) -> None:
        created = await store.add_reminder(
            ReminderDraft(title="Call", notes="mom", priority=ReminderPriority.LOW), "work"
        )
        assert created.list_name == "Work"
        assert created.priority is ReminderPriority.LOW
        assert not created.is_completed
        assert created.completion_date is None

    async def test_add_blank_title_fails(self, store: LocalRemindersStore) -> None:
        with pytest.raises(OperationFailedError):
            await store.add_reminder(ReminderDraft(title=" "), "Work")

    async def test_add_to_unknown_list(self, store: LocalRemindersStore) -> None:
        with pytest.raises(ListNotFoundError):
            await store.add_reminder(ReminderDraft(title="x"), "Nope")

    async def test_complete_stamps_and_uncomplete_clears(self, store: LocalRemindersStore) -> None:
        await _seed(store, "a")
        done = await store.set_complete(True, "0", "Work")
        assert done.is_completed
        assert done.completion_date == FIXED_NOW

        reopened = await store.set_complete(False, "0", "Work", only_completed=True)
        assert not reopened.is_completed
        assert reopened.completion_date is None

    async def test_reference_by_id(self, store: LocalRemindersStore) -> None:
        await _seed(store, "a", "b")
        target = (await store.reminders("Work"))[1]
        done = await store.set_complete(True, target.id, "Work")
        assert done.title == "b"

    async def test_unknown_id(self, store: LocalRemindersStore) -> None:
        await _seed(store, "a")
        with pytest.raises(ReminderNotFoundError, match="ABC"):
            await store.delete("ABC", "Work")

    @pytest.mark.parametrize("reference", ["2", "-1"])
    async def test_index_out_of_range(self, store: LocalRemindersStore, reference: str) -> None:
        await _seed(store, "a", "b")
        with pytest.raises(ReminderNotFoundError, match="list has 2 reminders, valid range: 0-1"):
            await store.set_complete(True, reference, "Work")

    async def test_index_on_empty_list(self, store: LocalRemindersStore) -> None:
        with pytest.raises(ReminderNotFoundError, match="list has 0 reminders"):
            await store.delete("0", "Work")

    async def test_index_skips_completed_items(self, store: LocalRemindersStore) -> None:
        await _seed(store, "a", "b")
        await store.set_complete(True, "0", "Work")
        assert (await store.set_complete(True, "0", "Work")).title == "b"

    async def test_edit_keeps_unspecified_fields(self, store: LocalRemindersStore) -> None:
        await store.add_reminder(ReminderDraft(title="a", notes="keep"), "Work")
        edited = await store.edit("0", "Work", new_title="renamed")
        assert edited.title == "renamed"
        assert edited.notes == "keep"

    async def test_update_due_date_states(self, store: LocalRemindersStore) -> None:
        await store.add_reminder(ReminderDraft(title="a", due_date=FIXED_NOW), "Work")

        untouched = await store.update("0", "Work", ReminderUpdate(title="b"))
        assert untouched.due_date == FIXED_NOW

        cleared = await store.update("0", "Work", ReminderUpdate(due_date=DueDateChange.clear()))
        assert cleared.due_date is None

        later = datetime(2025, 6, 1, tzinfo=timezone.utc)
        moved = await store.update("0", "Work", ReminderUpdate(due_date=DueDateChange.to(later)))
        assert moved.due_date == later

    async def test_update_moves_between_lists(self, store: LocalRemindersStore) -> None:
        await _seed(store, "a")
        moved = await store.update("0", "Work", ReminderUpdate(list_name="reminders"))
        assert moved.list_name == "Reminders"
        assert await store.reminders("Work") == []

    async def test_delete_returns_title(self, store: LocalRemindersStore) -> None:
        await _seed(store, "a", "b")
        assert await store.delete("1", "Work") == "b"
        assert [r.title for r in await store.reminders("Work")] == ["a"]

    async def test_concurrent_adds_are_serialised(self, store: LocalRemindersStore) -> None:
        await asyncio.gather(*(_seed(store, f"t{i}") for i in range(20)))
        assert len(await store.reminders("Work")) == 20


class TestPersistence:
    async def test_round_trips_through_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "store.json"
        first = LocalRemindersStore(path)
        await first.create_list("Errands")
        await first.add_reminder(ReminderDraft(title="Stamps", due_date=FIXED_NOW), "Errands")

        second = LocalRemindersStore(path)
        items = await second.reminders("Errands")

        assert path.exists()
        assert [r.title for r in items] == ["Stamps"]
        assert items[0].due_date == FIXED_NOW

    async def test_corrupt_file_fails_cleanly(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(OperationFailedError, match="Cannot read store"):
            await LocalRemindersStore(path).lists()

    async def test_in_memory_store_writes_nothing(self, tmp_path: Path) -> None:
        store = LocalRemindersStore()
        await store.create_list("x")
        assert list(tmp_path.iterdir()) == []

    async def test_failed_write_keeps_previous_state(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        store = LocalRemindersStore(blocker / "store.json")

        with pytest.raises(OperationFailedError, match="Cannot write store"):
            await store.create_list("Groceries")
        with pytest.raises(OperationFailedError, match="Cannot write store"):
            await store.add_reminder(ReminderDraft(title="Milk"), "Reminders")

        assert [lst.title for lst in await store.lists()] == ["Reminders"]
        assert await store.reminders() == []

    async def test_failed_update_and_delete_keep_item(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        store = LocalRemindersStore(tmp_path / "store.json")
        await store.add_reminder(ReminderDraft(title="Milk"), "Reminders")

        def refuse(path: Path, state: object) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(store, "_write_snapshot", refuse)

        with pytest.raises(OperationFailedError, match="disk full"):
            await store.set_complete(True, "1", "Reminders")
        with pytest.raises(OperationFailedError, match="disk full"):
            await store.delete("1", "Reminders")

        items = await store.reminders("Reminders")
        assert [(r.title, r.is_completed) for r in items] == [("Milk", False)]
