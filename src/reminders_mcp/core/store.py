"""Reminders store capability and its local implementation.

:class:`RemindersStore` is the async protocol consumed by the MCP tools and
the CLI.  :class:`LocalRemindersStore` implements it over an in-process list
of snapshots, optionally persisted to a JSON file.  All of its state sits
behind one :class:`asyncio.Lock`, so concurrent callers see every operation
applied one at a time.
"""

from __future__ import annotations

import asyncio
import logging
import re
import uuid
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from reminders_mcp.core.errors import (
    AccessDeniedError,
    ListNotFoundError,
    OperationFailedError,
    ReminderNotFoundError,
    WriteOnlyAccessError,
)
from reminders_mcp.core.models import (
    DueDateAction,
    ReminderDraft,
    ReminderItem,
    ReminderList,
    ReminderUpdate,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

AccessLevel = Literal["full", "write_only", "denied"]

_INDEX_RE = re.compile(r"^-?\d+$")


@runtime_checkable
class RemindersStore(Protocol):
    """Async capability surface over a reminders backend.

    Item references are either a zero-based index into the list's filtered
    reminders (incomplete only, unless the completion flags say otherwise) or
    an item id.
    """

    async def request_access(self) -> None:
        """Raise :class:`AccessDeniedError` or :class:`WriteOnlyAccessError` unless fully authorized."""
        ...

    async def lists(self) -> list[ReminderList]: ...

    async def default_list_name(self) -> str | None: ...

    async def create_list(self, name: str, source_name: str | None = None) -> ReminderList: ...

    async def reminders(
        self,
        list_name: str | None = None,
        *,
        include_completed: bool = True,
        only_completed: bool = False,
    ) -> list[ReminderItem]: ...

    async def add_reminder(self, draft: ReminderDraft, list_name: str) -> ReminderItem: ...

    async def set_complete(
        self,
        complete: bool,
        reference: str,
        list_name: str,
        *,
        include_completed: bool = False,
        only_completed: bool = False,
    ) -> ReminderItem: ...

    async def edit(
        self,
        reference: str,
        list_name: str,
        *,
        new_title: str | None = None,
        new_notes: str | None = None,
        include_completed: bool = False,
        only_completed: bool = False,
    ) -> ReminderItem: ...

    async def update(
        self,
        reference: str,
        list_name: str,
        update: ReminderUpdate,
        *,
        include_completed: bool = False,
        only_completed: bool = False,
    ) -> ReminderItem: ...

    async def delete(
        self,
        reference: str,
        list_name: str,
        *,
        include_completed: bool = False,
        only_completed: bool = False,
    ) -> str:
        """Delete the referenced reminder and return its title."""
        ...


# ---------------------------------------------------------------------------
# Local implementation
# ---------------------------------------------------------------------------


class StoredList(BaseModel):
    """A list as persisted by the local store, with its backing source."""

    id: str
    title: str
    source: str


class StoreSnapshot(BaseModel):
    """Everything the local store persists."""

    lists: list[StoredList] = []
    reminders: list[ReminderItem] = []


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _new_id() -> str:
    return uuid.uuid4().hex.upper()


def _filter_completion(
    items: Sequence[ReminderItem], *, include_completed: bool, only_completed: bool
) -> list[ReminderItem]:
    if only_completed:
        return [r for r in items if r.is_completed]
    if not include_completed:
        return [r for r in items if not r.is_completed]
    return list(items)


class LocalRemindersStore:
    """In-process :class:`RemindersStore` with optional JSON persistence.

    Usage::

        store = LocalRemindersStore(path=Path("~/.reminders.json").expanduser())
        await store.request_access()
        item = await store.add_reminder(ReminderDraft(title="Milk"), "Reminders")
    """

    def __init__(
        self,
        path: Path | None = None,
        *,
        access: AccessLevel = "full",
        sources: Sequence[str] = ("Local",),
        initial_lists: Sequence[str] = ("Reminders",),
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._path = path
        self._access = access
        self._sources = list(sources)
        self._initial_lists = list(initial_lists)
        self._clock = clock
        self._lock = asyncio.Lock()
        self._state: StoreSnapshot | None = None

    # -- authorization -----------------------------------------------------

    async def request_access(self) -> None:
        if self._access == "write_only":
            raise WriteOnlyAccessError
        if self._access != "full":
            raise AccessDeniedError

    # -- lists -------------------------------------------------------------

    async def lists(self) -> list[ReminderList]:
        async with self._lock:
            state = await self._load()
            return [ReminderList(id=s.id, title=s.title) for s in state.lists]

    async def default_list_name(self) -> str | None:
        async with self._lock:
            state = await self._load()
            return state.lists[0].title if state.lists else None

    async def create_list(self, name: str, source_name: str | None = None) -> ReminderList:
        async with self._lock:
            state = await self._load()
            source = self._resolve_source(source_name)
            if not name.strip():
                msg = f'Failed to save list "{name}": a list needs a non-empty name'
                raise OperationFailedError(msg)

            stored = StoredList(id=_new_id(), title=name, source=source)
            draft = state.model_copy(deep=True)
            draft.lists.append(stored)
            await self._commit(draft)
            logger.debug("Created list %s in source %s", name, source)
            return ReminderList(id=stored.id, title=stored.title)

    # -- reading -----------------------------------------------------------

    async def reminders(
        self,
        list_name: str | None = None,
        *,
        include_completed: bool = True,
        only_completed: bool = False,
    ) -> list[ReminderItem]:
        async with self._lock:
            state = await self._load()
            if list_name is None:
                scope = state.reminders
            else:
                target = self._resolve_list(state, list_name)
                scope = [r for r in state.reminders if r.list_id == target.id]
            return _filter_completion(
                scope, include_completed=include_completed, only_completed=only_completed
            )

    # -- writing -----------------------------------------------------------

    async def add_reminder(self, draft: ReminderDraft, list_name: str) -> ReminderItem:
        async with self._lock:
            state = await self._load()
            target = self._resolve_list(state, list_name)
            if not draft.title.strip():
                msg = f'Failed to save reminder "{draft.title}": a reminder needs a title'
                raise OperationFailedError(msg)

            item = ReminderItem(
                id=_new_id(),
                title=draft.title,
                notes=draft.notes,
                priority=draft.priority,
                due_date=draft.due_date,
                list_id=target.id,
                list_name=target.title,
            )
            draft = state.model_copy(deep=True)
            draft.reminders.append(item)
            await self._commit(draft)
            return item

    async def set_complete(
        self,
        complete: bool,
        reference: str,
        list_name: str,
        *,
        include_completed: bool = False,
        only_completed: bool = False,
    ) -> ReminderItem:
        return await self.update(
            reference,
            list_name,
            ReminderUpdate(is_completed=complete),
            include_completed=include_completed,
            only_completed=only_completed,
        )

    async def edit(
        self,
        reference: str,
        list_name: str,
        *,
        new_title: str | None = None,
        new_notes: str | None = None,
        include_completed: bool = False,
        only_completed: bool = False,
    ) -> ReminderItem:
        return await self.update(
            reference,
            list_name,
            ReminderUpdate(title=new_title, notes=new_notes),
            include_completed=include_completed,
            only_completed=only_completed,
        )

    async def update(
        self,
        reference: str,
        list_name: str,
        update: ReminderUpdate,
        *,
        include_completed: bool = False,
        only_completed: bool = False,
    ) -> ReminderItem:
        async with self._lock:
            state = await self._load()
            position = self._locate(
                state,
                reference,
                list_name,
                include_completed=include_completed,
                only_completed=only_completed,
            )
            current = state.reminders[position]
            if update.is_empty:
                return current
            changes: dict[str, object] = {}

            if update.title is not None:
                changes["title"] = update.title
            if update.notes is not None:
                changes["notes"] = update.notes
            if update.priority is not None:
                changes["priority"] = update.priority
            if update.due_date.action is DueDateAction.CLEAR:
                changes["due_date"] = None
            elif update.due_date.action is DueDateAction.SET:
                changes["due_date"] = update.due_date.value
            if update.is_completed is not None:
                changes["is_completed"] = update.is_completed
                changes["completion_date"] = self._clock() if update.is_completed else None
            if update.list_name is not None:
                destination = self._resolve_list(state, update.list_name)
                changes["list_id"] = destination.id
                changes["list_name"] = destination.title

            updated = current.model_copy(update=changes)
            draft = state.model_copy(deep=True)
            draft.reminders[position] = updated
            await self._commit(draft)
            return updated

    async def delete(
        self,
        reference: str,
        list_name: str,
        *,
        include_completed: bool = False,
        only_completed: bool = False,
    ) -> str:
        async with self._lock:
            state = await self._load()
            position = self._locate(
                state,
                reference,
                list_name,
                include_completed=include_completed,
                only_completed=only_completed,
            )
            draft = state.model_copy(deep=True)
            removed = draft.reminders.pop(position)
            await self._commit(draft)
            return removed.title or "(untitled)"

    # -- resolution helpers ------------------------------------------------

    def _resolve_list(self, state: StoreSnapshot, name: str) -> StoredList:
        wanted = name.casefold()
        for stored in state.lists:
            if stored.title.casefold() == wanted:
                return stored
        raise ListNotFoundError(name, [s.title for s in state.lists])

    def _resolve_source(self, source_name: str | None) -> str:
        if source_name is None:
            if not self._sources:
                msg = "No default source available for creating reminder lists."
                raise OperationFailedError(msg)
            return self._sources[0]

        wanted = source_name.casefold()
        for source in self._sources:
            if source.casefold() == wanted:
                return source
        available = ", ".join(self._sources)
        msg = f'No source found named "{source_name}". Available sources: {available}'
        raise OperationFailedError(msg)

    def _locate(
        self,
        state: StoreSnapshot,
        reference: str,
        list_name: str,
        *,
        include_completed: bool,
        only_completed: bool,
    ) -> int:
        """Return the position in ``state.reminders`` of the referenced item."""
        target = self._resolve_list(state, list_name)
        in_list = [r for r in state.reminders if r.list_id == target.id]
        candidates = _filter_completion(
            in_list, include_completed=include_completed, only_completed=only_completed
        )

        if _INDEX_RE.match(reference.strip()):
            index = int(reference)
            count = len(candidates)
            if not 0 <= index < count:
                plural = "" if count == 1 else "s"
                detail = (
                    f"index {index} (list has {count} reminder{plural}, "
                    f"valid range: 0-{max(0, count - 1)})"
                )
                raise ReminderNotFoundError(detail)
            chosen = candidates[index]
        else:
            matches = [r for r in candidates if r.id == reference]
            if not matches:
                raise ReminderNotFoundError(reference)
            chosen = matches[0]

        return next(i for i, r in enumerate(state.reminders) if r.id == chosen.id)

    # -- persistence -------------------------------------------------------

    async def _load(self) -> StoreSnapshot:
        if self._state is not None:
            return self._state

        if self._path is not None and self._path.exists():
            self._state = await asyncio.to_thread(self._read_snapshot, self._path)
            logger.debug("Loaded %d list(s) from %s", len(self._state.lists), self._path)
        else:
            seeded = self._sources[0] if self._sources else "Local"
            self._state = StoreSnapshot(
                lists=[StoredList(id=_new_id(), title=t, source=seeded) for t in self._initial_lists]
            )
        return self._state

    async def _commit(self, draft: StoreSnapshot) -> None:
        """Persist *draft*, then make it the cached state.

        A failed write leaves the cached state untouched.
        """
        await self._save(draft)
        self._state = draft

    async def _save(self, state: StoreSnapshot) -> None:
        if self._path is None:
            return
        try:
            await asyncio.to_thread(self._write_snapshot, self._path, state)
        except OSError as exc:
            msg = f"Cannot write store at {self._path}: {exc}"
            raise OperationFailedError(msg) from exc

    @staticmethod
    def _read_snapshot(path: Path) -> StoreSnapshot:
        try:
            return StoreSnapshot.model_validate_json(path.read_bytes())
        except (OSError, ValidationError) as exc:
            msg = f"Cannot read store at {path}: {exc}"
            raise OperationFailedError(msg) from exc

    @staticmethod
    def _write_snapshot(path: Path, state: StoreSnapshot) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(state.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        tmp.replace(path)
