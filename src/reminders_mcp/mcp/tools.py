"""The reminders tool catalog: definitions plus handlers bound to a store.

Each handler validates its JSON arguments, makes one store call, and renders
the outcome as text.  Argument problems and store failures come back as
error-flagged results; they never reach the JSON-RPC layer.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any

from reminders_mcp.core.dates import SUPPORTED_FORMATS_HINT, parse_date
from reminders_mcp.core.errors import RemindersError
from reminders_mcp.core.formatting import to_pretty_json
from reminders_mcp.core.models import ReminderDraft, ReminderPriority
from reminders_mcp.mcp.errors import ToolArgumentError
from reminders_mcp.mcp.models import (
    InputSchema,
    PropertySchema,
    ToolDefinition,
    ToolResult,
    json_type_name,
)
from reminders_mcp.mcp.registry import ToolRegistry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from reminders_mcp.core.store import RemindersStore

    _Method = Callable[[Any, Mapping[str, Any]], Awaitable[ToolResult]]

_PRIORITIES = [p.value for p in ReminderPriority]

# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

_LIST_PROP = PropertySchema(
    type="string",
    description="The name of the reminder list (case-insensitive match).",
)
_INCLUDE_COMPLETED_PROP = PropertySchema(
    type="boolean",
    description="When true, includes completed reminders alongside incomplete ones. "
    "Cannot be used together with only_completed.",
)
_ONLY_COMPLETED_PROP = PropertySchema(
    type="boolean",
    description="When true, shows only completed reminders. "
    "Cannot be used together with include_completed.",
)


def _index_prop(verb: str) -> PropertySchema:
    return PropertySchema(
        type="string",
        description=f"The zero-based index of the reminder to {verb}, as a string.",
    )


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="show_lists",
        description="List all reminder lists. Returns a JSON array of list objects with "
        "id and title fields. Use this first to discover valid list names before "
        "calling other tools.",
        input_schema=InputSchema(),
    ),
    ToolDefinition(
        name="show_reminders",
        description="Show reminders from a specific list. By default only returns "
        "incomplete reminders. Use include_completed to also see finished items, or "
        "only_completed to see exclusively completed reminders. Returns a JSON array of "
        "reminder objects with title, notes, due date, priority, and completion status; "
        "their position in the array is the index other tools expect.",
        input_schema=InputSchema(
            properties={
                "list": PropertySchema(
                    type="string",
                    description="The exact name of the reminder list to show "
                    "(case-insensitive match).",
                ),
                "include_completed": _INCLUDE_COMPLETED_PROP,
                "only_completed": _ONLY_COMPLETED_PROP,
            },
            required=["list"],
        ),
    ),
    ToolDefinition(
        name="show_all_reminders",
        description="Show reminders from all lists at once. Each reminder includes its "
        "list name. By default only returns incomplete reminders. Useful for getting a "
        "full overview of all pending tasks.",
        input_schema=InputSchema(
            properties={
                "include_completed": _INCLUDE_COMPLETED_PROP,
                "only_completed": _ONLY_COMPLETED_PROP,
            },
        ),
    ),
    ToolDefinition(
        name="add_reminder",
        description="Create a new reminder in the specified list. Returns the created "
        "reminder object with all fields populated. Use show_lists first if you need to "
        "find a valid list name.",
        input_schema=InputSchema(
            properties={
                "list": PropertySchema(
                    type="string",
                    description="The name of the reminder list to add to "
                    "(case-insensitive match).",
                ),
                "title": PropertySchema(
                    type="string",
                    description="The title text for the new reminder.",
                ),
                "notes": PropertySchema(
                    type="string",
                    description="Optional notes or additional details to attach to the reminder.",
                ),
                "due_date": PropertySchema(
                    type="string",
                    description=f"Optional due date. Accepts: {SUPPORTED_FORMATS_HINT}.",
                ),
                "priority": PropertySchema(
                    type="string",
                    description="Priority level for the reminder. Defaults to 'none' if omitted.",
                    enum=_PRIORITIES,
                ),
            },
            required=["list", "title"],
        ),
    ),
    ToolDefinition(
        name="complete_reminder",
        description="Mark a reminder as completed. Identify the target reminder by its "
        "zero-based index within the list (as shown by show_reminders).",
        input_schema=InputSchema(
            properties={"list": _LIST_PROP, "index": _index_prop("complete")},
            required=["list", "index"],
        ),
    ),
    ToolDefinition(
        name="uncomplete_reminder",
        description="Mark a completed reminder as incomplete (reopen it). Identify the "
        "target reminder by its zero-based index within the list.",
        input_schema=InputSchema(
            properties={"list": _LIST_PROP, "index": _index_prop("uncomplete")},
            required=["list", "index"],
        ),
    ),
    ToolDefinition(
        name="delete_reminder",
        description="Permanently delete a reminder from a list. This action cannot be "
        "undone. Identify the target reminder by its zero-based index.",
        input_schema=InputSchema(
            properties={"list": _LIST_PROP, "index": _index_prop("delete")},
            required=["list", "index"],
        ),
    ),
    ToolDefinition(
        name="edit_reminder",
        description="Edit an existing reminder's title and/or notes. Only the fields you "
        "provide will be changed; omitted fields remain untouched. Identify the target "
        "reminder by its zero-based index.",
        input_schema=InputSchema(
            properties={
                "list": _LIST_PROP,
                "index": _index_prop("edit"),
                "title": PropertySchema(
                    type="string",
                    description="New title text. Omit to keep the current title.",
                ),
                "notes": PropertySchema(
                    type="string",
                    description="New notes text. Omit to keep the current notes.",
                ),
            },
            required=["list", "index"],
        ),
    ),
    ToolDefinition(
        name="create_list",
        description="Create a new reminder list in the default source. Returns the "
        "created list with its id and title.",
        input_schema=InputSchema(
            properties={
                "name": PropertySchema(
                    type="string",
                    description="The display name for the new reminder list.",
                ),
            },
            required=["name"],
        ),
    ),
)


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def _optional_str(arguments: Mapping[str, Any], name: str) -> str | None:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"Invalid parameter '{name}': expected a string, got {json_type_name(value)}."
        raise ToolArgumentError(name, msg)
    return value


def _required_str(arguments: Mapping[str, Any], name: str, hint: str = "") -> str:
    value = _optional_str(arguments, name)
    if value is None:
        msg = f"Missing required parameter: '{name}' (string)." + (f" {hint}" if hint else "")
        raise ToolArgumentError(name, msg)
    return value


def _optional_bool(arguments: Mapping[str, Any], name: str) -> bool:
    value = arguments.get(name)
    if value is None:
        return False
    if not isinstance(value, bool):
        msg = f"Invalid parameter '{name}': expected a boolean, got {json_type_name(value)}."
        raise ToolArgumentError(name, msg)
    return value


def _required_index(arguments: Mapping[str, Any]) -> str:
    """Accept ``index`` as a JSON integer or string; return it as a string."""
    value = arguments.get("index")
    if value is None:
        raise ToolArgumentError("index", "Missing required parameter: 'index' (string or integer).")
    if isinstance(value, bool) or not isinstance(value, int | str):
        msg = (
            "Invalid parameter 'index': expected a string or integer, "
            f"got {json_type_name(value)}."
        )
        raise ToolArgumentError("index", msg)
    return str(value)


def _completion_flags(arguments: Mapping[str, Any]) -> tuple[bool, bool]:
    include_completed = _optional_bool(arguments, "include_completed")
    only_completed = _optional_bool(arguments, "only_completed")
    if include_completed and only_completed:
        msg = (
            "Invalid parameters: 'include_completed' and 'only_completed' cannot both be "
            "true. Use include_completed to see all reminders, or only_completed to see "
            "just finished ones."
        )
        raise ToolArgumentError("only_completed", msg)
    return include_completed, only_completed


def _reports_failures(action: str) -> Callable[[_Method], _Method]:
    """Turn argument and store errors raised by a handler into error results."""

    def decorator(method: _Method) -> _Method:
        @functools.wraps(method)
        async def wrapper(self: Any, arguments: Mapping[str, Any]) -> ToolResult:
            try:
                return await method(self, arguments)
            except ToolArgumentError as exc:
                return ToolResult.error(str(exc))
            except RemindersError as exc:
                return ToolResult.error(f"Failed to {action}: {exc}")

        return wrapper

    return decorator


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


class ReminderTools:
    """One handler per tool, all sharing a single :class:`RemindersStore`."""

    def __init__(self, store: RemindersStore) -> None:
        self._store = store

    def handlers(self) -> dict[str, Callable[[Mapping[str, Any]], Awaitable[ToolResult]]]:
        return {
            "show_lists": self.show_lists,
            "show_reminders": self.show_reminders,
            "show_all_reminders": self.show_all_reminders,
            "add_reminder": self.add_reminder,
            "complete_reminder": self.complete_reminder,
            "uncomplete_reminder": self.uncomplete_reminder,
            "delete_reminder": self.delete_reminder,
            "edit_reminder": self.edit_reminder,
            "create_list": self.create_list,
        }

    @_reports_failures("list reminder lists")
    async def show_lists(self, arguments: Mapping[str, Any]) -> ToolResult:
        return ToolResult.success(to_pretty_json(await self._store.lists()))

    @_reports_failures("fetch reminders")
    async def show_reminders(self, arguments: Mapping[str, Any]) -> ToolResult:
        list_name = _required_str(arguments, "list", "Provide the name of a reminder list.")
        include_completed, only_completed = _completion_flags(arguments)
        reminders = await self._store.reminders(
            list_name,
            include_completed=include_completed or only_completed,
            only_completed=only_completed,
        )
        return ToolResult.success(to_pretty_json(reminders))

    @_reports_failures("fetch reminders")
    async def show_all_reminders(self, arguments: Mapping[str, Any]) -> ToolResult:
        include_completed, only_completed = _completion_flags(arguments)
        reminders = await self._store.reminders(
            include_completed=include_completed or only_completed,
            only_completed=only_completed,
        )
        return ToolResult.success(to_pretty_json(reminders))

    @_reports_failures("add reminder")
    async def add_reminder(self, arguments: Mapping[str, Any]) -> ToolResult:
        list_name = _required_str(
            arguments, "list", "Provide the name of the reminder list to add to."
        )
        title = _required_str(
            arguments, "title", "Provide the title text for the new reminder."
        )
        notes = _optional_str(arguments, "notes")

        due_date = None
        due_text = _optional_str(arguments, "due_date")
        if due_text is not None:
            due_date = parse_date(due_text)
            if due_date is None:
                msg = f'Invalid due_date "{due_text}". Supported formats: {SUPPORTED_FORMATS_HINT}.'
                raise ToolArgumentError("due_date", msg)

        priority = ReminderPriority.NONE
        priority_text = _optional_str(arguments, "priority")
        if priority_text is not None:
            parsed = ReminderPriority.parse(priority_text)
            if parsed is None:
                msg = f'Invalid priority "{priority_text}". Must be one of: {", ".join(_PRIORITIES)}.'
                raise ToolArgumentError("priority", msg)
            priority = parsed

        draft = ReminderDraft(title=title, notes=notes, due_date=due_date, priority=priority)
        created = await self._store.add_reminder(draft, list_name)
        return ToolResult.success(to_pretty_json(created))

    @_reports_failures("complete reminder")
    async def complete_reminder(self, arguments: Mapping[str, Any]) -> ToolResult:
        list_name = _required_str(arguments, "list")
        reference = _required_index(arguments)
        updated = await self._store.set_complete(True, reference, list_name)
        return ToolResult.success(to_pretty_json(updated))

    @_reports_failures("uncomplete reminder")
    async def uncomplete_reminder(self, arguments: Mapping[str, Any]) -> ToolResult:
        list_name = _required_str(arguments, "list")
        reference = _required_index(arguments)
        # Reopening targets completed items, so resolve the index among those.
        updated = await self._store.set_complete(
            False, reference, list_name, only_completed=True
        )
        return ToolResult.success(to_pretty_json(updated))

    @_reports_failures("delete reminder")
    async def delete_reminder(self, arguments: Mapping[str, Any]) -> ToolResult:
        list_name = _required_str(arguments, "list")
        reference = _required_index(arguments)
        title = await self._store.delete(reference, list_name)
        return ToolResult.success(f"Deleted reminder: {title}")

    @_reports_failures("edit reminder")
    async def edit_reminder(self, arguments: Mapping[str, Any]) -> ToolResult:
        list_name = _required_str(arguments, "list")
        reference = _required_index(arguments)
        updated = await self._store.edit(
            reference,
            list_name,
            new_title=_optional_str(arguments, "title"),
            new_notes=_optional_str(arguments, "notes"),
        )
        return ToolResult.success(to_pretty_json(updated))

    @_reports_failures("create list")
    async def create_list(self, arguments: Mapping[str, Any]) -> ToolResult:
        name = _required_str(arguments, "name", "Provide a display name for the new list.")
        created = await self._store.create_list(name)
        return ToolResult.success(to_pretty_json(created))


def build_registry(store: RemindersStore) -> ToolRegistry:
    """The full reminders tool catalog bound to *store*."""
    return ToolRegistry(TOOL_DEFINITIONS, ReminderTools(store).handlers())
