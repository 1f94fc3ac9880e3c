"""Shared CLI output helpers and the store-call boundary."""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, Any, TypeVar

import click
from rich.console import Console

from reminders_mcp.config import ServerConfig
from reminders_mcp.core.errors import RemindersError
from reminders_mcp.core.formatting import format_reminder, to_pretty_json

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from reminders_mcp.core.models import ReminderItem
    from reminders_mcp.core.store import RemindersStore

T = TypeVar("T")

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

FORMAT_OPTION = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["plain", "json"]),
    default="plain",
    show_default=True,
    help="Output format.",
)


def echo(text: str) -> None:
    """Print one line verbatim: no markup, no wrapping."""
    console.print(text, markup=False, soft_wrap=True)


def print_json(value: Any) -> None:
    echo(to_pretty_json(value))


def print_error(message: str) -> None:
    err_console.print(f"Error: {message}", markup=False, soft_wrap=True)


def print_reminders(
    reminders: Sequence[ReminderItem],
    *,
    output_format: str = "plain",
    show_list_name: bool = False,
) -> None:
    """Print reminders one per line with their index, or as a JSON array."""
    if output_format == "json":
        print_json(list(reminders))
        return
    for index, reminder in enumerate(reminders):
        echo(format_reminder(reminder, index, reminder.list_name if show_list_name else None))


def run_with_store(operation: Callable[[RemindersStore], Awaitable[T]]) -> T:
    """Open the configured store, authorize, and run *operation* on it.

    A :class:`RemindersError` is printed as ``Error: ...`` on stderr and the
    process exits with status 1.
    """
    ctx = click.get_current_context()
    config = ctx.find_object(ServerConfig) or ServerConfig()
    store = config.build_store()

    async def _run() -> T:
        await store.request_access()
        return await operation(store)

    try:
        return asyncio.run(_run())
    except RemindersError as exc:
        print_error(str(exc))
        sys.exit(1)
