"""``reminders show|show-all|add|complete|uncomplete|delete|edit``."""

from __future__ import annotations

import click

from reminders_mcp.cli_commands._output import (
    FORMAT_OPTION,
    echo,
    print_json,
    print_reminders,
    run_with_store,
)
from reminders_mcp.core.dates import SUPPORTED_FORMATS_HINT, filter_by_due_date, parse_date
from reminders_mcp.core.formatting import format_reminder
from reminders_mcp.core.models import ReminderDraft, ReminderPriority


def _check_date(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is not None and parse_date(value) is None:
        msg = f'Could not parse date "{value}". Supported formats: {SUPPORTED_FORMATS_HINT}.'
        raise click.BadParameter(msg, ctx=ctx, param=param)
    return value


def _filter_options(func: click.decorators.FC) -> click.decorators.FC:
    """Completion and due-date filters shared by ``show`` and ``show-all``."""
    func = FORMAT_OPTION(func)
    func = click.option(
        "--due-date", "-d", default=None, callback=_check_date,
        help="Only reminders due on or before this date.",
    )(func)
    func = click.option(
        "--include-overdue", is_flag=True,
        help="Keep overdue reminders when filtering by due date.",
    )(func)
    func = click.option(
        "--include-completed", is_flag=True, help="Include completed reminders in the output."
    )(func)
    func = click.option(
        "--only-completed", is_flag=True, help="Show only completed reminders."
    )(func)
    return func


def _completion_filter(only_completed: bool, include_completed: bool) -> tuple[bool, bool]:
    if only_completed and include_completed:
        raise click.UsageError("Cannot use --only-completed and --include-completed together.")
    return only_completed or include_completed, only_completed


@click.command()
@click.argument("list_name")
@_filter_options
def show(
    list_name: str,
    only_completed: bool,
    include_completed: bool,
    include_overdue: bool,
    due_date: str | None,
    output_format: str,
) -> None:
    """Print the reminders in LIST_NAME."""
    include, only = _completion_filter(only_completed, include_completed)
    reminders = run_with_store(
        lambda store: store.reminders(list_name, include_completed=include, only_completed=only)
    )
    reminders = filter_by_due_date(reminders, due_date, include_overdue=include_overdue)
    print_reminders(reminders, output_format=output_format)


@click.command("show-all")
@_filter_options
def show_all(
    only_completed: bool,
    include_completed: bool,
    include_overdue: bool,
    due_date: str | None,
    output_format: str,
) -> None:
    """Print all reminders across every list."""
    include, only = _completion_filter(only_completed, include_completed)
    reminders = run_with_store(
        lambda store: store.reminders(include_completed=include, only_completed=only)
    )
    reminders = filter_by_due_date(reminders, due_date, include_overdue=include_overdue)
    print_reminders(reminders, output_format=output_format, show_list_name=True)


@click.command()
@click.argument("list_name")
@click.argument("title", nargs=-1, required=True)
@click.option(
    "--due-date", "-d", default=None, callback=_check_date,
    help="Due date (e.g. today, tomorrow, 2025-12-31, MM/dd).",
)
@click.option(
    "--priority", "-p",
    type=click.Choice([p.value for p in ReminderPriority], case_sensitive=False),
    default=None,
    help="Priority level.",
)
@click.option("--notes", "-n", default=None, help="Notes to attach to the reminder.")
@FORMAT_OPTION
def add(
    list_name: str,
    title: tuple[str, ...],
    due_date: str | None,
    priority: str | None,
    notes: str | None,
    output_format: str,
) -> None:
    """Add a reminder titled TITLE to LIST_NAME."""
    draft = ReminderDraft(
        title=" ".join(title),
        notes=notes,
        due_date=parse_date(due_date) if due_date is not None else None,
        priority=ReminderPriority.parse(priority) if priority else ReminderPriority.NONE,
    )
    created = run_with_store(lambda store: store.add_reminder(draft, list_name))
    if output_format == "json":
        print_json(created)
    else:
        echo(f"Added: {format_reminder(created)}")


@click.command()
@click.argument("list_name")
@click.argument("index")
def complete(list_name: str, index: str) -> None:
    """Mark the reminder at INDEX in LIST_NAME as completed."""
    updated = run_with_store(lambda store: store.set_complete(True, index, list_name))
    echo(f"Completed: {updated.title}")


@click.command()
@click.argument("list_name")
@click.argument("index")
def uncomplete(list_name: str, index: str) -> None:
    """Reopen a completed reminder.

    INDEX counts completed reminders only, as listed by ``show --only-completed``.
    """
    updated = run_with_store(
        lambda store: store.set_complete(False, index, list_name, only_completed=True)
    )
    echo(f"Uncompleted: {updated.title}")


@click.command()
@click.argument("list_name")
@click.argument("index")
def delete(list_name: str, index: str) -> None:
    """Delete the reminder at INDEX from LIST_NAME."""
    title = run_with_store(lambda store: store.delete(index, list_name))
    echo(f"Deleted: {title}")


@click.command()
@click.argument("list_name")
@click.argument("index")
@click.argument("title", nargs=-1)
@click.option("--notes", "-n", default=None, help="New notes for the reminder.")
def edit(list_name: str, index: str, title: tuple[str, ...], notes: str | None) -> None:
    """Change the title and/or notes of the reminder at INDEX.

    Omit TITLE to keep the current title.
    """
    new_title = " ".join(title) if title else None
    updated = run_with_store(
        lambda store: store.edit(index, list_name, new_title=new_title, new_notes=notes)
    )
    echo(f"Edited: {format_reminder(updated)}")
