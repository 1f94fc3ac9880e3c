"""``reminders show-lists`` and ``reminders new-list``."""

from __future__ import annotations

import click

from reminders_mcp.cli_commands._output import FORMAT_OPTION, echo, print_json, run_with_store


@click.command("show-lists")
@FORMAT_OPTION
def show_lists(output_format: str) -> None:
    """Print the name of each reminder list."""
    all_lists = run_with_store(lambda store: store.lists())
    if output_format == "json":
        print_json(all_lists)
        return
    for reminder_list in all_lists:
        echo(reminder_list.title)


@click.command("new-list")
@click.argument("name")
@click.option("--source", default=None, help="The source to back the list (e.g. Local).")
def new_list(name: str, source: str | None) -> None:
    """Create a new reminder list called NAME."""
    created = run_with_store(lambda store: store.create_list(name, source))
    echo(f"Created list: {created.title}")
