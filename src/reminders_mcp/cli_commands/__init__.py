"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from reminders_mcp.cli_commands.lists import new_list, show_lists
    from reminders_mcp.cli_commands.reminders import (
        add,
        complete,
        delete,
        edit,
        show,
        show_all,
        uncomplete,
    )

    cli.add_command(show_lists)
    cli.add_command(show)
    cli.add_command(show_all)
    cli.add_command(add)
    cli.add_command(complete)
    cli.add_command(uncomplete)
    cli.add_command(delete)
    cli.add_command(edit)
    cli.add_command(new_list)
