"""reminders CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from reminders_mcp import __version__
from reminders_mcp.config import ConfigError, ServerConfig, load_config
from reminders_mcp.core.errors import RemindersError
from reminders_mcp.utils.log import configure_logging

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="reminders")
@click.option("--mcp", "mcp_mode", is_flag=True, help="Run as an MCP server over stdio.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, mcp_mode: bool, config_path: Path | None, verbose: bool) -> None:
    """reminders — manage reminder lists from the command line."""
    from reminders_mcp.cli_commands._output import print_error

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    configure_logging(logging.DEBUG if verbose else config.log_level)
    if config.telemetry.enabled:
        from reminders_mcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(
                service_name=config.server_name,
                export_to_console=config.telemetry.export_to_console,
                otlp_endpoint=config.telemetry.otlp_endpoint,
            )
        except ImportError as exc:
            print_error(str(exc))
            sys.exit(1)
    ctx.obj = config

    if mcp_mode:
        try:
            asyncio.run(serve_stdio(config))
        except RemindersError as exc:
            print_error(str(exc))
            sys.exit(1)
        ctx.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


async def serve_stdio(config: ServerConfig) -> None:
    """Authorize the store, then serve MCP requests on stdin/stdout until EOF."""
    from reminders_mcp.mcp.server import MCPServer
    from reminders_mcp.mcp.tools import build_registry
    from reminders_mcp.mcp.transport import StdioServerTransport

    store = config.build_store()
    await store.request_access()
    server = MCPServer(
        build_registry(store),
        name=config.server_name,
        version=config.server_version,
        protocol_version=config.protocol_version,
    )
    await server.serve(StdioServerTransport())


# Register subcommands
from reminders_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
