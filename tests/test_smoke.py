"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import reminders_mcp

    assert reminders_mcp.__version__ == "1.0.0"


def test_cli_entrypoint() -> None:
    from reminders_mcp.cli import main

    assert callable(main)


def test_mcp_imports() -> None:
    from reminders_mcp.mcp import (
        TOOL_DEFINITIONS,
        MCPServer,
        StdioServerTransport,
        ToolRegistry,
        build_registry,
    )

    assert MCPServer is not None
    assert ToolRegistry is not None
    assert StdioServerTransport is not None
    assert callable(build_registry)
    assert len(TOOL_DEFINITIONS) == 9


def test_lazy_import_from_package() -> None:
    import reminders_mcp

    assert reminders_mcp.MCPServer is not None
    assert reminders_mcp.LocalRemindersStore is not None
