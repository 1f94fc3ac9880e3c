"""reminders-mcp — a reminders task-list store behind a CLI and an MCP tool server."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "1.0.0"

if TYPE_CHECKING:
    from reminders_mcp.core.store import LocalRemindersStore as LocalRemindersStore
    from reminders_mcp.mcp.server import MCPServer as MCPServer

_LAZY_EXPORTS = {
    "LocalRemindersStore": "reminders_mcp.core.store",
    "MCPServer": "reminders_mcp.mcp.server",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'reminders_mcp' has no attribute {name!r}")
