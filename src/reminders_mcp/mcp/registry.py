"""ToolRegistry — immutable name-to-handler routing for ``tools/call``."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

from reminders_mcp.mcp.models import ToolDefinition, ToolResult
from reminders_mcp.utils.telemetry import ATTR_TOOL_IS_ERROR, ATTR_TOOL_NAME, get_tracer

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class ToolHandler(Protocol):
    """Handles one tool: JSON arguments in, :class:`ToolResult` out."""

    async def __call__(self, arguments: Mapping[str, Any]) -> ToolResult: ...


class ToolRegistry:
    """Maps tool names to their definitions and async handlers.

    Built once at startup and read-only afterwards.  :meth:`call` never
    raises: unknown tools and handler crashes both come back as
    error-flagged results so that one bad call cannot take the server down.

    Usage::

        registry = ToolRegistry(definitions, handlers)
        tools = registry.all_definitions()               # for tools/list
        result = await registry.call("show_lists", {})   # for tools/call
    """

    def __init__(
        self,
        definitions: Sequence[ToolDefinition],
        handlers: Mapping[str, ToolHandler],
    ) -> None:
        names = [d.name for d in definitions]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"Duplicate tool definitions: {', '.join(duplicates)}"
            raise ValueError(msg)
        missing = sorted(set(names) - set(handlers))
        if missing:
            msg = f"Tools defined without a handler: {', '.join(missing)}"
            raise ValueError(msg)

        self._definitions: tuple[ToolDefinition, ...] = tuple(definitions)
        self._handlers: Mapping[str, ToolHandler] = MappingProxyType(dict(handlers))

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def all_definitions(self) -> list[ToolDefinition]:
        """All tool definitions, in registration order."""
        return list(self._definitions)

    async def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        """Look up the handler for *name* and run it with *arguments*."""
        handler = self._handlers.get(name)
        if handler is None:
            return ToolResult.error(
                f'Unknown tool: "{name}". Use tools/list to see available tools.'
            )

        with _tracer.start_as_current_span("reminders.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                result = await handler(arguments or {})
            except Exception as exc:
                logger.exception("Tool %s raised", name)
                result = ToolResult.error(f"Tool {name} failed unexpectedly: {exc}")
            span.set_attribute(ATTR_TOOL_IS_ERROR, result.failed)
        return result
