"""MCP protocol — JSON-RPC 2.0 stdio server exposing the reminders tools."""

from reminders_mcp.mcp.errors import JsonRpcErrorCode, MCPError, MessageDecodeError, ToolArgumentError
from reminders_mcp.mcp.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolDefinition,
    ToolResult,
)
from reminders_mcp.mcp.registry import ToolHandler, ToolRegistry
from reminders_mcp.mcp.server import MCPServer, ServerState
from reminders_mcp.mcp.tools import TOOL_DEFINITIONS, ReminderTools, build_registry
from reminders_mcp.mcp.transport import LineTransport, StdioServerTransport

__all__ = [
    "TOOL_DEFINITIONS",
    "JsonRpcError",
    "JsonRpcErrorCode",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "LineTransport",
    "MCPError",
    "MCPServer",
    "MessageDecodeError",
    "ReminderTools",
    "ServerState",
    "StdioServerTransport",
    "ToolArgumentError",
    "ToolDefinition",
    "ToolHandler",
    "ToolRegistry",
    "ToolResult",
    "build_registry",
]
