"""Shared error types for the protocol layer."""

from enum import IntEnum


class JsonRpcErrorCode(IntEnum):
    """JSON-RPC 2.0 error codes emitted by the server."""

    PARSE_ERROR = -32700
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class MCPError(Exception):
    """Base error for all protocol-layer failures."""


class MessageDecodeError(MCPError):
    """An incoming line could not be decoded into a wire value."""


class ToolArgumentError(MCPError):
    """A tool was called with missing or malformed arguments.

    Raised inside tool handlers and reported back to the client as an
    error-flagged tool result, never as a JSON-RPC error.
    """

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(detail)


class ResponseEncodingError(MCPError):
    """A response payload could not be serialised to JSON."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Failed to encode response" + (f": {detail}" if detail else ""))
