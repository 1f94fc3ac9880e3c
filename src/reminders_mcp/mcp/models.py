"""MCP models — JSON-RPC 2.0 messages, tool definitions and tool results.

Implements the message format used by the Model Context Protocol for the
lifecycle methods, tool discovery (``tools/list``) and execution
(``tools/call``).  Every protocol response goes through
:meth:`JsonRpcResponse.to_line`, so there is a single encoding path.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from reminders_mcp.mcp.errors import MessageDecodeError, ResponseEncodingError

JSONRPC_VERSION = "2.0"

RequestId = StrictInt | StrictStr
"""A request id: a JSON integer or a JSON string.

An integral number written with a fraction (``1.0``) is read as the integer.
"""

_JSON_VALUE: TypeAdapter[JsonValue] = TypeAdapter(JsonValue)


# ---------------------------------------------------------------------------
# JSON values and request ids
# ---------------------------------------------------------------------------


def json_type_name(value: object) -> str:
    """The JSON name for a decoded value's type (``object``, ``array``...)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into one line, e.g. ``method: Field required``."""
    parts: list[str] = []
    for error in exc.errors(include_url=False):
        loc = ".".join(str(p) for p in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts) or str(exc)


def decode_json_value(raw: str | bytes) -> JsonValue:
    """Decode any JSON text, keeping integers as ``int``."""
    try:
        return _JSON_VALUE.validate_json(raw)
    except ValidationError as exc:
        raise MessageDecodeError(describe_validation_error(exc)) from exc


def encode_json_value(value: JsonValue) -> str:
    """Encode a JSON value compactly."""
    return json.dumps(value, separators=(",", ":"))


def _integral(value: object) -> object:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def decode_request_id(raw: str | bytes) -> int | str:
    """Decode a request id; anything but an integer or string is rejected."""
    value = _integral(decode_json_value(raw))
    if isinstance(value, bool) or not isinstance(value, int | str):
        msg = f"Request id must be a string or integer, got {json_type_name(value)}"
        raise MessageDecodeError(msg)
    return value


def encode_request_id(request_id: int | str | None) -> str:
    """Encode a request id as a bare JSON number or quoted string (``null`` if absent)."""
    return json.dumps(request_id)


# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request, or a notification when ``id`` is absent.

    ``jsonrpc`` must be a string but its value is not checked.
    """

    model_config = ConfigDict(frozen=True)

    jsonrpc: StrictStr
    method: StrictStr
    id: RequestId | None = None
    params: JsonValue = None

    @field_validator("id", mode="before")
    @classmethod
    def _integral_id(cls, value: object) -> object:
        return _integral(value)

    @property
    def is_notification(self) -> bool:
        return self.id is None

    @classmethod
    def from_line(cls, line: str | bytes) -> JsonRpcRequest:
        """Decode one protocol line.

        Raises:
            MessageDecodeError: On invalid JSON or a malformed envelope.
        """
        try:
            return cls.model_validate_json(line)
        except ValidationError as exc:
            raise MessageDecodeError(describe_validation_error(exc)) from exc


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    model_config = ConfigDict(frozen=True)

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response carrying exactly one of ``result`` or ``error``."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _result_xor_error(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "a response carries exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: int | str | None, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: int | str | None, code: int, message: str) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message))

    def to_wire(self) -> dict[str, Any]:
        """The response as a plain dict; ``id`` is always present, even as ``None``."""
        body: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.model_dump(exclude_none=True)
        else:
            body["result"] = self.result
        return body

    def to_line(self) -> str:
        """Encode as a single line of compact JSON (no trailing newline).

        Raises:
            ResponseEncodingError: If the payload is not JSON-serialisable.
        """
        try:
            return json.dumps(self.to_wire(), separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise ResponseEncodingError(str(exc)) from exc


# ---------------------------------------------------------------------------
# MCP tool definitions
# ---------------------------------------------------------------------------


class PropertySchema(BaseModel):
    """Schema for one tool argument; ``enum`` only for fixed string vocabularies."""

    model_config = ConfigDict(frozen=True)

    type: str
    description: str
    enum: list[str] | None = None


class InputSchema(BaseModel):
    """JSON-Schema-like description of a tool's arguments."""

    model_config = ConfigDict(frozen=True)

    type: Literal["object"] = "object"
    properties: dict[str, PropertySchema] | None = None
    required: list[str] | None = None


class ToolDefinition(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str = ""
    input_schema: InputSchema = Field(default_factory=InputSchema, alias="inputSchema")

    @property
    def required_arguments(self) -> list[str]:
        return list(self.input_schema.required or [])

    def to_wire(self) -> dict[str, Any]:
        """Encode with unset optional keys omitted rather than ``null``."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# MCP tool results
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """A text content block inside a tool result."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """The outcome of a ``tools/call``.

    ``is_error`` is either ``True`` or unset: a successful result encodes
    with no ``isError`` key at all.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: list[TextContent] = []
    is_error: Literal[True] | None = Field(default=None, alias="isError")

    @field_validator("is_error", mode="before")
    @classmethod
    def _false_means_unset(cls, value: Any) -> Any:
        return None if value is False else value

    @classmethod
    def success(cls, text: str) -> ToolResult:
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str) -> ToolResult:
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def failed(self) -> bool:
        return self.is_error is True

    @property
    def text(self) -> str:
        """Concatenated text of all content blocks."""
        return "\n".join(block.text for block in self.content)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
