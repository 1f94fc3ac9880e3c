"""MCPServer — the JSON-RPC 2.0 stdio loop in front of the tool registry.

Reads one request per line, dispatches by method and writes at most one
response line per request, strictly in arrival order.  Every diagnostic
goes to the logger (stderr); stdout carries protocol traffic only.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Any

from reminders_mcp import __version__
from reminders_mcp.mcp.errors import JsonRpcErrorCode, MessageDecodeError, ResponseEncodingError
from reminders_mcp.mcp.models import JsonRpcRequest, JsonRpcResponse
from reminders_mcp.utils.telemetry import ATTR_RPC_METHOD, get_tracer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from reminders_mcp.mcp.registry import ToolRegistry
    from reminders_mcp.mcp.transport import LineTransport

    _MethodHandler = Callable[[JsonRpcRequest], Awaitable[JsonRpcResponse | None]]

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_PROTOCOL_VERSION = "2024-11-05"


class ServerState(enum.Enum):
    """Lifecycle of one :meth:`MCPServer.serve` run."""

    IDLE = "idle"
    RUNNING = "running"
    SHUT_DOWN = "shut_down"


class MCPServer:
    """Serves the tool registry over newline-delimited JSON-RPC.

    Usage::

        server = MCPServer(build_registry(store))
        await server.serve(StdioServerTransport())
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        name: str = "reminders-mcp",
        version: str = __version__,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        self._registry = registry
        self._name = name
        self._version = version
        self._protocol_version = protocol_version
        self.state = ServerState.IDLE
        self.initialized = False
        self._methods: dict[str, _MethodHandler] = {
            "initialize": self._initialize,
            "notifications/initialized": self._initialized_notification,
            "ping": self._ping,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "resources/list": self._resources_list,
            "prompts/list": self._prompts_list,
        }

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def serve(self, transport: LineTransport) -> None:
        """Process lines from *transport* until end of input."""
        self.state = ServerState.RUNNING
        logger.info("%s %s ready on stdio", self._name, self._version)
        while (line := await transport.read_line()) is not None:
            reply = await self.handle_line(line)
            if reply is not None:
                await transport.write_line(reply)
        self.state = ServerState.SHUT_DOWN
        logger.info("Input closed, shutting down")

    async def handle_line(self, line: str) -> str | None:
        """Turn one input line into its response line, or ``None`` for silence."""
        if not line.strip():
            return None
        try:
            request = JsonRpcRequest.from_line(line)
        except MessageDecodeError as exc:
            logger.warning("Could not decode request: %s", exc)
            return self._encode(
                JsonRpcResponse.failure(None, JsonRpcErrorCode.PARSE_ERROR, f"Parse error: {exc}")
            )

        response = await self.dispatch(request)
        if response is None or request.is_notification:
            return None
        return self._encode(response)

    async def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse | None:
        """Run the handler for ``request.method``."""
        logger.debug("Received %s (id=%r)", request.method, request.id)
        handler = self._methods.get(request.method)
        if handler is None:
            logger.warning("Unknown method: %s", request.method)
            return JsonRpcResponse.failure(
                request.id,
                JsonRpcErrorCode.METHOD_NOT_FOUND,
                f"Method not found: {request.method}",
            )
        with _tracer.start_as_current_span("reminders.rpc") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            return await handler(request)

    def _encode(self, response: JsonRpcResponse) -> str:
        try:
            return response.to_line()
        except ResponseEncodingError as exc:
            logger.error("Could not encode response for id=%r: %s", response.id, exc)
            fallback = JsonRpcResponse.failure(
                response.id,
                JsonRpcErrorCode.INTERNAL_ERROR,
                f"Internal error: could not encode response ({exc})",
            )
            return fallback.to_line()

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    async def _initialize(self, request: JsonRpcRequest) -> JsonRpcResponse:
        if isinstance(request.params, dict):
            logger.debug("Client protocol version: %s", request.params.get("protocolVersion"))
        self.initialized = True
        return JsonRpcResponse.success(
            request.id,
            {
                "protocolVersion": self._protocol_version,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": self._name, "version": self._version},
            },
        )

    async def _initialized_notification(self, request: JsonRpcRequest) -> None:
        logger.debug("Client finished initialization")

    async def _ping(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(request.id, {})

    async def _tools_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        tools = [definition.to_wire() for definition in self._registry.all_definitions()]
        return JsonRpcResponse.success(request.id, {"tools": tools})

    async def _tools_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        params = request.params
        if not isinstance(params, dict):
            return JsonRpcResponse.failure(
                request.id,
                JsonRpcErrorCode.INVALID_PARAMS,
                "Invalid params: tools/call expects an object with 'name' and 'arguments'",
            )
        name = params.get("name")
        if not isinstance(name, str):
            return JsonRpcResponse.failure(
                request.id,
                JsonRpcErrorCode.INVALID_PARAMS,
                "Invalid params: missing tool 'name' (string)",
            )
        if not self.initialized:
            logger.debug("tools/call for %s before initialize", name)

        arguments: dict[str, Any] = params.get("arguments")  # type: ignore[assignment]
        if not isinstance(arguments, dict):
            arguments = {}

        result = await self._registry.call(name, arguments)
        logger.info("Tool %s finished (isError: %s)", name, result.failed)
        return JsonRpcResponse.success(request.id, result.to_wire())

    async def _resources_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(request.id, {"resources": []})

    async def _prompts_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(request.id, {"prompts": []})
