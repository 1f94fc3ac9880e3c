"""Tracing for the reminders MCP server.

Two spans are emitted.  ``reminders.rpc`` wraps each dispatched JSON-RPC
method and carries :data:`ATTR_RPC_METHOD`.  ``reminders.tool.call`` wraps
each registry call and carries :data:`ATTR_TOOL_NAME` and
:data:`ATTR_TOOL_IS_ERROR`, so a failed tool shows up even though the RPC
itself succeeds.

Both are recorded through the OpenTelemetry API only.  Until
:func:`configure_telemetry` installs an SDK provider (the ``otel`` extra,
enabled with ``telemetry.enabled`` in the config file) the spans are no-ops.
Exported spans go to stderr or an OTLP collector, never stdout, which
carries the protocol stream.
"""

from __future__ import annotations

import sys
from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys
# ---------------------------------------------------------------------------

ATTR_RPC_METHOD = "reminders.rpc.method"
ATTR_TOOL_NAME = "reminders.tool.name"
ATTR_TOOL_IS_ERROR = "reminders.tool.is_error"

_INSTRUMENTATION_NAME = "reminders_mcp"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Tracer used by the server and registry modules; a no-op until configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "reminders-mcp",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider so the server's spans are exported.

    Called once by the CLI when ``telemetry.enabled`` is set.

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute, normally ``server_name``
        from the config.
    export_to_console:
        If ``True``, print each finished span as JSON on stderr.
    otlp_endpoint:
        If set, also batch spans to this OTLP/gRPC collector.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed, or the OTLP
        exporter is missing when *otlp_endpoint* is set.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required to export reminders-mcp spans. "
            "Install it with: pip install reminders-mcp[otel]"
        )
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if export_to_console:
        _add_console_exporter(provider, SimpleSpanProcessor)

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)


def _add_console_exporter(provider: Any, processor_cls: Any) -> None:
    """Spans go to stderr; stdout is reserved for protocol lines."""
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports]

    provider.add_span_processor(processor_cls(ConsoleSpanExporter(out=sys.stderr)))


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install reminders-mcp[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))
