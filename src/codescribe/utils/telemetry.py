"""OpenTelemetry tracing for the MCP server.

The server only depends on the OpenTelemetry API; without the SDK every span
is a no-op. ``codescribe serve --telemetry`` prints finished spans to stderr
and ``--otlp-endpoint`` ships them to a collector, both through
:func:`configure_telemetry` (requires ``pip install codescribe[otel]``).

Usage::

    from codescribe.utils.telemetry import ATTR_RPC_METHOD, get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("mcp.request") as span:
        span.set_attribute(ATTR_RPC_METHOD, "tools/call")
"""

from __future__ import annotations

import sys
from typing import IO, Any

from opentelemetry import trace

from codescribe import __version__

# Span attribute keys
ATTR_RPC_METHOD = "rpc.method"
ATTR_REQUEST_ID = "rpc.jsonrpc.request_id"
ATTR_TOOL_NAME = "codescribe.tool.name"

_INSTRUMENTATION_NAME = "codescribe"
_SDK_HINT = "Install it with: pip install codescribe[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer for *name*; a no-op tracer until the SDK is configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME, __version__)


def build_tracer_provider(
    *,
    console: IO[str] | None = None,
    otlp_endpoint: str | None = None,
) -> Any:
    """Create an SDK ``TracerProvider`` for this server.

    Spans are written as JSON to *console* when given (stdout is the
    JSON-RPC channel, so callers pass ``sys.stderr``) and exported over
    OTLP/gRPC when *otlp_endpoint* is set.

    Raises:
        ImportError: If ``opentelemetry-sdk`` (or, for OTLP,
            ``opentelemetry-exporter-otlp``) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required for tracing. {_SDK_HINT}"
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": _INSTRUMENTATION_NAME, "service.version": __version__})
    provider = TracerProvider(resource=resource)

    if console is not None:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=console)))

    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
                OTLPSpanExporter,
            )
        except ImportError as exc:
            msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_SDK_HINT}"
            raise ImportError(msg) from exc
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))

    return provider


def configure_telemetry(*, console: bool = True, otlp_endpoint: str | None = None) -> None:
    """Install the global tracer provider; spans go to stderr and/or OTLP."""
    provider = build_tracer_provider(
        console=sys.stderr if console else None,
        otlp_endpoint=otlp_endpoint,
    )
    trace.set_tracer_provider(provider)
