"""Tracing for RPC handling, tool dispatch and registry projection.

Spans are recorded through the OpenTelemetry API, which is a no-op until
:func:`configure_telemetry` installs an SDK provider (``open-gemdocs[otel]``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from opentelemetry import trace

if TYPE_CHECKING:
    from open_gemdocs.config.models import TelemetrySettings

ATTR_RPC_METHOD = "open_gemdocs.rpc.method"
ATTR_TOOL_NAME = "open_gemdocs.tool.name"
ATTR_TOOL_IS_ERROR = "open_gemdocs.tool.is_error"
ATTR_GEM_NAME = "open_gemdocs.gem.name"
ATTR_OBJECT_PATH = "open_gemdocs.object.path"
ATTR_YARDOC_PATH = "open_gemdocs.yardoc.path"

SERVICE_NAME = "open-gemdocs"
_OTEL_HINT = "Install it with: pip install open-gemdocs[otel]"


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


def configure_telemetry(settings: TelemetrySettings) -> None:
    """Install a tracer provider for *settings*.

    Spans go to the OTLP collector at ``settings.otlp_endpoint`` when one is
    set, otherwise they are printed to stdout.

    Raises:
        ImportError: If the SDK (or the OTLP exporter, when needed) is missing.
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
        msg = f"opentelemetry-sdk is required for tracing. {_OTEL_HINT}"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))

    if settings.otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
                OTLPSpanExporter,
            )
        except ImportError as exc:
            msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_OTEL_HINT}"
            raise ImportError(msg) from exc
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint)))
    else:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
