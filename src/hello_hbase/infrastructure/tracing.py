"""OpenTelemetry tracing for column store operations.

Spans are exported only when an OTLP endpoint is configured; otherwise the
provider records them and drops them.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.util.types import Attributes

TRACER_NAME = "hello_hbase"


def setup_tracing(
    service_name: str = "hello_hbase",
    otlp_endpoint: str | None = None,
) -> trace.Tracer:
    """
    Install a tracer provider for this process.

    Args:
        service_name: service.name resource attribute
        otlp_endpoint: OTLP collector endpoint (e.g. "http://localhost:4317")

    Returns:
        Tracer for the walkthrough's spans
    """
    from hello_hbase import __version__

    provider = TracerProvider(
        resource=Resource.create(
            {"service.name": service_name, "service.version": __version__}
        )
    )
    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )

    trace.set_tracer_provider(provider)
    return provider.get_tracer(TRACER_NAME, __version__)


def get_tracer() -> trace.Tracer:
    """Tracer from the globally installed provider (a no-op one if none is set)."""
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def trace_span(
    name: str,
    attributes: Attributes = None,
    tracer: trace.Tracer | None = None,
) -> Iterator[None]:
    """Run the block inside a span.

    An exception leaving the block is recorded on the span and marks it as
    an error before it propagates.
    """
    with (tracer or get_tracer()).start_as_current_span(
        name,
        attributes=attributes,
        record_exception=True,
        set_status_on_exception=True,
    ):
        yield
