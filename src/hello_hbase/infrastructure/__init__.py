"""Infrastructure layer - cross-cutting concerns."""

from hello_hbase.infrastructure.config import Config, get_config
from hello_hbase.infrastructure.container import Container
from hello_hbase.infrastructure.logging import setup_logging, get_logger, log_context
from hello_hbase.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from hello_hbase.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "Container",
    "setup_logging",
    "get_logger",
    "log_context",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
