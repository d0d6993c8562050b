"""Prometheus metrics for the HBase walkthrough."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all walkthrough metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Column store operation metrics
        self.operations_total = Counter(
            "hbase_operations_total",
            "Total number of column store operations",
            ["operation", "status"],  # status: success, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "hbase_operation_latency_seconds",
            "Column store operation latency in seconds",
            ["operation"],  # connect, create_table, write, read, scan, drop_table
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=self._registry,
        )

        # Data metrics
        self.cells_written_total = Counter(
            "hbase_cells_written_total",
            "Total cells written",
            registry=self._registry,
        )

        self.rows_scanned_total = Counter(
            "hbase_rows_scanned_total",
            "Total rows returned by scans",
            registry=self._registry,
        )

        # Recovery metrics
        self.cleanups_total = Counter(
            "hbase_cleanups_total",
            "Best-effort table cleanups after a failed run",
            ["status"],  # success, error
            registry=self._registry,
        )

        self.info = Info(
            "hello_hbase",
            "Walkthrough information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int | None = None, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics.

    Args:
        port: Port for the metrics HTTP server (no server if None)
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from hello_hbase import __version__
    _metrics.info.info({
        "version": __version__,
    })

    if port is not None:
        start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
