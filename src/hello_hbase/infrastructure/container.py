"""Dependency injection container for the HBase walkthrough."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import structlog
from opentelemetry import trace

from hello_hbase.infrastructure.config import Config, get_config
from hello_hbase.infrastructure.logging import setup_logging, get_logger
from hello_hbase.infrastructure.metrics import MetricsRegistry, setup_metrics
from hello_hbase.infrastructure.tracing import setup_tracing


@dataclass
class Container:
    """Bundles the cross-cutting services the entry point wires together."""

    config: Config
    logger: structlog.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry

    _instance: ClassVar[Container | None] = None

    @classmethod
    def create(cls, config: Config | None = None) -> Container:
        """Create and initialize the container with all dependencies."""
        if cls._instance is not None:
            return cls._instance

        config = config or get_config()
        observability = config.observability

        setup_logging(observability.log_level, observability.log_format)
        logger = get_logger("hello_hbase")
        tracer = setup_tracing(
            service_name=observability.otel_service_name,
            otlp_endpoint=observability.otel_endpoint,
        )
        metrics = setup_metrics(port=observability.metrics_port)

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
        )

        logger.info(
            "hello_hbase_container_initialized",
            backend=config.backend,
            **config.as_properties(),
        )

        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None

