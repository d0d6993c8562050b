"""Pytest configuration and fixtures for hello_hbase tests."""

from __future__ import annotations

import io
import os
from typing import Callable, Generator

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from prometheus_client import CollectorRegistry

from hello_hbase.adapters.outbound import InMemoryColumnStore, InMemoryConnectionFactory
from hello_hbase.application import DemoRunner
from hello_hbase.infrastructure.config import ClientConfig, Config, get_config
from hello_hbase.infrastructure.container import Container
from hello_hbase.infrastructure.metrics import MetricsRegistry


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep HELLO_HBASE_* settings and cached singletons out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("HELLO_HBASE_"):
            monkeypatch.delenv(key)
    get_config.cache_clear()
    Container.reset()
    yield
    get_config.cache_clear()
    Container.reset()


@pytest.fixture
def test_config() -> Config:
    """Provide a configuration with the default schema and fast retries."""
    return Config(
        backend="memory",
        client=ClientConfig(retries_number=2, pause_ms=0),
    )


@pytest.fixture
def store() -> InMemoryColumnStore:
    """Provide an empty in-memory column store."""
    return InMemoryColumnStore()


@pytest.fixture
def connection_factory(store: InMemoryColumnStore) -> InMemoryConnectionFactory:
    """Provide a connection factory bound to the test store."""
    return InMemoryConnectionFactory(store)


@pytest.fixture
def registry() -> CollectorRegistry:
    """Provide a private Prometheus registry."""
    return CollectorRegistry(auto_describe=True)


@pytest.fixture
def metrics_registry(registry: CollectorRegistry) -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    return MetricsRegistry(registry=registry)


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """Collect finished spans in memory."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter: InMemorySpanExporter) -> trace.Tracer:
    """Provide a tracer on a private provider, leaving the global one alone."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider.get_tracer("hello_hbase.tests")


@pytest.fixture
def output() -> io.StringIO:
    """Capture the walkthrough's stdout lines."""
    return io.StringIO()


@pytest.fixture
def make_runner(
    test_config: Config,
    connection_factory: InMemoryConnectionFactory,
    output: io.StringIO,
    metrics_registry: MetricsRegistry,
    tracer: trace.Tracer,
) -> Callable[..., DemoRunner]:
    """Build runners sharing the test store, output and metrics."""

    def _make(config: Config | None = None) -> DemoRunner:
        return DemoRunner(
            config or test_config,
            connection_factory,
            out=output,
            metrics=metrics_registry,
            tracer=tracer,
        )

    return _make


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
