"""Integration tests: full walkthrough runs against the in-memory store."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Callable

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from prometheus_client import CollectorRegistry

from hello_hbase import __main__ as entry_point
from hello_hbase.adapters.outbound import InMemoryColumnStore, InMemoryConnectionFactory
from hello_hbase.application import OUTPUT_TAG, DemoRunner
from hello_hbase.domain.entities import TableDescriptor
from hello_hbase.domain.value_objects import RunState
from hello_hbase.infrastructure import container as container_module
from hello_hbase.infrastructure.config import Config
from hello_hbase.infrastructure.metrics import MetricsRegistry
from hello_hbase.ports.outbound import (
    ReadError,
    SchemaError,
    StoreConnectionError,
    TableExistsError,
    WriteError,
)

GREETINGS = ["Hello World!", "Hello Cloud Bigtable!", "Hello HBase!", "Hi there", "Cz!"]


@pytest.mark.integration
class TestSuccessfulRun:
    """End-to-end runs that complete."""

    def test_end_to_end(self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore) -> None:
        result = make_runner().run()

        assert result.exit_code == 0
        assert result.error is None
        assert result.cells_written == 10
        assert result.greeting == ("Hello World!", "Hello World!")
        assert len(result.scanned) == 5
        assert [row.key for row in result.scanned] == [f"greeting{i}" for i in range(5)]
        for row, greeting in zip(result.scanned, GREETINGS):
            assert row.values(("cf1", "cf2"), "greeting") == (greeting, greeting)
        assert store.has_table("Hello-Bigtable")

    def test_connection_released(self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore) -> None:
        make_runner().run()

        assert store.connections_opened == 1
        assert store.open_connections == 0


@pytest.mark.integration
class TestFailedRun:
    """Runs that hit an I/O failure and clean up."""

    def test_second_run_fails_at_create(
        self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore
    ) -> None:
        assert make_runner().run().exit_code == 0

        result = make_runner().run()

        assert result.exit_code == 1
        assert isinstance(result.error, TableExistsError)
        assert result.history[-3:] == [RunState.CONNECTED, RunState.CLEANING_UP, RunState.FAILED]
        assert result.cells_written == 0
        # Cleanup removes the table left by the first run
        assert result.cleanup_succeeded is True
        assert not store.has_table("Hello-Bigtable")

    def test_create_failure_skips_later_steps(
        self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore
    ) -> None:
        store.inject_failure("create_table")

        result = make_runner().run()

        assert result.exit_code == 1
        assert isinstance(result.error, SchemaError)
        assert "put" not in store.operations
        assert "get" not in store.operations
        assert "scan" not in store.operations
        assert result.greeting is None
        assert result.scanned == []

    def test_write_failure(self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore) -> None:
        store.inject_failure("put")

        result = make_runner().run()

        assert result.exit_code == 1
        assert isinstance(result.error, WriteError)
        assert result.cleanup_succeeded is True
        assert not store.has_table("Hello-Bigtable")

    def test_read_failure(self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore) -> None:
        store.inject_failure("get")

        result = make_runner().run()

        assert result.exit_code == 1
        assert isinstance(result.error, ReadError)
        assert result.history[-3:] == [RunState.WRITTEN, RunState.CLEANING_UP, RunState.FAILED]

    def test_scan_failure(self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore) -> None:
        store.inject_failure("scan")

        result = make_runner().run()

        assert result.exit_code == 1
        assert isinstance(result.error, ReadError)
        assert result.scanned == []
        assert result.greeting == ("Hello World!", "Hello World!")

    def test_connect_failure_still_attempts_cleanup(
        self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore
    ) -> None:
        store.inject_failure("connect")

        result = make_runner().run()

        assert result.exit_code == 1
        assert isinstance(result.error, StoreConnectionError)
        assert result.history == [RunState.INIT, RunState.CLEANING_UP, RunState.FAILED]
        assert result.cleanup_succeeded is False
        assert store.operations == ["connect", "connect"]

    def test_cleanup_failure_is_swallowed(
        self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore
    ) -> None:
        store.inject_failure("put")
        store.inject_failure("disable_table")

        result = make_runner().run()

        assert result.exit_code == 1
        assert isinstance(result.error, WriteError)
        assert result.cleanup_succeeded is False
        assert store.has_table("Hello-Bigtable")

    def test_cleanup_connection_released(
        self, make_runner: Callable[..., DemoRunner], store: InMemoryColumnStore
    ) -> None:
        store.inject_failure("put")
        store.inject_failure("delete_table")

        make_runner().run()

        assert store.connections_opened == 2
        assert store.open_connections == 0

    def test_non_io_errors_propagate(self, test_config: Config, metrics_registry: MetricsRegistry) -> None:
        def broken_factory(config: Config):
            raise TypeError("bug")

        runner = DemoRunner(test_config, broken_factory, metrics=metrics_registry)

        with pytest.raises(TypeError, match="bug"):
            runner.run()


@pytest.mark.integration
class TestEntryPoint:
    """Tests for the console entry point."""

    def test_build_connection_factory(self) -> None:
        from hello_hbase.adapters.outbound import HappyBaseConnectionFactory

        assert isinstance(entry_point.build_connection_factory(Config(backend="memory")), InMemoryConnectionFactory)
        assert isinstance(entry_point.build_connection_factory(Config()), HappyBaseConnectionFactory)

    @pytest.fixture
    def in_process_container(self, monkeypatch: pytest.MonkeyPatch, tracer: trace.Tracer) -> None:
        """Keep global logging, tracing and the default Prometheus registry untouched."""
        monkeypatch.setattr(container_module, "setup_logging", lambda *args, **kwargs: None)
        monkeypatch.setattr(container_module, "setup_tracing", lambda **kwargs: tracer)
        monkeypatch.setattr(
            container_module,
            "setup_metrics",
            lambda port=None: MetricsRegistry(CollectorRegistry()),
        )

    @pytest.mark.usefixtures("in_process_container")
    def test_main_exits_zero(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        span_exporter: InMemorySpanExporter,
    ) -> None:
        monkeypatch.setenv("HELLO_HBASE_BACKEND", "memory")

        with pytest.raises(SystemExit) as exc_info:
            entry_point.main()

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert f"{OUTPUT_TAG}: Create table Hello-Bigtable" in out
        assert "\tgreeting0 = Hello World!, Hello World!" in out
        # Step spans go to the container's tracer
        assert "hbase.scan" in [span.name for span in span_exporter.get_finished_spans()]

    @pytest.mark.usefixtures("in_process_container")
    def test_main_exits_one_when_table_exists(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        store: InMemoryColumnStore,
        connection_factory: InMemoryConnectionFactory,
        test_config: Config,
    ) -> None:
        monkeypatch.setenv("HELLO_HBASE_BACKEND", "memory")
        with connection_factory(test_config) as connection:
            connection.admin().create_table(TableDescriptor.of("Hello-Bigtable", "cf1", "cf2"))
        monkeypatch.setattr(entry_point, "build_connection_factory", lambda config: connection_factory)

        with pytest.raises(SystemExit) as exc_info:
            entry_point.main()

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert f"{OUTPUT_TAG}: Create table Hello-Bigtable" in out
        assert "Write some greetings" not in out
        # Cleanup removed the table the run collided with
        assert not store.has_table("Hello-Bigtable")

    def test_failure_logs_traceback_to_stderr(self) -> None:
        # Nothing listens on port 1, so connect fails fast with a transport error
        env = {key: value for key, value in os.environ.items() if not key.startswith("HELLO_HBASE_")}
        env.update(
            {
                "HELLO_HBASE_SERVICE__HOST": "127.0.0.1",
                "HELLO_HBASE_SERVICE__PORT": "1",
                "HELLO_HBASE_SERVICE__TIMEOUT_MS": "2000",
                "HELLO_HBASE_CLIENT__RETRIES_NUMBER": "1",
                "HELLO_HBASE_CLIENT__PAUSE_MS": "0",
                "HELLO_HBASE_OBSERVABILITY__LOG_FORMAT": "json",
            }
        )
        src = str(Path(__file__).resolve().parents[2] / "src")
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [src, env.get("PYTHONPATH")]))

        completed = subprocess.run(
            [sys.executable, "-m", "hello_hbase"],
            env=env,
            capture_output=True,
            text=True,
            timeout=60,
        )

        assert completed.returncode == 1
        assert completed.stdout.startswith(f"{OUTPUT_TAG}: Thrift gateway: 127.0.0.1:1")
        assert "hello_hbase_failed" not in completed.stdout
        assert "hello_hbase_failed" in completed.stderr
        assert "Traceback (most recent call last)" in completed.stderr
        assert "StoreConnectionError" in completed.stderr
        assert "cleanup_failed" in completed.stderr
