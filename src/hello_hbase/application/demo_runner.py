"""Walkthrough runner - the connect, create, write, read, scan sequence.

DemoRunner drives one run against a column store:

    1. connect          open a connection (closed on every exit path)
    2. create_table     create the table with its column families
    3. write_records    one put per (greeting, family), no batching
    4. read_one         point read of the first row
    5. scan_all         full-table scan in key order
    6. drop_table       optional, when table.drop_on_success is set

Any ColumnStoreError along the way stops the run. The runner then opens a
second connection, tries to disable and delete the table, and finishes in
FAILED whatever the outcome of that cleanup. Other exceptions are bugs and
propagate.

Usage:
    from hello_hbase.adapters.outbound import InMemoryConnectionFactory
    from hello_hbase.application import DemoRunner
    from hello_hbase.infrastructure.config import Config

    result = DemoRunner(Config(), InMemoryConnectionFactory()).run()
    assert result.exit_code == 0
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generator, TextIO

from opentelemetry import trace

from hello_hbase.domain.entities import Row, TableDescriptor
from hello_hbase.domain.value_objects import ColumnRef, RowKey, RunState, TableName, row_key_for
from hello_hbase.infrastructure.config import Config
from hello_hbase.infrastructure.logging import get_logger, log_context
from hello_hbase.infrastructure.metrics import MetricsRegistry, get_metrics
from hello_hbase.infrastructure.tracing import trace_span
from hello_hbase.ports.outbound import (
    ColumnStoreError,
    ConnectionFactory,
    DataTable,
    TableAdmin,
)


logger = get_logger(__name__)

OUTPUT_TAG = "HelloHBase"


@dataclass
class RunResult:
    """Outcome of a walkthrough run."""

    state: RunState = RunState.INIT
    history: list[RunState] = field(default_factory=lambda: [RunState.INIT])
    greeting: tuple[str | None, ...] | None = None  # values of the point read
    scanned: list[Row] = field(default_factory=list)
    cells_written: int = 0
    error: ColumnStoreError | None = None
    cleanup_succeeded: bool | None = None  # None when no cleanup was needed

    @property
    def exit_code(self) -> int:
        """0 if every step completed, 1 otherwise."""
        return self.state.exit_code

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.DONE


class DemoRunner:
    """Runs the walkthrough against whatever store the factory connects to.

    The runner never retries; retries on connect belong to the factory.
    A runner is single-use: call run() once.
    """

    def __init__(
        self,
        config: Config,
        connection_factory: ConnectionFactory,
        out: TextIO | None = None,
        metrics: MetricsRegistry | None = None,
        tracer: trace.Tracer | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            config: Walkthrough configuration
            connection_factory: Opens connections to the column store
            out: Stream for the human-readable output (default stdout)
            metrics: Metrics registry (default: the global one)
            tracer: Tracer for the step spans (default: the global provider's)
        """
        self._config = config
        self._connection_factory = connection_factory
        self._out = out
        self._metrics = metrics or get_metrics()
        self._tracer = tracer
        self._result = RunResult()

        table = config.table
        self._descriptor = TableDescriptor.of(table.name, *table.column_families)
        self._qualifier = table.column_qualifier

    @property
    def descriptor(self) -> TableDescriptor:
        return self._descriptor

    @property
    def state(self) -> RunState:
        return self._result.state

    # ------------------------------------------------------------------ run

    def run(self) -> RunResult:
        """Run every step, cleaning up on I/O failure.

        Returns:
            The run result; result.exit_code is the process exit status.

        Raises:
            RuntimeError: If the runner was already used.
        """
        if self._result.state is not RunState.INIT:
            raise RuntimeError(f"Runner already used (state {self._result.state.name})")

        with log_context(table=self._descriptor.name, backend=self._config.backend):
            return self._run()

    def _run(self) -> RunResult:
        result = self._result
        service = self._config.service
        self._print(f"Thrift gateway: {service.host}:{service.port}")
        logger.info("hello_hbase_started", **self._config.as_properties())

        try:
            with self._instrumented("connect"):
                connection = self._connection_factory(self._config)
            with connection:
                self._advance(RunState.CONNECTED)
                admin = connection.admin()

                self.create_table(admin)
                self._advance(RunState.TABLE_CREATED)

                self._print(f"Get table {self._descriptor.name}")
                table = connection.table(self._descriptor.name)

                result.cells_written = self.write_records(table)
                self._advance(RunState.WRITTEN)

                first_key = row_key_for(self._config.table.row_key_prefix, 0)
                result.greeting = self.read_one(table, first_key)
                self._advance(RunState.READ)

                result.scanned = self.scan_all(table)
                self._advance(RunState.SCANNED)

                if self._config.table.drop_on_success:
                    self.drop_table(admin, self._descriptor.name)
        except ColumnStoreError as e:
            logger.exception(
                "hello_hbase_failed",
                state=result.state.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            result.error = e
            self._advance(RunState.CLEANING_UP)
            result.cleanup_succeeded = self.recover(self._descriptor.name)
            self._advance(RunState.FAILED)
            return result

        self._advance(RunState.DONE)
        logger.info(
            "hello_hbase_completed",
            cells_written=result.cells_written,
            rows_scanned=len(result.scanned),
        )
        return result

    # ---------------------------------------------------------------- steps

    def create_table(self, admin: TableAdmin) -> None:
        """Create the table. No existence check is made first."""
        self._print(f"Create table {self._descriptor.name}")
        with self._instrumented("create_table"):
            admin.create_table(self._descriptor)

    def write_records(self, table: DataTable) -> int:
        """Write every greeting into every family, one put per cell.

        The puts for one row are independent round trips; if a later put
        fails the earlier ones stay applied.

        Returns:
            Number of cells written.
        """
        self._print("Write some greetings to the table")
        prefix = self._config.table.row_key_prefix
        written = 0
        with self._instrumented("write"):
            for index, greeting in enumerate(self._config.table.greetings):
                row_key = row_key_for(prefix, index)
                value = greeting.encode("utf-8")
                for family in self._descriptor.column_families:
                    table.put(row_key, {ColumnRef(family, self._qualifier): value})
                    written += 1
                    self._metrics.cells_written_total.inc()
        logger.debug("greetings_written", cells=written, table=table.name)
        return written

    def read_one(self, table: DataTable, row_key: RowKey) -> tuple[str | None, ...]:
        """Read one row and print its value in each family.

        Returns:
            One value per column family, None where the cell is absent.
        """
        with self._instrumented("read"):
            row = table.get(row_key)
        values = row.values(self._descriptor.column_families, self._qualifier)
        self._emit("Get a single greeting by row key")
        self._emit(f"\t{row_key} = {', '.join(_display(v) for v in values)}")
        return values

    def scan_all(self, table: DataTable) -> list[Row]:
        """Scan the whole table and print every value of every row."""
        self._print("Scan for all greetings:")
        rows: list[Row] = []
        with self._instrumented("scan"):
            for row in table.scan():
                for value in row.values(self._descriptor.column_families, self._qualifier):
                    self._emit(f"\t{_display(value)}")
                rows.append(row)
                self._metrics.rows_scanned_total.inc()
        return rows

    def drop_table(self, admin: TableAdmin, name: TableName) -> None:
        """Disable then delete the table."""
        self._print("Delete the table")
        with self._instrumented("drop_table"):
            admin.disable_table(name)
            admin.delete_table(name)

    def recover(self, name: TableName) -> bool:
        """Best-effort removal of the table over a fresh connection.

        Errors are logged and discarded.

        Returns:
            True if the table was disabled and deleted.
        """
        try:
            with trace_span("hbase.cleanup", {"hbase.table": name}, self._tracer):
                with self._connection_factory(self._config) as connection:
                    admin = connection.admin()
                    admin.disable_table(name)
                    admin.delete_table(name)
        except Exception as e:
            # Discarded: the run has already failed and exits 1 either way.
            logger.warning(
                "cleanup_failed",
                table=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            self._metrics.cleanups_total.labels(status="error").inc()
            return False

        logger.info("cleanup_completed", table=name)
        self._metrics.cleanups_total.labels(status="success").inc()
        return True

    # -------------------------------------------------------------- helpers

    def _advance(self, target: RunState) -> None:
        current = self._result.state
        if not current.can_transition_to(target):
            raise RuntimeError(f"Invalid run state transition {current.name} -> {target.name}")
        self._result.state = target
        self._result.history.append(target)
        logger.debug("run_state_changed", previous=current.name, state=target.name)

    @contextmanager
    def _instrumented(self, operation: str) -> Generator[None, None, None]:
        start = time.perf_counter()
        status = "error"
        try:
            with trace_span(
                f"hbase.{operation}", {"hbase.table": self._descriptor.name}, self._tracer
            ):
                yield
            status = "success"
        finally:
            self._metrics.operation_latency_seconds.labels(operation=operation).observe(
                time.perf_counter() - start
            )
            self._metrics.operations_total.labels(operation=operation, status=status).inc()

    def _print(self, message: str) -> None:
        self._emit(f"{OUTPUT_TAG}: {message}")

    def _emit(self, line: str) -> None:
        print(line, file=self._out or sys.stdout)


def _display(value: str | None) -> str:
    return "" if value is None else value
