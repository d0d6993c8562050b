"""In-memory column store adapter.

A simple in-memory implementation of the column store port for testing and
for running the walkthrough without a cluster (backend = "memory"). Data is
not persisted across restarts.

The store mimics the HBase rules the walkthrough relies on: creating an
existing table fails, only declared families accept writes, a table must be
disabled before it is deleted, and scans return rows sorted by key bytes.

Usage:
    store = InMemoryColumnStore()
    factory = InMemoryConnectionFactory(store)
    with factory(config) as connection:
        connection.admin().create_table(TableDescriptor.of("t", "cf1"))

Failures can be injected per operation to exercise error paths:
    store.inject_failure("put")            # every put fails
    store.inject_failure("connect", times=1)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import TracebackType
from typing import TYPE_CHECKING, Iterator, Mapping

from hello_hbase.domain.entities import Row, TableDescriptor
from hello_hbase.domain.value_objects import ColumnRef, RowKey, TableName
from hello_hbase.ports.outbound import (
    ColumnStoreError,
    ReadError,
    SchemaError,
    StoreConnectionError,
    TableExistsError,
    WriteError,
)

if TYPE_CHECKING:
    from hello_hbase.infrastructure.config import Config


logger = logging.getLogger(__name__)


_FAULT_ERRORS: dict[str, type[ColumnStoreError]] = {
    "connect": StoreConnectionError,
    "create_table": SchemaError,
    "disable_table": SchemaError,
    "delete_table": SchemaError,
    "put": WriteError,
    "get": ReadError,
    "scan": ReadError,
}


@dataclass
class MemoryTableState:
    """State for an in-memory table."""

    descriptor: TableDescriptor
    enabled: bool = True
    rows: dict[RowKey, dict[ColumnRef, bytes]] = field(default_factory=dict)


class InMemoryColumnStore:
    """Shared state standing in for a cluster.

    Several connections opened from the same store see the same tables,
    which is what the failure-recovery path needs.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._tables: dict[TableName, MemoryTableState] = {}
        self._faults: dict[str, int | None] = {}
        self.connections_opened = 0
        self.connections_closed = 0
        self.operations: list[str] = []

    @property
    def open_connections(self) -> int:
        """Connections opened and not yet closed."""
        return self.connections_opened - self.connections_closed

    def inject_failure(self, operation: str, times: int | None = None) -> None:
        """Make an operation fail.

        Args:
            operation: One of connect, create_table, disable_table,
                delete_table, put, get, scan
            times: Number of calls that fail (None fails every call)
        """
        if operation not in _FAULT_ERRORS:
            raise ValueError(f"Unknown operation: {operation}")
        if times is not None and times < 1:
            raise ValueError(f"times must be positive, got {times}")
        self._faults[operation] = times

    def clear_failures(self) -> None:
        self._faults.clear()

    def check(self, operation: str) -> None:
        """Record an operation and raise if a failure is injected for it."""
        self.operations.append(operation)
        if operation not in self._faults:
            return
        remaining = self._faults[operation]
        if remaining is not None:
            if remaining <= 1:
                del self._faults[operation]
            else:
                self._faults[operation] = remaining - 1
        raise _FAULT_ERRORS[operation](f"Injected failure in {operation}")

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def is_enabled(self, name: str) -> bool:
        return self._require(TableName(name), SchemaError).enabled

    def rows(self, name: str) -> dict[RowKey, dict[ColumnRef, bytes]]:
        """Return a copy of a table's rows, for assertions."""
        state = self._require(TableName(name), SchemaError)
        return {key: dict(cells) for key, cells in state.rows.items()}

    def count_cells(self, name: str) -> int:
        return sum(len(cells) for cells in self.rows(name).values())

    def _require(self, name: TableName, error: type[ColumnStoreError]) -> MemoryTableState:
        state = self._tables.get(name)
        if state is None:
            raise error(f"Table not found: {name}")
        return state

    def _require_enabled(self, name: TableName, error: type[ColumnStoreError]) -> MemoryTableState:
        state = self._require(name, error)
        if not state.enabled:
            raise error(f"Table is disabled: {name}")
        return state


class InMemoryTableAdmin:
    """Admin handle backed by an InMemoryColumnStore."""

    def __init__(self, connection: InMemoryConnection) -> None:
        self._connection = connection
        self._store = connection.store

    def create_table(self, descriptor: TableDescriptor) -> None:
        self._connection.ensure_open()
        self._store.check("create_table")
        if descriptor.name in self._store._tables:
            raise TableExistsError(f"Table already exists: {descriptor.name}")
        self._store._tables[descriptor.name] = MemoryTableState(descriptor=descriptor)
        logger.debug("Created table %s with families %s", descriptor.name, descriptor.column_families)

    def disable_table(self, name: TableName) -> None:
        self._connection.ensure_open()
        self._store.check("disable_table")
        state = self._store._require(name, SchemaError)
        if not state.enabled:
            raise SchemaError(f"Table is already disabled: {name}")
        state.enabled = False

    def delete_table(self, name: TableName) -> None:
        self._connection.ensure_open()
        self._store.check("delete_table")
        state = self._store._require(name, SchemaError)
        if state.enabled:
            raise SchemaError(f"Table is enabled, disable it first: {name}")
        del self._store._tables[name]


class InMemoryTable:
    """Table handle backed by an InMemoryColumnStore."""

    def __init__(self, connection: InMemoryConnection, name: TableName) -> None:
        self._connection = connection
        self._store = connection.store
        self._name = name

    @property
    def name(self) -> TableName:
        return self._name

    def put(self, row_key: RowKey, cells: Mapping[ColumnRef, bytes]) -> None:
        self._connection.ensure_open()
        self._store.check("put")
        state = self._store._require_enabled(self._name, WriteError)
        for column in cells:
            if not state.descriptor.has_family(column.family):
                raise WriteError(f"Unknown column family {column.family!r} in table {self._name}")
        state.rows.setdefault(row_key, {}).update(cells)

    def get(self, row_key: RowKey) -> Row:
        self._connection.ensure_open()
        self._store.check("get")
        state = self._store._require_enabled(self._name, ReadError)
        return Row(key=row_key, cells=dict(state.rows.get(row_key, {})))

    def scan(self) -> Iterator[Row]:
        self._connection.ensure_open()
        return self._scan()

    def _scan(self) -> Iterator[Row]:
        # Runs on first next(), like a server-side scanner being opened.
        self._store.check("scan")
        state = self._store._require_enabled(self._name, ReadError)
        for key in sorted(state.rows, key=lambda k: k.encode("utf-8")):
            cells = state.rows.get(key)
            if cells:
                yield Row(key=key, cells=dict(cells))


class InMemoryConnection:
    """Connection to an InMemoryColumnStore."""

    def __init__(self, store: InMemoryColumnStore) -> None:
        self.store = store
        self._closed = False
        store.connections_opened += 1

    @property
    def closed(self) -> bool:
        return self._closed

    def ensure_open(self) -> None:
        if self._closed:
            raise StoreConnectionError("Connection is closed")

    def admin(self) -> InMemoryTableAdmin:
        self.ensure_open()
        return InMemoryTableAdmin(self)

    def table(self, name: TableName) -> InMemoryTable:
        self.ensure_open()
        return InMemoryTable(self, name)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self.store.connections_closed += 1

    def __enter__(self) -> InMemoryConnection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class InMemoryConnectionFactory:
    """Connection factory for an InMemoryColumnStore.

    There is no network to retry against, so the retry settings are ignored.
    """

    def __init__(self, store: InMemoryColumnStore | None = None) -> None:
        self.store = store or InMemoryColumnStore()

    def __call__(self, config: Config) -> InMemoryConnection:
        self.store.check("connect")
        return InMemoryConnection(self.store)
