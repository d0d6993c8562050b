"""Column store port for schema administration and cell I/O.

This outbound port defines what the walkthrough needs from a wide-column
database: open a connection, create/disable/delete tables through an admin
handle, and put/get/scan cells through a table handle.

All failures surface as ColumnStoreError subclasses. ColumnStoreError derives
from OSError so callers can treat every store failure as an I/O failure.
"""

from __future__ import annotations

from abc import abstractmethod
from types import TracebackType
from typing import TYPE_CHECKING, Iterator, Mapping, Protocol

from hello_hbase.domain.entities import Row, TableDescriptor
from hello_hbase.domain.value_objects import ColumnRef, RowKey, TableName

if TYPE_CHECKING:
    from hello_hbase.infrastructure.config import Config


class ColumnStoreError(OSError):
    """Base class for column store I/O failures."""


class StoreConnectionError(ColumnStoreError):
    """The service is unreachable or rejected the connection settings."""


class SchemaError(ColumnStoreError):
    """A schema operation (create/disable/delete table) was rejected."""


class TableExistsError(SchemaError):
    """Table creation failed because the table already exists."""


class WriteError(ColumnStoreError):
    """A put failed."""


class ReadError(ColumnStoreError):
    """A point read or scan failed."""


class TableAdmin(Protocol):
    """Admin handle: schema management, separate from data access."""

    @abstractmethod
    def create_table(self, descriptor: TableDescriptor) -> None:
        """Create a table.

        No existence check is made first.

        Raises:
            TableExistsError: If the table already exists.
            SchemaError: If the service rejects the descriptor.
        """
        ...

    @abstractmethod
    def disable_table(self, name: TableName) -> None:
        """Disable a table. A table must be disabled before it is deleted.

        Raises:
            SchemaError: If the table does not exist or the call fails.
        """
        ...

    @abstractmethod
    def delete_table(self, name: TableName) -> None:
        """Delete a disabled table.

        Raises:
            SchemaError: If the table does not exist, is still enabled,
                or the call fails.
        """
        ...


class DataTable(Protocol):
    """Table handle for cell reads and writes."""

    @property
    @abstractmethod
    def name(self) -> TableName:
        """Name of the table this handle addresses."""
        ...

    @abstractmethod
    def put(self, row_key: RowKey, cells: Mapping[ColumnRef, bytes]) -> None:
        """Write cells to one row in a single round trip.

        Raises:
            WriteError: If the write fails.
        """
        ...

    @abstractmethod
    def get(self, row_key: RowKey) -> Row:
        """Read one row.

        Returns:
            The row. A key that was never written yields an empty Row.

        Raises:
            ReadError: If the read fails.
        """
        ...

    @abstractmethod
    def scan(self) -> Iterator[Row]:
        """Scan every row in ascending key order.

        Rows are fetched lazily; failures during iteration raise ReadError.
        The iterator is not restartable.
        """
        ...


class ColumnStoreConnection(Protocol):
    """An open session to the column store.

    Connections are context managers and must be closed on every exit path.

    Example:
        with factory(config) as connection:
            connection.admin().create_table(descriptor)
            connection.table(descriptor.name).put(key, cells)
    """

    @abstractmethod
    def admin(self) -> TableAdmin:
        """Return the admin handle for this connection."""
        ...

    @abstractmethod
    def table(self, name: TableName) -> DataTable:
        """Return a handle for the named table. No round trip is made."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        ...

    def __enter__(self) -> ColumnStoreConnection:
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        ...


class ConnectionFactory(Protocol):
    """Opens connections from a configuration.

    The factory owns the client-side retry knobs (retries_number, pause_ms);
    callers never retry on their own.
    """

    def __call__(self, config: Config) -> ColumnStoreConnection:
        """Open a connection.

        Raises:
            StoreConnectionError: If the service is unreachable after the
                configured number of attempts.
        """
        ...
