"""HBase Thrift adapter built on happybase.

Implements the column store port against an HBase Thrift gateway. Library
errors (thriftpy2 TException and socket-level OSError) are translated into
the ColumnStoreError hierarchy at this boundary, so nothing above the adapter
sees Thrift types.

Usage:
    factory = HappyBaseConnectionFactory()
    with factory(config) as connection:
        connection.admin().create_table(TableDescriptor.of("t", "cf1", "cf2"))
        table = connection.table(TableName("t"))
        table.put(RowKey("r1"), {ColumnRef("cf1", "q"): b"v"})

References:
    - https://happybase.readthedocs.io/en/latest/api.html
"""

from __future__ import annotations

import time
from types import TracebackType
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping

import happybase
from thriftpy2.thrift import TException

from hello_hbase.domain.entities import Row, TableDescriptor
from hello_hbase.domain.value_objects import ColumnRef, RowKey, TableName
from hello_hbase.infrastructure.logging import get_logger
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


logger = get_logger(__name__)

# Errors raised by happybase and the Thrift stack underneath it.
LIBRARY_ERRORS: tuple[type[BaseException], ...] = (TException, OSError)


def describe_error(error: BaseException) -> str:
    """Human-readable text for a Thrift or socket error.

    Exceptions generated from the HBase Thrift IDL carry their text in a
    'message' field rather than in args.
    """
    message = getattr(error, "message", None)
    if message:
        return message.decode("utf-8", "replace") if isinstance(message, bytes) else str(message)
    return str(error) or type(error).__name__


def translate_error(
    error: BaseException,
    default: type[ColumnStoreError],
    context: str,
) -> ColumnStoreError:
    """Map a library error onto the column store error hierarchy."""
    if type(error).__name__ == "AlreadyExists":
        return TableExistsError(f"{context}: {describe_error(error)}")
    return default(f"{context}: {describe_error(error)}")


class HappyBaseTableAdmin:
    """Admin handle over a happybase connection."""

    def __init__(self, connection: happybase.Connection) -> None:
        self._connection = connection

    def create_table(self, descriptor: TableDescriptor) -> None:
        families: dict[str, dict[str, Any]] = {
            family: {} for family in descriptor.column_families
        }
        try:
            self._connection.create_table(descriptor.name, families)
        except LIBRARY_ERRORS as e:
            raise translate_error(e, SchemaError, f"Cannot create table {descriptor.name}") from e

    def disable_table(self, name: TableName) -> None:
        try:
            self._connection.disable_table(name)
        except LIBRARY_ERRORS as e:
            raise translate_error(e, SchemaError, f"Cannot disable table {name}") from e

    def delete_table(self, name: TableName) -> None:
        try:
            self._connection.delete_table(name)
        except LIBRARY_ERRORS as e:
            raise translate_error(e, SchemaError, f"Cannot delete table {name}") from e


class HappyBaseTable:
    """Table handle over a happybase.Table."""

    def __init__(self, name: TableName, table: happybase.Table) -> None:
        self._name = name
        self._table = table

    @property
    def name(self) -> TableName:
        return self._name

    def put(self, row_key: RowKey, cells: Mapping[ColumnRef, bytes]) -> None:
        data = {column.to_bytes(): value for column, value in cells.items()}
        try:
            self._table.put(row_key.encode("utf-8"), data)
        except LIBRARY_ERRORS as e:
            raise translate_error(e, WriteError, f"Cannot write row {row_key} to {self._name}") from e

    def get(self, row_key: RowKey) -> Row:
        try:
            raw = self._table.row(row_key.encode("utf-8"))
        except LIBRARY_ERRORS as e:
            raise translate_error(e, ReadError, f"Cannot read row {row_key} from {self._name}") from e
        return Row.from_raw(row_key, raw)

    def scan(self) -> Iterator[Row]:
        try:
            for key, data in self._table.scan():
                yield Row.from_raw(key, data)
        except LIBRARY_ERRORS as e:
            raise translate_error(e, ReadError, f"Scan of {self._name} failed") from e


class HappyBaseConnection:
    """Column store connection wrapping an open happybase.Connection."""

    def __init__(self, connection: happybase.Connection) -> None:
        self._connection = connection
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def admin(self) -> HappyBaseTableAdmin:
        return HappyBaseTableAdmin(self._connection)

    def table(self, name: TableName) -> HappyBaseTable:
        return HappyBaseTable(name, self._connection.table(name))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._connection.close()
        logger.debug("hbase_connection_closed")

    def __enter__(self) -> HappyBaseConnection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class HappyBaseConnectionFactory:
    """Opens happybase connections, retrying the initial connect.

    Up to client.retries_number attempts are made, sleeping client.pause_ms
    between them. Once open, calls on the connection are not retried.
    """

    def __init__(
        self,
        connection_cls: Callable[..., happybase.Connection] = happybase.Connection,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._connection_cls = connection_cls
        self._sleep = sleep

    def __call__(self, config: Config) -> HappyBaseConnection:
        service = config.service
        attempts = config.client.retries_number
        pause_seconds = config.client.pause_ms / 1000.0
        last_error: BaseException | None = None

        for attempt in range(1, attempts + 1):
            connection = self._connection_cls(
                host=service.host,
                port=service.port,
                timeout=service.timeout_ms,
                autoconnect=False,
                transport=service.transport,
                protocol=service.protocol,
                compat=service.compat,
            )
            try:
                connection.open()
            except LIBRARY_ERRORS as e:
                last_error = e
                logger.warning(
                    "hbase_connect_failed",
                    host=service.host,
                    port=service.port,
                    attempt=attempt,
                    attempts=attempts,
                    error=describe_error(e),
                )
                if attempt < attempts:
                    self._sleep(pause_seconds)
                continue

            logger.info(
                "hbase_connected",
                host=service.host,
                port=service.port,
                attempt=attempt,
            )
            return HappyBaseConnection(connection)

        raise StoreConnectionError(
            f"Cannot connect to {service.host}:{service.port} after {attempts} attempts: "
            f"{describe_error(last_error) if last_error else 'no attempt made'}"
        ) from last_error
