"""Outbound ports - interfaces for external dependencies.

Outbound ports define the contract for the column store the walkthrough
talks to, along with the errors it may raise.
"""

from hello_hbase.ports.outbound.column_store import (
    ColumnStoreConnection,
    ColumnStoreError,
    ConnectionFactory,
    DataTable,
    ReadError,
    SchemaError,
    StoreConnectionError,
    TableAdmin,
    TableExistsError,
    WriteError,
)

__all__ = [
    "ColumnStoreConnection",
    "ColumnStoreError",
    "ConnectionFactory",
    "DataTable",
    "ReadError",
    "SchemaError",
    "StoreConnectionError",
    "TableAdmin",
    "TableExistsError",
    "WriteError",
]
