"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (the column store)

Adapters implement these ports with concrete functionality.
"""

from hello_hbase.ports.outbound import (
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
