"""Outbound adapters - implementations for external dependencies.

Outbound adapters implement the column store port against a real HBase
Thrift gateway or an in-memory stand-in.
"""

from hello_hbase.adapters.outbound.happybase_store import (
    HappyBaseConnection,
    HappyBaseConnectionFactory,
    HappyBaseTable,
    HappyBaseTableAdmin,
)
from hello_hbase.adapters.outbound.memory_store import (
    InMemoryColumnStore,
    InMemoryConnection,
    InMemoryConnectionFactory,
)

__all__ = [
    "HappyBaseConnection",
    "HappyBaseConnectionFactory",
    "HappyBaseTable",
    "HappyBaseTableAdmin",
    "InMemoryColumnStore",
    "InMemoryConnection",
    "InMemoryConnectionFactory",
]
