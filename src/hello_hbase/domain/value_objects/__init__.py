"""Value objects for the walkthrough domain.

Exports:
    Identifiers:
        - TableName, RowKey: Typed names
        - ColumnRef: (family, qualifier) column address
        - row_key_for: Builds 'prefix<index>' row keys
        - validate_table_name, validate_family: Name checks

    Run lifecycle:
        - RunState: States of a walkthrough run
"""

from hello_hbase.domain.value_objects.identifiers import (
    COLUMN_SEPARATOR,
    ColumnRef,
    RowKey,
    TableName,
    row_key_for,
    validate_family,
    validate_table_name,
)
from hello_hbase.domain.value_objects.run_state import RunState

__all__ = [
    # Identifiers
    "COLUMN_SEPARATOR",
    "ColumnRef",
    "RowKey",
    "TableName",
    "row_key_for",
    "validate_family",
    "validate_table_name",
    # Run lifecycle
    "RunState",
]
