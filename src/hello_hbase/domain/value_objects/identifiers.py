"""Identifiers used to address tables, rows and cells.

HBase addresses every cell by (row key, column family, qualifier). These value
objects keep the three apart so a family name is never passed where a row key
is expected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NewType


TableName = NewType("TableName", str)
"""Name of a table. HBase allows word characters, '-' and '.'."""

RowKey = NewType("RowKey", str)
"""Row key. Rows are stored sorted by the UTF-8 bytes of their key."""

COLUMN_SEPARATOR = b":"

_TABLE_NAME_RE = re.compile(r"^[\w\-.]+$")
_FAMILY_RE = re.compile(r"^[\w\-.]+$")


def validate_table_name(name: str) -> TableName:
    """Check a table name and return it typed.

    Raises:
        ValueError: If the name is empty or uses characters HBase rejects.
    """
    if not name or not _TABLE_NAME_RE.match(name):
        raise ValueError(f"Invalid table name: {name!r}")
    return TableName(name)


def validate_family(family: str) -> str:
    """Check a column family name.

    Raises:
        ValueError: If the name is empty or contains ':' or whitespace.
    """
    if not family or not _FAMILY_RE.match(family):
        raise ValueError(f"Invalid column family: {family!r}")
    return family


def row_key_for(prefix: str, index: int) -> RowKey:
    """Build the key of the index-th row: prefix followed by the decimal index.

    Example:
        >>> row_key_for("greeting", 3)
        'greeting3'
    """
    if index < 0:
        raise ValueError(f"index must be non-negative, got {index}")
    return RowKey(f"{prefix}{index}")


@dataclass(frozen=True, slots=True)
class ColumnRef:
    """Column address: a family plus a qualifier within that family.

    Attributes:
        family: Column family the cell lives in
        qualifier: Column name inside the family

    Example:
        >>> ref = ColumnRef("cf1", "greeting")
        >>> ref.to_bytes()
        b'cf1:greeting'
    """

    family: str
    qualifier: str

    def __post_init__(self) -> None:
        """Validate the column reference."""
        validate_family(self.family)

    def __str__(self) -> str:
        return f"{self.family}:{self.qualifier}"

    def to_bytes(self) -> bytes:
        """Serialize to the 'family:qualifier' form used on the wire."""
        return self.family.encode("utf-8") + COLUMN_SEPARATOR + self.qualifier.encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> ColumnRef:
        """Parse a 'family:qualifier' column name.

        Args:
            data: Column name as returned by the service

        Raises:
            ValueError: If the separator is missing.
        """
        family, sep, qualifier = data.partition(COLUMN_SEPARATOR)
        if not sep:
            raise ValueError(f"Column name has no family separator: {data!r}")
        return cls(family.decode("utf-8"), qualifier.decode("utf-8"))
