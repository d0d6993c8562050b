"""Row entity returned by point reads and scans."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from hello_hbase.domain.value_objects import ColumnRef, RowKey


@dataclass
class Row:
    """A row as read back from the store.

    Cells are raw bytes keyed by column. A row that does not exist is
    represented by a Row with no cells, matching what the Thrift gateway
    returns for a missing key.

    Attributes:
        key: Row key
        cells: Cell values keyed by column
    """

    key: RowKey
    cells: dict[ColumnRef, bytes] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, key: bytes | str, raw: Mapping[bytes, bytes]) -> Row:
        """Build a Row from a {b'family:qualifier': value} mapping."""
        if isinstance(key, bytes):
            key = key.decode("utf-8", "replace")
        return cls(
            key=RowKey(key),
            cells={ColumnRef.from_bytes(column): value for column, value in raw.items()},
        )

    @property
    def is_empty(self) -> bool:
        """True if the row has no cells (e.g. the key was never written)."""
        return not self.cells

    def raw_value(self, family: str, qualifier: str) -> bytes | None:
        return self.cells.get(ColumnRef(family, qualifier))

    def value(self, family: str, qualifier: str) -> str | None:
        """Decode the cell at family:qualifier as UTF-8.

        Invalid byte sequences become U+FFFD instead of raising.

        Returns:
            The decoded value, or None if the cell is absent.
        """
        raw = self.raw_value(family, qualifier)
        return raw.decode("utf-8", "replace") if raw is not None else None

    def values(self, families: Iterable[str], qualifier: str) -> tuple[str | None, ...]:
        """Decode the same qualifier across several families, in order."""
        return tuple(self.value(family, qualifier) for family in families)
