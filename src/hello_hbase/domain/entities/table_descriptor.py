"""Table schema submitted to the admin handle."""

from __future__ import annotations

from dataclasses import dataclass

from hello_hbase.domain.value_objects import TableName, validate_family, validate_table_name


@dataclass(frozen=True, slots=True)
class TableDescriptor:
    """Name and column families of a table to create.

    Families keep the order they were declared in; the walkthrough writes
    and prints values family by family in that order.

    Example:
        >>> desc = TableDescriptor.of("Hello-Bigtable", "cf1", "cf2")
        >>> desc.column_families
        ('cf1', 'cf2')
    """

    name: TableName
    column_families: tuple[str, ...]

    def __post_init__(self) -> None:
        validate_table_name(self.name)
        if not self.column_families:
            raise ValueError(f"Table {self.name!r} needs at least one column family")
        for family in self.column_families:
            validate_family(family)
        if len(set(self.column_families)) != len(self.column_families):
            raise ValueError(f"Duplicate column family in {list(self.column_families)}")

    @classmethod
    def of(cls, name: str, *families: str) -> TableDescriptor:
        """Build a descriptor from a name and family names."""
        return cls(TableName(name), tuple(families))

    def has_family(self, family: str) -> bool:
        return family in self.column_families
