"""Domain entities for the walkthrough.

Exports:
    - TableDescriptor: Table name plus column families
    - Row: Key and cells read back from the store
"""

from hello_hbase.domain.entities.row import Row
from hello_hbase.domain.entities.table_descriptor import TableDescriptor

__all__ = [
    "Row",
    "TableDescriptor",
]
