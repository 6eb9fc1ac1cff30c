"""
DDL operation model shared by schema comparison and DDL generation.

Provides:
- DDLOperationType enum of the statements the gateway can synthesize
- DDLOperation describing one pending change
- SchemaDiff, the ordered list of operations produced by a comparison
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class DDLOperationType(str, Enum):
    """DDL operation types."""
    CREATE_TABLE = 'CREATE_TABLE'
    ADD_COLUMN = 'ADD_COLUMN'
    DROP_COLUMN = 'DROP_COLUMN'
    MODIFY_COLUMN = 'MODIFY_COLUMN'


@dataclass
class DDLOperation:
    """
    Represents a DDL operation to be applied to the target.

    Attributes:
        operation_type: Type of DDL operation
        table_name: Name of the table being created or altered
        details: Operation-specific details:
            - CREATE_TABLE: columns (List[ColumnInfo]), primary_keys (List[str])
            - ADD_COLUMN: column (ColumnInfo)
            - MODIFY_COLUMN: column (ColumnInfo), old_type (str)
            - DROP_COLUMN: column_name (str)
        is_destructive: Whether the operation may cause data loss
    """
    operation_type: DDLOperationType
    table_name: str
    details: Dict[str, Any] = field(default_factory=dict)
    is_destructive: bool = False

    def __str__(self) -> str:
        return f"DDLOperation({self.operation_type.value}, {self.table_name})"


@dataclass
class SchemaDiff:
    """Operations needed to bring the target schema in line with the source."""
    operations: List[DDLOperation] = field(default_factory=list)
    source_vendor: Optional[str] = None
    target_vendor: Optional[str] = None

    def add(self, operation: DDLOperation) -> None:
        self.operations.append(operation)

    @property
    def destructive(self) -> List[DDLOperation]:
        return [op for op in self.operations if op.is_destructive]

    def is_empty(self) -> bool:
        return not self.operations

    def __iter__(self) -> Iterator[DDLOperation]:
        return iter(self.operations)

    def __len__(self) -> int:
        return len(self.operations)
