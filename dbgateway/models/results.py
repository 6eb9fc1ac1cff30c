"""
Plain result values returned by the vendor adapters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set


class TableType(str, Enum):
    TABLE = 'TABLE'
    VIEW = 'VIEW'


@dataclass
class QueryResult:
    """
    Result of one executed statement.

    Attributes:
        columns: Column names in select order
        rows: One dict per row, keyed by column name
        row_count: Number of rows returned (or affected, for statements
            without a result set)
        execution_time: Elapsed milliseconds
    """
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    execution_time: float = 0.0


@dataclass
class ColumnInfo:
    name: str
    data_type: str
    nullable: bool = True
    is_primary_key: bool = False
    default_value: Optional[str] = None
    max_length: Optional[int] = None


@dataclass
class TableInfo:
    name: str
    schema: Optional[str] = None
    type: TableType = TableType.TABLE


@dataclass
class ForeignKeyEdge:
    column: str
    ref_table: str
    ref_column: str


@dataclass
class PoolStats:
    total: int = 0
    active: int = 0
    idle: int = 0


@dataclass
class HealthCheckResult:
    status: str
    vendor: str
    version: str = 'unknown'
    latency: float = 0.0
    uptime: int = 0
    active_connections: int = 0
    pool_stats: Optional[PoolStats] = None
    error: Optional[str] = None

    @property
    def is_healthy(self) -> bool:
        return self.status == 'healthy'


# Oracle catalog records

@dataclass
class PackageInfo:
    name: str
    type: str
    status: str


@dataclass
class PackageProcedure:
    name: str
    type: str
    overload: Optional[str] = None
    status: str = 'UNKNOWN'


@dataclass
class CompileError:
    line: int
    position: int
    text: str
    attribute: str


# Procedure source analysis

TableUsage = Dict[str, Set[str]]


@dataclass
class ProcedureBlock:
    """
    A contiguous run of procedure source lines.

    Attributes:
        type: declaration, begin, cursor, sql, exception or end
        content: The block's lines joined with newlines
        tables: Upper-cased tables referenced inside the block
        line_start: First line (1-based)
        line_end: Last line (1-based)
    """
    type: str
    content: str
    tables: List[str]
    line_start: int
    line_end: int
