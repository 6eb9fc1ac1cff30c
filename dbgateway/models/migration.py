"""
Migration and replication report values.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class MigrationResult:
    """Rows copied and elapsed milliseconds for one table."""
    rows: int
    time: float


@dataclass
class MigrationReportEntry:
    """
    Outcome of migrating one table.

    Attributes:
        table: Source table name
        status: 'success' or 'error'
        rows: Rows copied (0 on error)
        time: Elapsed milliseconds
        error: Error message when status is 'error'
    """
    table: str
    status: str
    rows: int = 0
    time: float = 0.0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 'success'

    def to_dict(self) -> Dict[str, Any]:
        data = {'table': self.table, 'status': self.status, 'rows': self.rows, 'time': self.time}
        if self.error is not None:
            data['error'] = self.error
        return data


@dataclass
class ReplicationReport:
    """Ordered, human-readable progress report of a replication run."""
    lines: List[str] = field(default_factory=list)
    tables: List[MigrationReportEntry] = field(default_factory=list)

    def add(self, line: str) -> None:
        self.lines.append(line)

    @property
    def table_names(self) -> List[str]:
        return [entry.table for entry in self.tables]

    def __str__(self) -> str:
        return '\n'.join(self.lines)
