"""
SQLite adapter.

sqlite3 is synchronous: every call runs in-process and blocks the event
loop for its duration. The connection is opened in autocommit mode
(isolation_level=None) so transactions are only the explicit ones below.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .base_adapter import VendorAdapter
from ..models import ColumnInfo, ForeignKeyEdge, QueryResult, TableInfo, TableType

logger = logging.getLogger(__name__)


class SQLiteAdapter(VendorAdapter):
    """Embedded single-file engine; introspection through sqlite_master and PRAGMAs."""

    def _all(self, sql: str, params: Sequence[Any] = ()) -> Tuple[List[Dict[str, Any]], List[str]]:
        cursor = self.pool.execute(sql, params)
        try:
            columns = [col[0] for col in cursor.description] if cursor.description else []
            rows = [dict(zip(columns, row)) for row in cursor.fetchall()] if columns else []
            return rows, columns
        finally:
            cursor.close()

    async def _execute_query(self, sql: str, max_rows: Optional[int]) -> QueryResult:
        rows, columns = self._all(self.apply_row_limit(sql, max_rows))
        return QueryResult(columns=columns, rows=rows, row_count=len(rows))

    # ==========================================
    # Introspection
    # ==========================================

    async def list_tables(self) -> List[TableInfo]:
        rows, _ = self._all(
            """
            SELECT name, type
            FROM sqlite_master
            WHERE type IN ('table', 'view')
              AND name NOT LIKE 'sqlite_%'
            ORDER BY name
            """
        )
        return [
            TableInfo(name=row['name'], type=TableType.TABLE if row['type'].upper() == 'TABLE' else TableType.VIEW)
            for row in rows
        ]

    async def describe_table(self, table_name: str) -> List[ColumnInfo]:
        rows, _ = self._all(f"PRAGMA table_info({self.quote_identifier(table_name)})")
        return [
            ColumnInfo(
                name=row['name'],
                data_type=row['type'],
                nullable=row['notnull'] == 0,
                is_primary_key=row['pk'] > 0,
                default_value=row['dflt_value'],
            )
            for row in rows
        ]

    async def list_primary_keys(self, table_name: str) -> List[str]:
        rows, _ = self._all(f"PRAGMA table_info({self.quote_identifier(table_name)})")
        return [row['name'] for row in sorted((r for r in rows if r['pk'] > 0), key=lambda r: r['pk'])]

    async def list_foreign_keys(self, table_name: str) -> List[ForeignKeyEdge]:
        rows, _ = self._all(f"PRAGMA foreign_key_list({self.quote_identifier(table_name)})")
        return [ForeignKeyEdge(column=row['from'], ref_table=row['table'], ref_column=row['to']) for row in rows]

    # ==========================================
    # Bulk insert
    # ==========================================

    async def _insert_rows(self, table_name: str, columns: List[str], rows: Sequence[Dict[str, Any]]) -> int:
        """
        Prepared once, executed per row inside one explicit transaction.

        Either every row lands or none does. Fails without touching it if the
        caller already holds an open transaction.
        """
        placeholders = ', '.join('?' for _ in columns)
        sql = self._insert_prefix(table_name, columns) + f"({placeholders})"

        cursor = self.pool.cursor()
        try:
            cursor.execute('BEGIN')
        except Exception:
            cursor.close()
            raise

        count = 0
        try:
            for row in rows:
                cursor.execute(sql, [row.get(col) for col in columns])
                count += 1
            cursor.execute('COMMIT')
        except Exception:
            cursor.execute('ROLLBACK')
            raise
        finally:
            cursor.close()
        return count

    # ==========================================
    # Health
    # ==========================================

    async def _probe(self) -> Tuple[str, int]:
        rows, _ = self._all('SELECT sqlite_version() AS version')
        # Single-user engine
        return f"SQLite {rows[0]['version']}", 1

    async def close(self) -> None:
        self.pool.close()
