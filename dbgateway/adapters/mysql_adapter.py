"""
MySQL / MariaDB adapter.

Uses the aiomysql pool (pymysql underneath). Results come back as a
(rows, fields) pair, and introspection relies on MySQL's catalog commands.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import aiomysql

from .base_adapter import VendorAdapter
from ..models import ColumnInfo, ForeignKeyEdge, QueryResult, TableInfo, TableType

logger = logging.getLogger(__name__)


class MySQLAdapter(VendorAdapter):
    """MySQL-family execution and introspection. Identifiers use back-ticks."""

    def quote_identifier(self, name: str) -> str:
        """Quote identifier for MySQL (uses back-ticks)."""
        return f"`{name}`"

    async def _query(self, sql: str, args: Optional[Sequence[Any]] = None) -> Tuple[List[Dict[str, Any]], List[str], int]:
        """
        Run one statement on a pooled connection.

        Returns:
            (rows as dicts, field names, affected row count)
        """
        async with self.pool.acquire() as connection:
            async with connection.cursor(aiomysql.DictCursor) as cursor:
                await cursor.execute(sql, args)
                fields = [col[0] for col in cursor.description] if cursor.description else []
                rows = list(await cursor.fetchall()) if cursor.description else []
                return rows, fields, cursor.rowcount

    async def _execute_query(self, sql: str, max_rows: Optional[int]) -> QueryResult:
        rows, fields, affected = await self._query(self.apply_row_limit(sql, max_rows))
        return QueryResult(columns=fields, rows=rows, row_count=len(rows) if fields else max(affected, 0))

    # ==========================================
    # Introspection
    # ==========================================

    async def list_tables(self) -> List[TableInfo]:
        database = self.config.database
        if not database:
            raise ValueError('Database name required for MySQL')

        rows, fields, _ = await self._query(f"SHOW FULL TABLES FROM {self.quote_identifier(database)}")
        # First field is Tables_in_<database>, second is Table_type
        name_field, type_field = fields[0], fields[1]
        return [
            TableInfo(
                name=row[name_field],
                schema=database,
                type=TableType.VIEW if row[type_field] == 'VIEW' else TableType.TABLE,
            )
            for row in rows
        ]

    async def describe_table(self, table_name: str) -> List[ColumnInfo]:
        rows, _, _ = await self._query(f"DESCRIBE {self.quote_identifier(table_name)}")
        return [
            ColumnInfo(
                name=row['Field'],
                data_type=row['Type'],
                nullable=row['Null'] == 'YES',
                is_primary_key=row['Key'] == 'PRI',
                default_value=row.get('Default'),
            )
            for row in rows
        ]

    async def list_primary_keys(self, table_name: str) -> List[str]:
        rows, _, _ = await self._query(
            f"SHOW KEYS FROM {self.quote_identifier(table_name)} WHERE Key_name = 'PRIMARY'"
        )
        return [row['Column_name'] for row in sorted(rows, key=lambda r: r.get('Seq_in_index', 0))]

    async def list_foreign_keys(self, table_name: str) -> List[ForeignKeyEdge]:
        rows, _, _ = await self._query(
            """
            SELECT
              COLUMN_NAME AS column_name,
              REFERENCED_TABLE_NAME AS foreign_table_name,
              REFERENCED_COLUMN_NAME AS foreign_column_name
            FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE
            WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = %s AND REFERENCED_TABLE_NAME IS NOT NULL
            ORDER BY CONSTRAINT_NAME, ORDINAL_POSITION
            """,
            [table_name],
        )
        return [
            ForeignKeyEdge(
                column=row['column_name'],
                ref_table=row['foreign_table_name'],
                ref_column=row['foreign_column_name'],
            )
            for row in rows
        ]

    # ==========================================
    # Bulk insert
    # ==========================================

    async def _insert_rows(self, table_name: str, columns: List[str], rows: Sequence[Dict[str, Any]]) -> int:
        """Multi-row insert: INSERT INTO t (...) VALUES (%s, %s), (%s, %s)..."""
        sql, values = self._build_values_insert(table_name, columns, rows, lambda i: '%s')
        _, _, affected = await self._query(sql, values)
        return affected if affected and affected > 0 else len(rows)

    # ==========================================
    # Health
    # ==========================================

    async def _probe(self) -> Tuple[str, int]:
        rows, _, _ = await self._query('SELECT VERSION() AS version')
        active = self.pool.size - self.pool.freesize
        return rows[0]['version'], active

    async def close(self) -> None:
        self.pool.close()
        await self.pool.wait_closed()
