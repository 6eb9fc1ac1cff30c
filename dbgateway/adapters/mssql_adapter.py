"""
SQL Server adapter.

Statements run through a SqlServerRequest that emits metadata, row and
terminal events. The adapter collects them into a single future that
resolves exactly once, on the first terminal event.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .base_adapter import VendorAdapter
from .mssql_request import (
    COLUMN_METADATA,
    ERROR,
    REQUEST_COMPLETED,
    ROW,
    ROW_COUNT,
    SqlServerRequest,
)
from ..models import ColumnInfo, ForeignKeyEdge, QueryResult, TableInfo, TableType

logger = logging.getLogger(__name__)


class SqlServerAdapter(VendorAdapter):
    """SQL Server execution over an event-driven request, information_schema introspection."""

    @property
    def schema(self) -> str:
        return self.config.schema or 'dbo'

    async def _request(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        max_rows: Optional[int] = None,
        param_rows: Optional[Sequence[Sequence[Any]]] = None,
    ) -> QueryResult:
        """
        Issue one request and collect its events into a QueryResult.

        Rows beyond max_rows are discarded as they arrive; the stream is
        still drained to completion.

        Args:
            sql: Statement text with %s placeholders
            params: Bound values for a single execution
            max_rows: Buffer cap (None keeps every row)
            param_rows: Bound value rows for execute-many
        """
        loop = asyncio.get_running_loop()
        done = loop.create_future()
        columns: List[str] = []
        rows: List[Dict[str, Any]] = []
        affected = {'count': 0}

        def on_metadata(names):
            columns[:] = names

        def on_row(values):
            if max_rows is None or len(rows) < max_rows:
                rows.append(dict(zip(columns, values)))

        def on_row_count(count):
            affected['count'] = count

        def on_completed():
            if not done.done():
                row_count = len(rows) if columns else max(affected['count'], 0)
                done.set_result(QueryResult(columns=list(columns), rows=rows, row_count=row_count))

        def on_error(error):
            if not done.done():
                done.set_exception(error)

        request = SqlServerRequest(self.pool, loop)
        request.on(COLUMN_METADATA, on_metadata)
        request.on(ROW, on_row)
        request.on(ROW_COUNT, on_row_count)
        request.on(REQUEST_COMPLETED, on_completed)
        request.on(ERROR, on_error)

        if param_rows is not None:
            drained = request.execute_many(sql, param_rows)
        else:
            drained = request.query(sql, params)

        try:
            return await done
        finally:
            await drained

    async def _execute_query(self, sql: str, max_rows: Optional[int]) -> QueryResult:
        return await self._request(sql, max_rows=max_rows)

    # ==========================================
    # Introspection
    # ==========================================

    async def list_tables(self) -> List[TableInfo]:
        result = await self._request(
            """
            SELECT table_name AS table_name, table_type AS table_type
            FROM information_schema.tables
            WHERE table_schema = %s
            ORDER BY table_name
            """,
            [self.schema],
        )
        return [
            TableInfo(
                name=row['table_name'],
                schema=self.schema,
                type=TableType.VIEW if row['table_type'] == 'VIEW' else TableType.TABLE,
            )
            for row in result.rows
        ]

    async def describe_table(self, table_name: str) -> List[ColumnInfo]:
        result = await self._request(
            """
            SELECT column_name AS column_name, data_type AS data_type, is_nullable AS is_nullable,
                   column_default AS column_default, character_maximum_length AS max_length
            FROM information_schema.columns
            WHERE table_name = %s AND table_schema = %s
            ORDER BY ordinal_position
            """,
            [table_name, self.schema],
        )
        columns = [
            ColumnInfo(
                name=row['column_name'],
                data_type=row['data_type'],
                nullable=row['is_nullable'] == 'YES',
                default_value=row['column_default'],
                max_length=row['max_length'],
            )
            for row in result.rows
        ]
        return await self._mark_primary_keys(table_name, columns)

    async def list_primary_keys(self, table_name: str) -> List[str]:
        result = await self._request(
            """
            SELECT c.name AS column_name
            FROM sys.indexes i
            JOIN sys.index_columns ic ON i.object_id = ic.object_id AND i.index_id = ic.index_id
            JOIN sys.columns c ON ic.object_id = c.object_id AND ic.column_id = c.column_id
            WHERE i.is_primary_key = 1
              AND OBJECT_NAME(i.object_id) = %s
              AND OBJECT_SCHEMA_NAME(i.object_id) = %s
            ORDER BY ic.key_ordinal
            """,
            [table_name, self.schema],
        )
        return [row['column_name'] for row in result.rows]

    async def list_foreign_keys(self, table_name: str) -> List[ForeignKeyEdge]:
        result = await self._request(
            """
            SELECT
              COL_NAME(fc.parent_object_id, fc.parent_column_id) AS column_name,
              OBJECT_NAME(fc.referenced_object_id) AS foreign_table_name,
              COL_NAME(fc.referenced_object_id, fc.referenced_column_id) AS foreign_column_name
            FROM sys.foreign_key_columns fc
            WHERE OBJECT_NAME(fc.parent_object_id) = %s
              AND OBJECT_SCHEMA_NAME(fc.parent_object_id) = %s
            """,
            [table_name, self.schema],
        )
        return [
            ForeignKeyEdge(
                column=row['column_name'],
                ref_table=row['foreign_table_name'],
                ref_column=row['foreign_column_name'],
            )
            for row in result.rows
        ]

    # ==========================================
    # Bulk insert
    # ==========================================

    async def _insert_rows(self, table_name: str, columns: List[str], rows: Sequence[Dict[str, Any]]) -> int:
        """Execute-many with one bound parameter row per inserted row."""
        placeholders = ', '.join('%s' for _ in columns)
        sql = self._insert_prefix(table_name, columns) + f"({placeholders})"
        param_rows = [[row.get(col) for col in columns] for row in rows]
        result = await self._request(sql, param_rows=param_rows)
        return result.row_count or len(rows)

    # ==========================================
    # Health
    # ==========================================

    async def _probe(self) -> Tuple[str, int]:
        result = await self._request('SELECT @@VERSION AS version', max_rows=1)
        version = result.rows[0]['version'] if result.rows else 'SQL Server'
        # One physical connection per handle
        return version, 1

    async def close(self) -> None:
        self.pool.close()
