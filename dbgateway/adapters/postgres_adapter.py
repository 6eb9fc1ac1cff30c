"""
PostgreSQL adapter.

User statements run as prepared statements on a leased connection so
column names survive empty results. Catalog queries and inserts go straight
to the pool (pool.fetch / pool.execute), which leases implicitly.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .base_adapter import VendorAdapter
from ..models import ColumnInfo, ForeignKeyEdge, QueryResult, TableInfo, TableType

logger = logging.getLogger(__name__)


def _affected_rows(status: str) -> int:
    """Parse the row count from a command tag such as 'INSERT 0 42'."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class PostgreSQLAdapter(VendorAdapter):
    """PostgreSQL-specific execution and information_schema introspection."""

    # asyncpg refuses statements with more bound arguments
    max_bind_params = 32767

    @property
    def schema(self) -> str:
        return self.config.schema or 'public'

    async def _execute_query(self, sql: str, max_rows: Optional[int]) -> QueryResult:
        async with self.pool.acquire() as conn:
            statement = await conn.prepare(self.apply_row_limit(sql, max_rows))
            records = await statement.fetch()
            # Statement attributes carry column names even for zero rows
            columns = [attr.name for attr in statement.get_attributes()]
        rows = [dict(record) for record in records]
        return QueryResult(columns=columns, rows=rows, row_count=len(rows))

    # ==========================================
    # Introspection
    # ==========================================

    async def list_tables(self) -> List[TableInfo]:
        records = await self.pool.fetch(
            """
            SELECT table_name, table_type
            FROM information_schema.tables
            WHERE table_schema = $1 AND table_type IN ('BASE TABLE', 'VIEW')
            ORDER BY table_name
            """,
            self.schema,
        )
        return [
            TableInfo(
                name=record['table_name'],
                schema=self.schema,
                type=TableType.VIEW if record['table_type'] == 'VIEW' else TableType.TABLE,
            )
            for record in records
        ]

    async def describe_table(self, table_name: str) -> List[ColumnInfo]:
        records = await self.pool.fetch(
            """
            SELECT column_name, data_type, is_nullable, column_default, character_maximum_length
            FROM information_schema.columns
            WHERE table_name = $1 AND table_schema = $2
            ORDER BY ordinal_position
            """,
            table_name,
            self.schema,
        )
        columns = [
            ColumnInfo(
                name=record['column_name'],
                data_type=record['data_type'],
                nullable=record['is_nullable'] == 'YES',
                default_value=record['column_default'],
                max_length=record['character_maximum_length'],
            )
            for record in records
        ]
        return await self._mark_primary_keys(table_name, columns)

    async def list_primary_keys(self, table_name: str) -> List[str]:
        records = await self.pool.fetch(
            """
            SELECT a.attname
            FROM pg_index i
            JOIN pg_attribute a ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey)
            WHERE i.indrelid = $1::regclass AND i.indisprimary
            ORDER BY array_position(i.indkey, a.attnum)
            """,
            f'{self.quote_identifier(self.schema)}.{self.quote_identifier(table_name)}',
        )
        return [record['attname'] for record in records]

    async def list_foreign_keys(self, table_name: str) -> List[ForeignKeyEdge]:
        records = await self.pool.fetch(
            """
            SELECT
              kcu.column_name,
              ccu.table_name AS foreign_table_name,
              ccu.column_name AS foreign_column_name
            FROM information_schema.table_constraints AS tc
            JOIN information_schema.key_column_usage AS kcu
              ON tc.constraint_name = kcu.constraint_name
              AND tc.table_schema = kcu.table_schema
            JOIN information_schema.constraint_column_usage AS ccu
              ON ccu.constraint_name = tc.constraint_name
              AND ccu.table_schema = tc.table_schema
            WHERE tc.constraint_type = 'FOREIGN KEY'
              AND tc.table_name = $1
              AND tc.table_schema = $2
            """,
            table_name,
            self.schema,
        )
        return [
            ForeignKeyEdge(
                column=record['column_name'],
                ref_table=record['foreign_table_name'],
                ref_column=record['foreign_column_name'],
            )
            for record in records
        ]

    # ==========================================
    # Bulk insert
    # ==========================================

    async def _insert_rows(self, table_name: str, columns: List[str], rows: Sequence[Dict[str, Any]]) -> int:
        """
        Multi-row insert: INSERT INTO t (c1, c2) VALUES ($1, $2), ($3, $4)...

        asyncpg caps bound arguments at 32767 per statement (max_bind_params).
        rows x columns above that fails here; MigrationEngine sizes its
        batches to stay below it.
        """
        sql, values = self._build_values_insert(table_name, columns, rows, lambda i: f"${i}")
        status = await self.pool.execute(sql, *values)
        return _affected_rows(status)

    # ==========================================
    # Health
    # ==========================================

    async def _probe(self) -> Tuple[str, int]:
        version = await self.pool.fetchval('SELECT version()')
        return version, self.pool.get_size()

    async def close(self) -> None:
        await self.pool.close()
