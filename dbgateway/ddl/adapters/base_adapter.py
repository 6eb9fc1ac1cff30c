"""
Base adapter for target database DDL generation.

Generates ANSI-flavoured statements; vendor subclasses override quoting,
table qualification and the ALTER syntax that differs between engines.
"""

import logging
from typing import List, Optional, Sequence

from ...models import ColumnInfo

logger = logging.getLogger(__name__)


class BaseTargetAdapter:
    """
    Generic (ANSI) DDL generation for a target database.

    Column types are emitted verbatim from the source's introspection; no
    cross-vendor type mapping is applied.
    """

    supports_if_not_exists = False

    def __init__(self, schema: Optional[str] = None):
        """
        Initialize the target adapter.

        Args:
            schema: Schema tables are qualified with (optional)
        """
        self.schema = schema

    def quote(self, name: str) -> str:
        return f'"{name}"'

    def _full_table_name(self, table_name: str) -> str:
        """Get fully qualified table name with schema."""
        if self.schema:
            return f"{self.quote(self.schema)}.{self.quote(table_name)}"
        return self.quote(table_name)

    def _column_type(self, column: ColumnInfo) -> str:
        """
        Native type, with the character length appended when introspection
        reported it separately from the type name.
        """
        data_type = column.data_type
        if (
            column.max_length
            and column.max_length > 0
            and '(' not in data_type
            and 'CHAR' in data_type.upper()
        ):
            return f"{data_type}({column.max_length})"
        return data_type

    def _column_to_sql(self, column: ColumnInfo, is_pk: bool) -> str:
        """
        Convert a column to its DDL definition.

        Args:
            column: Introspected column
            is_pk: Whether this column is part of primary key

        Returns:
            Column definition string
        """
        parts = [self.quote(column.name), self._column_type(column)]
        if is_pk or not column.nullable:
            parts.append('NOT NULL')
        return ' '.join(parts)

    def generate_create_table(
        self,
        table_name: str,
        columns: Sequence[ColumnInfo],
        primary_keys: List[str]
    ) -> str:
        """
        Generate CREATE TABLE statement.

        Args:
            table_name: Name of the table
            columns: Column definitions, in table order
            primary_keys: Primary key column names, in key order

        Returns:
            CREATE TABLE SQL statement (no terminator)
        """
        col_defs = [self._column_to_sql(col, col.name in primary_keys) for col in columns]

        if primary_keys:
            pk_cols = ', '.join(self.quote(pk) for pk in primary_keys)
            col_defs.append(f"PRIMARY KEY ({pk_cols})")

        columns_sql = ',\n  '.join(col_defs)
        prefix = 'CREATE TABLE IF NOT EXISTS' if self.supports_if_not_exists else 'CREATE TABLE'
        return f"{prefix} {self._full_table_name(table_name)} (\n  {columns_sql}\n)"

    def generate_add_column(self, table_name: str, column: ColumnInfo) -> str:
        """Generate ADD COLUMN statement."""
        col_def = self._column_to_sql(column, False)
        return f"ALTER TABLE {self._full_table_name(table_name)} ADD COLUMN {col_def}"

    def generate_modify_column(self, table_name: str, column: ColumnInfo, old_type: str) -> str:
        """
        Generate MODIFY/ALTER COLUMN statement.

        Args:
            table_name: Name of the table
            column: Column with the new type
            old_type: Type currently on the target
        """
        return (
            f"ALTER TABLE {self._full_table_name(table_name)} "
            f"ALTER COLUMN {self.quote(column.name)} TYPE {self._column_type(column)}"
        )

    def generate_drop_column(self, table_name: str, column_name: str) -> str:
        """Generate DROP COLUMN statement."""
        return f"ALTER TABLE {self._full_table_name(table_name)} DROP COLUMN {self.quote(column_name)}"
