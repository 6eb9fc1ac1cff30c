"""
PostgreSQL target adapter for DDL generation.
"""

from .base_adapter import BaseTargetAdapter


class PostgreSQLTargetAdapter(BaseTargetAdapter):
    """PostgreSQL DDL: schema-qualified, double-quoted, IF NOT EXISTS."""

    supports_if_not_exists = True

    def __init__(self, schema=None):
        super().__init__(schema or 'public')

    def generate_add_column(self, table_name, column):
        """Generate ADD COLUMN statement for PostgreSQL."""
        col_def = self._column_to_sql(column, False)
        return f"ALTER TABLE {self._full_table_name(table_name)} ADD COLUMN IF NOT EXISTS {col_def}"

    def generate_modify_column(self, table_name, column, old_type):
        """
        Generate ALTER COLUMN TYPE statement for PostgreSQL.

        USING casts the existing values, so compatible conversions succeed
        without a manual step.
        """
        new_type = self._column_type(column)
        col = self.quote(column.name)
        return (
            f"ALTER TABLE {self._full_table_name(table_name)} "
            f"ALTER COLUMN {col} TYPE {new_type} USING {col}::{new_type}"
        )

    def generate_drop_column(self, table_name, column_name):
        """Generate DROP COLUMN statement for PostgreSQL."""
        return (
            f"ALTER TABLE {self._full_table_name(table_name)} "
            f"DROP COLUMN IF EXISTS {self.quote(column_name)}"
        )
