"""
SQL Server target adapter for DDL generation.
"""

from .base_adapter import BaseTargetAdapter


class SqlServerTargetAdapter(BaseTargetAdapter):
    """SQL Server DDL: schema-qualified (dbo by default), ADD without COLUMN."""

    def __init__(self, schema=None):
        super().__init__(schema or 'dbo')

    def _column_type(self, column):
        # character_maximum_length is -1 for (n)varchar(max)
        if column.max_length == -1 and '(' not in column.data_type:
            return f"{column.data_type}(MAX)"
        return super()._column_type(column)

    def generate_add_column(self, table_name, column):
        """Generate ADD statement for SQL Server."""
        col_def = self._column_to_sql(column, False)
        return f"ALTER TABLE {self._full_table_name(table_name)} ADD {col_def}"

    def generate_modify_column(self, table_name, column, old_type):
        """Generate ALTER COLUMN statement for SQL Server."""
        col_def = self._column_to_sql(column, False)
        return f"ALTER TABLE {self._full_table_name(table_name)} ALTER COLUMN {col_def}"
