"""
MySQL / MariaDB target adapter for DDL generation.
"""

from .base_adapter import BaseTargetAdapter


class MySQLTargetAdapter(BaseTargetAdapter):
    """
    MySQL-specific DDL generation.

    Tables are never schema-qualified: the connection's database is the
    namespace.
    """

    supports_if_not_exists = True

    def __init__(self, schema=None):
        super().__init__(None)

    def quote(self, name):
        return f"`{name}`"

    def generate_modify_column(self, table_name, column, old_type):
        """Generate MODIFY COLUMN statement for MySQL."""
        col_def = self._column_to_sql(column, False)
        return f"ALTER TABLE {self._full_table_name(table_name)} MODIFY COLUMN {col_def}"
