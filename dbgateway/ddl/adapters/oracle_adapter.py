"""
Oracle target adapter for DDL generation.
"""

from .base_adapter import BaseTargetAdapter


class OracleTargetAdapter(BaseTargetAdapter):
    """Oracle DDL: owner-qualified, parenthesized ADD / MODIFY clauses."""

    def generate_add_column(self, table_name, column):
        """Generate ADD statement for Oracle."""
        col_def = self._column_to_sql(column, False)
        return f"ALTER TABLE {self._full_table_name(table_name)} ADD ({col_def})"

    def generate_modify_column(self, table_name, column, old_type):
        """Generate MODIFY statement for Oracle."""
        return (
            f"ALTER TABLE {self._full_table_name(table_name)} "
            f"MODIFY ({self.quote(column.name)} {self._column_type(column)})"
        )
