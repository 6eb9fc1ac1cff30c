"""
SQLite target adapter for DDL generation.
"""

import logging

from .base_adapter import BaseTargetAdapter

logger = logging.getLogger(__name__)


class SQLiteTargetAdapter(BaseTargetAdapter):
    """SQLite DDL: unqualified names, IF NOT EXISTS, no column type changes."""

    supports_if_not_exists = True

    def __init__(self, schema=None):
        super().__init__(None)

    def generate_modify_column(self, table_name, column, old_type):
        """
        SQLite has no ALTER COLUMN; the change is emitted as a comment so the
        generated script still runs.
        """
        logger.warning(f"⚠️ SQLite cannot change {table_name}.{column.name} from {old_type} to {column.data_type}")
        return (
            f"-- SQLite cannot alter column types: {self.quote(table_name)}.{self.quote(column.name)} "
            f"{old_type} -> {self._column_type(column)}"
        )
