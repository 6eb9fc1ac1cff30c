"""
Batched, vendor-aware data migration.
"""

from .engine import DEFAULT_BATCH_SIZE, MIGRATION_ROW_CEILING, MigrationEngine

__all__ = [
    'DEFAULT_BATCH_SIZE',
    'MIGRATION_ROW_CEILING',
    'MigrationEngine',
]
