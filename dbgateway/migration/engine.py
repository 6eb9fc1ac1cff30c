"""
Table-by-table data migration between two vendor adapters.

Copies are at-least-once per table, not atomic across batches: a failed
batch aborts the table but batches already written stay written.
"""

import logging
import time
from typing import List, Optional, Sequence

from ..adapters import VendorAdapter
from ..logging_utils import log_with_context, migration_logger
from ..models import MigrationReportEntry, MigrationResult

logger = logging.getLogger(__name__)

# Rows read per table in one select; not cursor-based
MIGRATION_ROW_CEILING = 100000
DEFAULT_BATCH_SIZE = 1000


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class MigrationEngine:
    """
    Copies table data from a source adapter to a target adapter.

    The target table must already exist with compatible columns.
    """

    def __init__(self, source: VendorAdapter, target: VendorAdapter):
        """
        Args:
            source: Adapter rows are read from
            target: Adapter rows are inserted into
        """
        self.source = source
        self.target = target

    async def migrate_table(
        self,
        source_table: str,
        target_table: Optional[str] = None,
        batch_size: int = DEFAULT_BATCH_SIZE
    ) -> MigrationResult:
        """
        Copy one table: describe, read up to MIGRATION_ROW_CEILING rows, insert in batches.

        Args:
            source_table: Table to read
            target_table: Table to write (defaults to source_table)
            batch_size: Rows per insert_batch call

        Returns:
            MigrationResult with rows copied and elapsed milliseconds

        Raises:
            ValueError: If the source table has no described columns
            Whatever the source read or any target batch raises; earlier
            batches are not rolled back
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        start = time.perf_counter()
        target_name = target_table or source_table

        columns = await self.source.describe_table(source_table)
        if not columns:
            raise ValueError(f"Source table {source_table} not found or has no columns")
        col_names = ', '.join(self.source.quote_identifier(c.name) for c in columns)
        sql = f"SELECT {col_names} FROM {self.source.quote_identifier(source_table)}"

        result = await self.source.execute_query(sql, MIGRATION_ROW_CEILING)
        rows = result.rows

        if not rows:
            logger.info(f"ℹ️ {source_table}: no rows to migrate")
            return MigrationResult(rows=0, time=_elapsed_ms(start))

        if len(rows) >= MIGRATION_ROW_CEILING:
            logger.warning(
                f"⚠️ {source_table}: read capped at {MIGRATION_ROW_CEILING} rows, remaining rows are not copied"
            )

        batch_size = self._fit_batch_size(batch_size, len(columns), target_name)
        total_inserted = 0
        for offset in range(0, len(rows), batch_size):
            batch = rows[offset:offset + batch_size]
            inserted = await self.target.insert_batch(target_name, batch)
            total_inserted += inserted
            log_with_context(
                migration_logger,
                'DEBUG',
                f"Batch inserted into {target_name}",
                table_name=target_name,
                batch_offset=offset,
                batch_rows=len(batch),
            )

        elapsed = _elapsed_ms(start)
        logger.info(f"✓ {source_table} → {target_name}: {total_inserted} rows in {elapsed}ms")
        return MigrationResult(rows=total_inserted, time=elapsed)

    def _fit_batch_size(self, batch_size: int, column_count: int, table_name: str) -> int:
        """Shrink batch_size so one multi-row insert stays within the target's bind ceiling."""
        ceiling = self.target.max_bind_params
        if not ceiling or batch_size * column_count <= ceiling:
            return batch_size
        fitted = max(1, ceiling // column_count)
        logger.info(
            f"ℹ️ {table_name}: batch size lowered from {batch_size} to {fitted} "
            f"({column_count} columns, {ceiling} bind limit)"
        )
        return fitted

    async def migrate_data(self, table_names: Sequence[str], truncate_target: bool = False) -> List[MigrationReportEntry]:
        """
        Migrate tables in order; one table's failure never stops the others.

        Args:
            table_names: Tables to copy, in order
            truncate_target: Accepted but not implemented yet; target rows are
                never deleted

        Returns:
            One report entry per requested table, in request order
        """
        if truncate_target:
            logger.warning("⚠️ truncate_target is not implemented; existing target rows are kept")

        results: List[MigrationReportEntry] = []
        for table in table_names:
            start = time.perf_counter()
            try:
                res = await self.migrate_table(table)
                results.append(MigrationReportEntry(table=table, status='success', rows=res.rows, time=res.time))
            except Exception as e:
                logger.error(f"❌ Migration of {table} failed: {e}")
                results.append(MigrationReportEntry(
                    table=table,
                    status='error',
                    time=_elapsed_ms(start),
                    error=str(e) or type(e).__name__,
                ))
        return results
