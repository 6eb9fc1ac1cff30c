"""
Replication Orchestrator - full schema-plus-data cloning of one database into another.

For every source table, strictly one at a time:
- Describe columns and primary keys
- Create the table on the target from generated DDL
- Copy the rows with the MigrationEngine

A failure on one table is written to the report and the loop moves on.
"""

import logging
import time
from typing import Optional

from ..adapters import VendorAdapter
from ..ddl import SchemaCompareService
from ..logging_utils import alog_operation, migration_logger
from ..migration import MigrationEngine
from ..models import MigrationReportEntry, ReplicationReport, TableType

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class ReplicationOrchestrator:
    """
    Replicates every base table of a source database into a target.

    Views are skipped. Tables are processed sequentially so load on both
    ends stays bounded and the report order is deterministic.
    """

    def __init__(
        self,
        source: VendorAdapter,
        target: VendorAdapter,
        schema_ddl: Optional[SchemaCompareService] = None,
        engine: Optional[MigrationEngine] = None
    ):
        """
        Initialize orchestrator for a source/target pair.

        Args:
            source: Adapter tables are read from
            target: Adapter tables are created in and copied to
            schema_ddl: DDL generator (defaults to a SchemaCompareService for the pair)
            engine: Data copier (defaults to a MigrationEngine for the pair)
        """
        self.source = source
        self.target = target
        self.schema_ddl = schema_ddl or SchemaCompareService(source, target)
        self.engine = engine or MigrationEngine(source, target)

    async def replicate_database(self) -> ReplicationReport:
        """
        Replicate all source tables.

        Returns:
            ReplicationReport with one block of lines per processed table

        Raises:
            Whatever listing the source tables raises; per-table failures are
            recorded in the report instead
        """
        report = ReplicationReport()

        async with alog_operation(
            migration_logger,
            'replicate_database',
            source=self.source.handle.id,
            target=self.target.handle.id,
        ):
            tables = await self.source.list_tables()

            for table in tables:
                if table.type == TableType.VIEW:
                    logger.debug(f"Skipping view {table.name}")
                    continue
                await self._replicate_table(table.name, report)

        failed = sum(1 for entry in report.tables if not entry.succeeded)
        if failed:
            logger.warning(f"⚠️ Replication finished with {failed} failed table(s) of {len(report.tables)}")
        else:
            logger.info(f"✓ Replicated {len(report.tables)} table(s)")
        return report

    async def _replicate_table(self, table_name: str, report: ReplicationReport) -> None:
        start = time.perf_counter()
        report.add(f"Processing table: {table_name}...")

        try:
            columns = await self.source.describe_table(table_name)
            primary_keys = await self.source.list_primary_keys(table_name)
            ddl = self.schema_ddl.generate_create_table(table_name, columns, primary_keys)

            # Usually fails because the table already exists; the copy is still attempted
            try:
                await self.target.execute_query(ddl, max_rows=None)
                report.add("  - Created table schema.")
            except Exception as e:
                logger.warning(f"⚠️ CREATE TABLE {table_name} on target: {e}")
                report.add(f"  - Table creation skipped/failed: {e}")

            result = await self.engine.migrate_table(table_name)
            report.add(f"  - Migrated {result.rows} rows in {result.time}ms.")
            report.tables.append(MigrationReportEntry(
                table=table_name, status='success', rows=result.rows, time=result.time
            ))

        except Exception as e:
            logger.error(f"❌ Error processing table {table_name}: {e}")
            report.add(f"  - ❌ Error processing table {table_name}: {e}")
            report.tables.append(MigrationReportEntry(
                table=table_name,
                status='error',
                time=_elapsed_ms(start),
                error=str(e) or type(e).__name__,
            ))
