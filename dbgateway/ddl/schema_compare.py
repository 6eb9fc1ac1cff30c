"""
Schema comparison and DDL synthesis between two vendor adapters.

Compares the source's tables and columns against the target's and renders
the differences as CREATE / ALTER statements in the target's dialect.
Matching is case-insensitive on table and column names; types are compared
as vendor-native strings, so cross-vendor pairs report every column whose
spelling differs.
"""

import logging
from typing import Dict, List, Sequence

from .adapters import BaseTargetAdapter, get_target_adapter
from .operations import DDLOperation, DDLOperationType, SchemaDiff
from ..adapters import VendorAdapter
from ..models import ColumnInfo, TableType

logger = logging.getLogger(__name__)


class SchemaCompareService:
    """
    Compares source and target schemas and generates target DDL.

    Usage:
        service = SchemaCompareService(source_adapter, target_adapter)
        diff = await service.compare()
        print(service.generate_ddl(diff))
    """

    def __init__(self, source: VendorAdapter, target: VendorAdapter):
        """
        Args:
            source: Adapter whose schema is the reference
            target: Adapter the DDL is generated for
        """
        self.source = source
        self.target = target
        self.ddl: BaseTargetAdapter = get_target_adapter(target.handle.vendor, target.config.schema)

    # ==========================================
    # Comparison
    # ==========================================

    async def compare(self) -> SchemaDiff:
        """
        Diff the source schema against the target.

        Returns:
            SchemaDiff with CREATE_TABLE for missing tables, ADD_COLUMN for
            missing columns, MODIFY_COLUMN for type mismatches and destructive
            DROP_COLUMN for columns only the target has
        """
        diff = SchemaDiff(source_vendor=self.source.vendor, target_vendor=self.target.vendor)

        source_tables = [t for t in await self.source.list_tables() if t.type == TableType.TABLE]
        target_tables = {t.name.lower(): t.name for t in await self.target.list_tables()}

        for table in source_tables:
            source_columns = await self.source.describe_table(table.name)
            target_name = target_tables.get(table.name.lower())

            if target_name is None:
                diff.add(DDLOperation(
                    operation_type=DDLOperationType.CREATE_TABLE,
                    table_name=table.name,
                    details={
                        'columns': source_columns,
                        'primary_keys': await self.source.list_primary_keys(table.name),
                    },
                ))
                continue

            target_columns = await self.target.describe_table(target_name)
            for operation in self._compare_columns(target_name, source_columns, target_columns):
                diff.add(operation)

        if diff.is_empty():
            logger.info(f"✓ Schemas in sync: {self.source.handle.id} → {self.target.handle.id}")
            return diff

        logger.info(
            f"✓ Schema compare {self.source.handle.id} → {self.target.handle.id}: "
            f"{len(diff)} operations ({len(diff.destructive)} destructive)"
        )
        return diff

    def _compare_columns(
        self,
        table_name: str,
        source_columns: Sequence[ColumnInfo],
        target_columns: Sequence[ColumnInfo]
    ) -> List[DDLOperation]:
        operations: List[DDLOperation] = []
        existing: Dict[str, ColumnInfo] = {c.name.lower(): c for c in target_columns}
        source_names = {c.name.lower() for c in source_columns}

        for column in source_columns:
            current = existing.get(column.name.lower())
            if current is None:
                operations.append(DDLOperation(
                    operation_type=DDLOperationType.ADD_COLUMN,
                    table_name=table_name,
                    details={'column': column},
                ))
            elif current.data_type.lower() != column.data_type.lower():
                operations.append(DDLOperation(
                    operation_type=DDLOperationType.MODIFY_COLUMN,
                    table_name=table_name,
                    details={'column': column, 'old_type': current.data_type},
                ))

        for column in target_columns:
            if column.name.lower() not in source_names:
                operations.append(DDLOperation(
                    operation_type=DDLOperationType.DROP_COLUMN,
                    table_name=table_name,
                    details={'column_name': column.name},
                    is_destructive=True,
                ))

        return operations

    # ==========================================
    # DDL generation
    # ==========================================

    def generate_ddl(self, diff: SchemaDiff, include_destructive: bool = False) -> str:
        """
        Render a diff as a script in the target's dialect.

        Args:
            diff: Result of compare()
            include_destructive: Emit destructive statements as executable
                SQL instead of commenting them out

        Returns:
            Statements in diff order, each terminated with ';'
        """
        statements = []
        for operation in diff:
            sql = self._render(operation)
            if sql.startswith('--'):
                statements.append(sql)
            elif operation.is_destructive and not include_destructive:
                statements.append(f"-- {sql};")
            else:
                statements.append(f"{sql};")
        return '\n'.join(statements)

    def generate_create_table(
        self,
        table_name: str,
        columns: Sequence[ColumnInfo],
        primary_keys: List[str]
    ) -> str:
        """Single CREATE TABLE statement in the target's dialect, without terminator."""
        return self.ddl.generate_create_table(table_name, columns, primary_keys)

    def _render(self, operation: DDLOperation) -> str:
        details = operation.details
        if operation.operation_type == DDLOperationType.CREATE_TABLE:
            return self.ddl.generate_create_table(
                operation.table_name, details['columns'], details.get('primary_keys', [])
            )
        if operation.operation_type == DDLOperationType.ADD_COLUMN:
            return self.ddl.generate_add_column(operation.table_name, details['column'])
        if operation.operation_type == DDLOperationType.MODIFY_COLUMN:
            return self.ddl.generate_modify_column(
                operation.table_name, details['column'], details.get('old_type', '')
            )
        if operation.operation_type == DDLOperationType.DROP_COLUMN:
            return self.ddl.generate_drop_column(operation.table_name, details['column_name'])
        raise ValueError(f"Unsupported operation: {operation.operation_type}")
