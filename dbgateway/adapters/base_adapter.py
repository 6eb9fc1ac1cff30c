"""
Base vendor adapter.

Provides the uniform asynchronous operation surface every vendor implements:
query execution, introspection, bulk insert and health probing. Subclasses
only supply the vendor-native pieces.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_MAX_POOL_SIZE, DEFAULT_MAX_ROWS
from ..exceptions import OracleOnlyOperationRejected, VendorOperationFailure
from ..logging_utils import adapter_logger, log_with_context
from ..models import (
    ColumnInfo,
    CompileError,
    ConnectionHandle,
    ForeignKeyEdge,
    HealthCheckResult,
    PackageInfo,
    PackageProcedure,
    PoolStats,
    QueryResult,
    TableInfo,
)

logger = logging.getLogger(__name__)


def elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class VendorAdapter(ABC):
    """
    Abstract base class for vendor adapters.

    One concrete subclass per engine; the factory picks it from the handle's
    vendor tag.
    """

    # Bound-argument ceiling per statement, None when unbounded
    max_bind_params: Optional[int] = None

    def __init__(self, handle: ConnectionHandle):
        """
        Initialize the adapter.

        Args:
            handle: Opened connection handle for this vendor
        """
        self.handle = handle

    @property
    def pool(self) -> Any:
        return self.handle.pool

    @property
    def vendor(self) -> str:
        return self.handle.vendor.value

    @property
    def config(self):
        return self.handle.config

    def quote_identifier(self, name: str) -> str:
        """Quote identifier (double quotes unless the vendor overrides)."""
        return f'"{name}"'

    def apply_row_limit(self, sql: str, max_rows: Optional[int]) -> str:
        """Append a LIMIT clause. The statement must not end in a clause or terminator."""
        if max_rows is None:
            return sql
        return f"{sql} LIMIT {max_rows}"

    # ==========================================
    # Query execution
    # ==========================================

    async def execute_query(self, sql: str, max_rows: Optional[int] = DEFAULT_MAX_ROWS) -> QueryResult:
        """
        Execute a statement and collect at most max_rows rows.

        Args:
            sql: SQL statement (no trailing terminator)
            max_rows: Row cap; None fetches everything and leaves the
                statement text untouched (DDL, DML)

        Returns:
            QueryResult with columns, rows, row count and elapsed milliseconds

        Raises:
            VendorOperationFailure: Wrapping the native driver error
        """
        start = time.perf_counter()
        try:
            result = await self._execute_query(sql, max_rows)
        except Exception as e:
            logger.error(f"❌ [{self.handle.id}] Query failed after {elapsed_ms(start)}ms: {e}")
            raise VendorOperationFailure(f"Error executing query: {e}", vendor=self.vendor) from e

        result.execution_time = elapsed_ms(start)
        logger.info(f"⏱️ [{self.handle.id}] Query executed in {result.execution_time}ms ({result.row_count} rows)")
        return result

    @abstractmethod
    async def _execute_query(self, sql: str, max_rows: Optional[int]) -> QueryResult:
        """Run the statement with the vendor's native call shape."""
        pass

    # ==========================================
    # Introspection
    # ==========================================

    @abstractmethod
    async def list_tables(self) -> List[TableInfo]:
        pass

    @abstractmethod
    async def describe_table(self, table_name: str) -> List[ColumnInfo]:
        pass

    @abstractmethod
    async def list_primary_keys(self, table_name: str) -> List[str]:
        pass

    @abstractmethod
    async def list_foreign_keys(self, table_name: str) -> List[ForeignKeyEdge]:
        pass

    async def _mark_primary_keys(self, table_name: str, columns: List[ColumnInfo]) -> List[ColumnInfo]:
        """Set is_primary_key for catalogs whose column views don't carry it."""
        primary_keys = set(await self.list_primary_keys(table_name))
        for column in columns:
            column.is_primary_key = column.name in primary_keys
        return columns

    # ==========================================
    # Bulk insert
    # ==========================================

    async def insert_batch(self, table_name: str, rows: Sequence[Dict[str, Any]]) -> int:
        """
        Insert rows into a table using the vendor's bulk strategy.

        The first row's keys decide the column list. Identifiers are quoted,
        values are always bound.

        Args:
            table_name: Target table (trusted identifier)
            rows: Rows as dicts keyed by column name

        Returns:
            Number of inserted rows

        Raises:
            Native driver errors, unmodified
        """
        if not rows:
            return 0

        columns = list(rows[0].keys())
        try:
            inserted = await self._insert_rows(table_name, columns, rows)
        except Exception as e:
            log_with_context(
                adapter_logger,
                'ERROR',
                f"❌ [{self.handle.id}] Error inserting batch into {table_name}: {e}",
                connection_id=self.handle.id,
                table_name=table_name,
                rows=len(rows),
                error_type=type(e).__name__,
            )
            raise

        logger.debug(f"[{self.handle.id}] Inserted {inserted} rows into {table_name}")
        return inserted

    @abstractmethod
    async def _insert_rows(self, table_name: str, columns: List[str], rows: Sequence[Dict[str, Any]]) -> int:
        pass

    def _insert_prefix(self, table_name: str, columns: List[str]) -> str:
        col_names = ', '.join(self.quote_identifier(c) for c in columns)
        return f"INSERT INTO {self.quote_identifier(table_name)} ({col_names}) VALUES "

    def _build_values_insert(
        self,
        table_name: str,
        columns: List[str],
        rows: Sequence[Dict[str, Any]],
        placeholder
    ) -> Tuple[str, List[Any]]:
        """
        Build one multi-row INSERT ... VALUES (...), (...) statement.

        Args:
            placeholder: Callable taking the 1-based parameter index and
                returning its placeholder text

        Returns:
            (sql, flat list of bound values)
        """
        values: List[Any] = []
        row_placeholders = []
        param_index = 1
        for row in rows:
            row_params = []
            for col in columns:
                row_params.append(placeholder(param_index))
                values.append(row.get(col))
                param_index += 1
            row_placeholders.append(f"({', '.join(row_params)})")

        sql = self._insert_prefix(table_name, columns) + ', '.join(row_placeholders)
        return sql, values

    # ==========================================
    # Health
    # ==========================================

    async def health_check(self) -> HealthCheckResult:
        """
        Probe the database. Never raises: failures become an unhealthy result.
        """
        start = time.perf_counter()
        try:
            version, active = await self._probe()
        except Exception as e:
            logger.warning(f"⚠️ [{self.handle.id}] Health check failed: {e}")
            return HealthCheckResult(
                status='unhealthy',
                vendor=self.vendor,
                version='error',
                latency=elapsed_ms(start),
                active_connections=0,
                error=str(e),
            )

        total = self.config.max_pool_size or DEFAULT_MAX_POOL_SIZE
        return HealthCheckResult(
            status='healthy',
            vendor=self.vendor,
            version=version,
            latency=elapsed_ms(start),
            active_connections=active,
            pool_stats=PoolStats(total=total, active=active, idle=max(total - active, 0)),
        )

    @abstractmethod
    async def _probe(self) -> Tuple[str, int]:
        """Return (version banner, active connection count)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the native pool or connection."""
        pass

    # ==========================================
    # Oracle-only operations
    # ==========================================

    def _oracle_only(self, operation: str) -> OracleOnlyOperationRejected:
        return OracleOnlyOperationRejected(operation, self.vendor)

    async def list_packages(self) -> List[PackageInfo]:
        raise self._oracle_only('list_packages')

    async def list_package_procedures(self, package_name: str) -> List[PackageProcedure]:
        raise self._oracle_only('list_package_procedures')

    async def get_source(self, object_name: str, object_type: str) -> str:
        raise self._oracle_only('get_source')

    async def get_compile_errors(self, object_name: str, object_type: str) -> List[CompileError]:
        raise self._oracle_only('get_compile_errors')
