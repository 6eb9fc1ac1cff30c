"""
Oracle adapter.

Every call leases a connection from the python-oracledb async pool and
returns it on every exit path. Row caps are passed to the driver as the
fetch size instead of being appended to the statement.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .base_adapter import VendorAdapter
from ..models import (
    ColumnInfo,
    CompileError,
    ForeignKeyEdge,
    PackageInfo,
    PackageProcedure,
    QueryResult,
    TableInfo,
    TableType,
)

logger = logging.getLogger(__name__)

Binds = Union[Dict[str, Any], Sequence[Any]]

# Built-in service accounts never listed by the all-schemas fallback
ORACLE_SYSTEM_SCHEMAS = (
    'SYS', 'SYSTEM', 'OUTLN', 'DIP', 'ORACLE_OCM', 'DBSNMP', 'APPQOSSYS',
    'WMSYS', 'EXFSYS', 'CTXSYS', 'XDB', 'ANONYMOUS', 'ORDSYS', 'ORDDATA',
    'MDSYS', 'LBACSYS', 'DVSYS', 'DVF', 'GSMADMIN_INTERNAL', 'OJVMSYS', 'OLAPSYS',
)

SOURCE_MAX_LINES = 10000


class OracleAdapter(VendorAdapter):
    """Oracle-specific execution and catalog introspection."""

    @asynccontextmanager
    async def _lease(self):
        """Lease a pooled connection; always handed back, including on error."""
        connection = await self.pool.acquire()
        try:
            yield connection
        finally:
            await connection.close()

    async def _fetch(self, sql: str, binds: Optional[Binds] = None, max_rows: Optional[int] = None) -> QueryResult:
        """
        Run a statement on a leased connection.

        Args:
            sql: Statement text
            binds: Named (dict) or positional (sequence) bind values
            max_rows: Fetch at most this many rows; None fetches all
        """
        async with self._lease() as connection:
            with connection.cursor() as cursor:
                await cursor.execute(sql, binds if binds is not None else [])

                if cursor.description is None:
                    # DDL / DML: no result set
                    return QueryResult(columns=[], rows=[], row_count=cursor.rowcount or 0)

                columns = [col[0] for col in cursor.description]
                cursor.rowfactory = lambda *values: dict(zip(columns, values))
                if max_rows is None:
                    rows = await cursor.fetchall()
                else:
                    rows = await cursor.fetchmany(max_rows)

        return QueryResult(columns=columns, rows=list(rows), row_count=len(rows))

    async def _execute_query(self, sql: str, max_rows: Optional[int]) -> QueryResult:
        return await self._fetch(sql, [], max_rows)

    # ==========================================
    # Introspection
    # ==========================================

    async def list_tables(self) -> List[TableInfo]:
        """
        List tables with a three-tier fallback:

        1. Tables owned by the configured schema (or the current user)
        2. If none, resolve the session's CURRENT_SCHEMA
        3. If the requested schema is the current one (or none was
           requested), list tables across every accessible non-system schema
        """
        schema = self.config.schema
        if schema:
            sql = """
                SELECT table_name, owner, num_rows, last_analyzed
                FROM all_tables
                WHERE owner = :schema
                ORDER BY table_name
            """
            binds: Binds = {'schema': schema.upper()}
        else:
            sql = """
                SELECT table_name, USER AS owner, num_rows, last_analyzed
                FROM user_tables
                ORDER BY table_name
            """
            binds = []

        logger.debug(f"🔍 Oracle schema: {schema or 'USER (current user)'}")
        result = await self._fetch(sql, binds)
        logger.info(f"✓ Oracle tables found: {result.row_count}")

        if result.row_count == 0:
            current = await self._fetch(
                "SELECT SYS_CONTEXT('USERENV', 'CURRENT_SCHEMA') AS current_schema FROM DUAL"
            )
            current_schema = current.rows[0].get('CURRENT_SCHEMA') if current.rows else None
            logger.info(f"ℹ️  Current session schema: {current_schema}")
            logger.warning("⚠️  No tables found in the requested schema")

            if not schema or schema.upper() == current_schema:
                logger.info("🔎 Searching every accessible schema...")
                result = await self._list_all_schema_tables()
                logger.info(f"✓ Tables found across all schemas: {result.row_count}")

        return [
            TableInfo(name=row['TABLE_NAME'], schema=row.get('OWNER'), type=TableType.TABLE)
            for row in result.rows
        ]

    async def _list_all_schema_tables(self) -> QueryResult:
        placeholders = ', '.join(f":{i + 1}" for i in range(len(ORACLE_SYSTEM_SCHEMAS)))
        sql = f"""
            SELECT table_name, owner, num_rows, last_analyzed
            FROM all_tables
            WHERE owner IN (
                SELECT username FROM all_users
                WHERE username NOT IN ({placeholders})
            )
            ORDER BY owner, table_name
        """
        return await self._fetch(sql, list(ORACLE_SYSTEM_SCHEMAS))

    def _scoped(self, schema_sql: str, user_sql: str, table_name: str) -> Tuple[str, Dict[str, Any]]:
        """Pick the ALL_* (schema-qualified) or USER_* variant of a catalog query."""
        schema = self.config.schema
        if schema:
            return schema_sql, {'table_name': table_name, 'schema': schema.upper()}
        return user_sql, {'table_name': table_name}

    async def describe_table(self, table_name: str) -> List[ColumnInfo]:
        sql, binds = self._scoped(
            """
            SELECT column_name, data_type, nullable, data_default, data_length
            FROM all_tab_columns
            WHERE table_name = :table_name AND owner = :schema
            ORDER BY column_id
            """,
            """
            SELECT column_name, data_type, nullable, data_default, data_length
            FROM user_tab_columns
            WHERE table_name = :table_name
            ORDER BY column_id
            """,
            table_name,
        )
        result = await self._fetch(sql, binds)
        columns = [
            ColumnInfo(
                name=row['COLUMN_NAME'],
                data_type=row['DATA_TYPE'],
                nullable=row['NULLABLE'] == 'Y',
                default_value=row.get('DATA_DEFAULT'),
                max_length=row.get('DATA_LENGTH'),
            )
            for row in result.rows
        ]
        return await self._mark_primary_keys(table_name, columns)

    async def list_primary_keys(self, table_name: str) -> List[str]:
        sql, binds = self._scoped(
            """
            SELECT cols.column_name
            FROM all_constraints cons
            JOIN all_cons_columns cols
              ON cons.constraint_name = cols.constraint_name AND cons.owner = cols.owner
            WHERE cons.constraint_type = 'P'
              AND cons.table_name = :table_name
              AND cons.owner = :schema
            ORDER BY cols.position
            """,
            """
            SELECT cols.column_name
            FROM user_constraints cons
            JOIN user_cons_columns cols ON cons.constraint_name = cols.constraint_name
            WHERE cons.constraint_type = 'P'
              AND cons.table_name = :table_name
            ORDER BY cols.position
            """,
            table_name,
        )
        result = await self._fetch(sql, binds)
        return [row['COLUMN_NAME'] for row in result.rows]

    async def list_foreign_keys(self, table_name: str) -> List[ForeignKeyEdge]:
        sql, binds = self._scoped(
            """
            SELECT a.column_name, c_pk.table_name AS r_table_name, b.column_name AS r_column_name
            FROM all_cons_columns a
            JOIN all_constraints c ON a.owner = c.owner AND a.constraint_name = c.constraint_name
            JOIN all_constraints c_pk ON c.r_owner = c_pk.owner AND c.r_constraint_name = c_pk.constraint_name
            JOIN all_cons_columns b
              ON c_pk.owner = b.owner AND c_pk.constraint_name = b.constraint_name AND b.position = a.position
            WHERE c.constraint_type = 'R'
              AND a.table_name = :table_name
              AND a.owner = :schema
            ORDER BY c.constraint_name, a.position
            """,
            """
            SELECT a.column_name, c_pk.table_name AS r_table_name, b.column_name AS r_column_name
            FROM user_cons_columns a
            JOIN user_constraints c ON a.constraint_name = c.constraint_name
            JOIN user_constraints c_pk ON c.r_constraint_name = c_pk.constraint_name
            JOIN user_cons_columns b ON c_pk.constraint_name = b.constraint_name AND b.position = a.position
            WHERE c.constraint_type = 'R'
              AND a.table_name = :table_name
            ORDER BY c.constraint_name, a.position
            """,
            table_name,
        )
        result = await self._fetch(sql, binds)
        return [
            ForeignKeyEdge(column=row['COLUMN_NAME'], ref_table=row['R_TABLE_NAME'], ref_column=row['R_COLUMN_NAME'])
            for row in result.rows
        ]

    # ==========================================
    # Bulk insert
    # ==========================================

    async def _insert_rows(self, table_name: str, columns: List[str], rows: Sequence[Dict[str, Any]]) -> int:
        """One executemany round trip with positional binds, autocommitted."""
        placeholders = ', '.join(f":{i + 1}" for i in range(len(columns)))
        sql = self._insert_prefix(table_name, columns) + f"({placeholders})"
        binds = [[row.get(col) for col in columns] for row in rows]

        async with self._lease() as connection:
            connection.autocommit = True
            with connection.cursor() as cursor:
                await cursor.executemany(sql, binds)
                return cursor.rowcount or len(rows)

    # ==========================================
    # Health
    # ==========================================

    async def _probe(self) -> Tuple[str, int]:
        result = await self._fetch("SELECT banner FROM v$version WHERE banner LIKE 'Oracle%'", [], 1)
        version = result.rows[0]['BANNER'] if result.rows else 'unknown'
        return version, getattr(self.pool, 'busy', 0) or 0

    async def close(self) -> None:
        await self.pool.close()

    # ==========================================
    # Oracle-only operations
    # ==========================================

    async def list_packages(self) -> List[PackageInfo]:
        """List packages and package bodies in the current schema."""
        sql = """
            SELECT object_name AS name, object_type AS type, status
            FROM user_objects
            WHERE object_type IN ('PACKAGE', 'PACKAGE BODY')
            ORDER BY object_name, object_type
        """
        result = await self._fetch(sql, [], 1000)
        return [PackageInfo(name=row['NAME'], type=row['TYPE'], status=row['STATUS']) for row in result.rows]

    async def list_package_procedures(self, package_name: str) -> List[PackageProcedure]:
        """
        List procedures and functions of a package.

        The package name is upper-cased before lookup; overloads come back
        ordered by their overload index.
        """
        sql = """
            SELECT p.procedure_name AS proc_name, p.object_type AS type, p.overload AS overload, o.status AS status
            FROM user_procedures p
            LEFT JOIN user_objects o
              ON p.procedure_name = o.object_name AND p.object_type = o.object_type
            WHERE p.object_name = :package_name
              AND p.procedure_name IS NOT NULL
            ORDER BY p.procedure_name, p.overload
        """
        result = await self._fetch(sql, {'package_name': package_name.upper()}, 1000)
        return [
            PackageProcedure(
                name=row['PROC_NAME'],
                type=row['TYPE'],
                overload=row.get('OVERLOAD') or None,
                status=row.get('STATUS') or 'UNKNOWN',
            )
            for row in result.rows
            if row.get('PROC_NAME')
        ]

    async def get_source(self, object_name: str, object_type: str) -> str:
        """Full source of a package, procedure or function, ordered by line."""
        sql = """
            SELECT text
            FROM user_source
            WHERE name = :object_name
              AND type = :object_type
            ORDER BY line
        """
        binds = {'object_name': object_name.upper(), 'object_type': object_type.upper()}
        result = await self._fetch(sql, binds, SOURCE_MAX_LINES)
        return ''.join(row['TEXT'] or '' for row in result.rows)

    async def get_compile_errors(self, object_name: str, object_type: str) -> List[CompileError]:
        """Compiler diagnostics recorded for an object, in sequence order."""
        sql = """
            SELECT line, position, text, attribute
            FROM user_errors
            WHERE name = :object_name
              AND type = :object_type
            ORDER BY sequence
        """
        binds = {'object_name': object_name.upper(), 'object_type': object_type.upper()}
        result = await self._fetch(sql, binds, 100)
        return [
            CompileError(line=row['LINE'], position=row['POSITION'], text=row['TEXT'], attribute=row['ATTRIBUTE'])
            for row in result.rows
        ]
