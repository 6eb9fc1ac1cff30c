"""
Schema comparison and DDL generation across vendors.

Targets:
- PostgreSQL, MySQL/MariaDB, Oracle, SQL Server, SQLite
- generic ANSI for anything else
"""

from .adapters import (
    BaseTargetAdapter,
    MySQLTargetAdapter,
    OracleTargetAdapter,
    PostgreSQLTargetAdapter,
    SQLiteTargetAdapter,
    SqlServerTargetAdapter,
    get_target_adapter,
)
from .operations import DDLOperation, DDLOperationType, SchemaDiff
from .schema_compare import SchemaCompareService

__all__ = [
    'DDLOperation',
    'DDLOperationType',
    'SchemaDiff',
    'SchemaCompareService',
    'BaseTargetAdapter',
    'MySQLTargetAdapter',
    'OracleTargetAdapter',
    'PostgreSQLTargetAdapter',
    'SQLiteTargetAdapter',
    'SqlServerTargetAdapter',
    'get_target_adapter',
]
