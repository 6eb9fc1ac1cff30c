"""
Target database adapters for DDL generation.
"""

from typing import Dict, Optional, Type

from .base_adapter import BaseTargetAdapter
from .mssql_adapter import SqlServerTargetAdapter
from .mysql_adapter import MySQLTargetAdapter
from .oracle_adapter import OracleTargetAdapter
from .postgres_adapter import PostgreSQLTargetAdapter
from .sqlite_adapter import SQLiteTargetAdapter
from ...models import Vendor

TARGET_ADAPTERS: Dict[Vendor, Type[BaseTargetAdapter]] = {
    Vendor.ORACLE: OracleTargetAdapter,
    Vendor.POSTGRESQL: PostgreSQLTargetAdapter,
    Vendor.MYSQL: MySQLTargetAdapter,
    Vendor.SQLSERVER: SqlServerTargetAdapter,
    Vendor.SQLITE: SQLiteTargetAdapter,
}


def get_target_adapter(vendor: Vendor, schema: Optional[str] = None) -> BaseTargetAdapter:
    """DDL adapter for a vendor; unknown vendors get the generic ANSI dialect."""
    if isinstance(vendor, Vendor) and vendor.is_mysql_family:
        vendor = Vendor.MYSQL
    adapter_class = TARGET_ADAPTERS.get(vendor, BaseTargetAdapter)
    return adapter_class(schema)


__all__ = [
    'BaseTargetAdapter',
    'MySQLTargetAdapter',
    'OracleTargetAdapter',
    'PostgreSQLTargetAdapter',
    'SQLiteTargetAdapter',
    'SqlServerTargetAdapter',
    'TARGET_ADAPTERS',
    'get_target_adapter',
]
