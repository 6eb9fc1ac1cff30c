"""
Vendor adapters: one uniform async operation surface per database engine.
"""

from typing import Dict, Type

from .base_adapter import VendorAdapter
from .mssql_adapter import SqlServerAdapter
from .mysql_adapter import MySQLAdapter
from .oracle_adapter import OracleAdapter
from .postgres_adapter import PostgreSQLAdapter
from .sqlite_adapter import SQLiteAdapter
from ..exceptions import UnsupportedVendor
from ..models import ConnectionHandle, Vendor

ADAPTERS: Dict[Vendor, Type[VendorAdapter]] = {
    Vendor.ORACLE: OracleAdapter,
    Vendor.POSTGRESQL: PostgreSQLAdapter,
    Vendor.MYSQL: MySQLAdapter,
    Vendor.MARIADB: MySQLAdapter,
    Vendor.SQLSERVER: SqlServerAdapter,
    Vendor.SQLITE: SQLiteAdapter,
}


def get_adapter(handle: ConnectionHandle) -> VendorAdapter:
    """
    Build the adapter for a handle from its vendor tag.

    Raises:
        UnsupportedVendor: If no adapter is registered for the tag
    """
    adapter_class = ADAPTERS.get(handle.vendor)
    if adapter_class is None:
        raise UnsupportedVendor(str(getattr(handle.vendor, 'value', handle.vendor)))
    return adapter_class(handle)


__all__ = [
    'ADAPTERS',
    'VendorAdapter',
    'OracleAdapter',
    'PostgreSQLAdapter',
    'MySQLAdapter',
    'SqlServerAdapter',
    'SQLiteAdapter',
    'get_adapter',
]
