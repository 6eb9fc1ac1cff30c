"""
dbgateway - one asynchronous operation surface over Oracle, PostgreSQL,
MySQL/MariaDB, SQL Server and SQLite, with table migration and
whole-database replication on top.
"""

from .adapters import VendorAdapter, get_adapter
from .connections import ConnectionRegistry, ConnectionStore, create_connection
from .ddl import SchemaCompareService
from .exceptions import (
    ConnectionNotFound,
    GatewayError,
    IdentifierInjectionRisk,
    OracleOnlyOperationRejected,
    ParameterLimitExceeded,
    UnsupportedVendor,
    VendorOperationFailure,
)
from .migration import MigrationEngine
from .models import ConnectionConfig, ConnectionHandle, Vendor
from .replication import ReplicationOrchestrator

__version__ = '0.1.0'

__all__ = [
    'VendorAdapter',
    'get_adapter',
    'ConnectionRegistry',
    'ConnectionStore',
    'create_connection',
    'SchemaCompareService',
    'MigrationEngine',
    'ReplicationOrchestrator',
    'ConnectionConfig',
    'ConnectionHandle',
    'Vendor',
    'GatewayError',
    'ConnectionNotFound',
    'UnsupportedVendor',
    'VendorOperationFailure',
    'OracleOnlyOperationRejected',
    'ParameterLimitExceeded',
    'IdentifierInjectionRisk',
]
