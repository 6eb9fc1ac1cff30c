"""
Data values shared by adapters, migration and replication.
"""

from .connection import ConnectionConfig, ConnectionHandle, Vendor
from .results import (
    ColumnInfo,
    CompileError,
    ForeignKeyEdge,
    HealthCheckResult,
    PackageInfo,
    PackageProcedure,
    PoolStats,
    ProcedureBlock,
    QueryResult,
    TableInfo,
    TableType,
    TableUsage,
)
from .migration import MigrationReportEntry, MigrationResult, ReplicationReport

__all__ = [
    'ConnectionConfig',
    'ConnectionHandle',
    'Vendor',
    'ColumnInfo',
    'CompileError',
    'ForeignKeyEdge',
    'HealthCheckResult',
    'PackageInfo',
    'PackageProcedure',
    'PoolStats',
    'ProcedureBlock',
    'QueryResult',
    'TableInfo',
    'TableType',
    'TableUsage',
    'MigrationReportEntry',
    'MigrationResult',
    'ReplicationReport',
]
