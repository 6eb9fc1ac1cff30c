"""
Connection handle and vendor tags.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..exceptions import UnsupportedVendor


class Vendor(str, Enum):
    """Supported vendor tags. MySQL and MariaDB share one engine adapter."""
    ORACLE = 'oracle'
    POSTGRESQL = 'postgresql'
    MYSQL = 'mysql'
    MARIADB = 'mariadb'
    SQLSERVER = 'sqlserver'
    SQLITE = 'sqlite'

    @classmethod
    def parse(cls, value: str) -> 'Vendor':
        """
        Resolve a vendor tag.

        Raises:
            UnsupportedVendor: If the tag is not one of the supported vendors
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedVendor(value) from None

    @property
    def is_mysql_family(self) -> bool:
        return self in (Vendor.MYSQL, Vendor.MARIADB)


@dataclass
class ConnectionConfig:
    schema: Optional[str] = None
    database: Optional[str] = None
    max_pool_size: Optional[int] = None


@dataclass
class ConnectionHandle:
    """
    An opened, vendor-tagged reference to a database.

    Attributes:
        id: Registry key
        vendor: Vendor tag used to pick the adapter
        pool: Native pool, connection or embedded database instance
        connection_string: Canonical connection string
        config: Optional schema / database / pool size
    """
    id: str
    vendor: Vendor
    pool: Any
    connection_string: str
    config: ConnectionConfig = field(default_factory=ConnectionConfig)

    def __str__(self) -> str:
        return f"ConnectionHandle({self.id}, {self.vendor.value})"
