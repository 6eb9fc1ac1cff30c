"""
Opening, registering and persisting database connections.
"""

from .loader import create_connection, parse_connection_args, parse_uri
from .registry import ConnectionRegistry
from .store import ConnectionStore, StoredConnection

__all__ = [
    'ConnectionRegistry',
    'ConnectionStore',
    'StoredConnection',
    'create_connection',
    'parse_connection_args',
    'parse_uri',
]
