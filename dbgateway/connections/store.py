"""
On-disk persistence of saved connections.

Connections live in <data_dir>/.dbgateway/storage.db. When an encryption
key is configured the connection string is stored as a Fernet token.
"""

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..encryption import decrypt_secret, encrypt_secret
from ..logging_utils import connection_logger, log_operation

logger = logging.getLogger(__name__)

STORE_DIR = '.dbgateway'
STORE_FILE = 'storage.db'

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS connections (
    id TEXT PRIMARY KEY,
    vendor TEXT NOT NULL,
    connection_string TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);
"""


@dataclass
class StoredConnection:
    id: str
    vendor: str
    connection_string: str
    created_at: Optional[str] = None


class ConnectionStore:
    """SQLite-backed table of saved connections, keyed by id."""

    def __init__(self, data_dir: str, encryption_key: Optional[str] = None):
        """
        Open (and create if needed) the store under data_dir.

        Args:
            data_dir: Directory the .dbgateway folder is created in
            encryption_key: Fernet passphrase; None stores plaintext
        """
        self.db_path = Path(data_dir) / STORE_DIR / STORE_FILE
        self.encryption_key = encryption_key

        with log_operation(connection_logger, 'store_open', db_path=str(self.db_path)):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA_SQL)
            self._conn.commit()

    def _encode(self, value: str) -> str:
        if self.encryption_key:
            return encrypt_secret(value, self.encryption_key)
        return value

    def _decode(self, value: str) -> str:
        if self.encryption_key:
            return decrypt_secret(value, self.encryption_key)
        return value

    def save_connection(self, connection_id: str, vendor: str, connection_string: str) -> None:
        """Insert or replace a connection record."""
        with self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO connections (id, vendor, connection_string) VALUES (?, ?, ?)",
                (connection_id, vendor, self._encode(connection_string)),
            )
        logger.info(f"✓ Saved connection {connection_id} ({vendor})")

    def get_connections(self) -> List[StoredConnection]:
        rows = self._conn.execute(
            "SELECT id, vendor, connection_string, created_at FROM connections ORDER BY id"
        ).fetchall()
        return [
            StoredConnection(
                id=row['id'],
                vendor=row['vendor'],
                connection_string=self._decode(row['connection_string']),
                created_at=row['created_at'],
            )
            for row in rows
        ]

    def has_connection(self, connection_id: str) -> bool:
        row = self._conn.execute("SELECT 1 FROM connections WHERE id = ?", (connection_id,)).fetchone()
        return row is not None

    def remove_connection(self, connection_id: str) -> bool:
        """
        Delete a connection record.

        Returns:
            True if a record was deleted
        """
        with self._conn:
            cursor = self._conn.execute("DELETE FROM connections WHERE id = ?", (connection_id,))
        return cursor.rowcount > 0

    def close(self) -> None:
        self._conn.close()
