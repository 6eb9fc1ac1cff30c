"""
Connection registry: the single owner of every opened ConnectionHandle.

Handles are added at startup (command-line pairs and the on-disk store) or
through save(), and leave through remove() or close_all(), which release
the native pool. Mutation is not locked; callers serialize it.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .loader import create_connection, parse_connection_args
from .store import ConnectionStore
from ..adapters import get_adapter
from ..exceptions import ConnectionNotFound
from ..logging_utils import connection_logger, log_with_context
from ..models import ConnectionHandle

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """
    Registry of opened connections, keyed by id.

    Usage:
        registry = ConnectionRegistry(ConnectionStore(data_dir))
        await registry.load(sys.argv[1:])
        handle = registry.lookup('warehouse')
    """

    def __init__(self, store: Optional[ConnectionStore] = None):
        self.store = store
        self._handles: Dict[str, ConnectionHandle] = {}

    async def load(self, argv: Sequence[str] = ()) -> List[ConnectionHandle]:
        """
        Open command-line connections, then stored ones.

        A stored connection whose id was already given on the command line
        is not opened. Failures are logged and skipped.

        Returns:
            Handles opened by this call
        """
        opened: List[ConnectionHandle] = []

        for connection_id, uri in parse_connection_args(argv):
            handle = await self._try_open(connection_id, uri, source='cli')
            if handle is not None:
                opened.append(handle)

        if self.store is not None:
            for stored in self.store.get_connections():
                if stored.id in self._handles:
                    continue
                handle = await self._try_open(stored.id, stored.connection_string, source='store')
                if handle is not None:
                    opened.append(handle)

        logger.info(f"✓ Loaded {len(opened)} connection(s)")
        return opened

    async def _try_open(self, connection_id: str, uri: str, source: str) -> Optional[ConnectionHandle]:
        logger.info(f"Attempting to connect to {connection_id}...")
        try:
            handle = await create_connection(connection_id, uri)
        except Exception as e:
            log_with_context(
                connection_logger,
                'ERROR',
                f"❌ Failed to connect to '{connection_id}': {e}",
                connection_id=connection_id,
                origin=source,
                error_type=type(e).__name__,
            )
            return None
        await self.register(handle)
        return handle

    def lookup(self, connection_id: str) -> ConnectionHandle:
        """
        Raises:
            ConnectionNotFound: If no handle is registered under the id
        """
        handle = self._handles.get(connection_id)
        if handle is None:
            raise ConnectionNotFound(connection_id)
        return handle

    async def register(self, handle: ConnectionHandle) -> None:
        """Add a handle, closing any handle it replaces."""
        previous = self._handles.get(handle.id)
        self._handles[handle.id] = handle
        if previous is not None and previous is not handle:
            await self._release(previous)

    async def save(self, connection_id: str, uri: str) -> ConnectionHandle:
        """
        Open a connection, persist it and make it the active handle for its id.

        The connection is opened before anything is stored, so an unreachable
        database is never saved.
        """
        handle = await create_connection(connection_id, uri)
        if self.store is not None:
            self.store.save_connection(connection_id, handle.vendor.value, uri)
        await self.register(handle)
        return handle

    async def remove(self, connection_id: str) -> bool:
        """
        Forget a connection: delete it from the store and close its pool.

        Returns:
            True if the id was registered or stored
        """
        removed = False
        if self.store is not None:
            removed = self.store.remove_connection(connection_id)

        handle = self._handles.pop(connection_id, None)
        if handle is not None:
            await self._release(handle)
            removed = True
        return removed

    def list(self) -> List[ConnectionHandle]:
        return list(self._handles.values())

    def is_persisted(self, connection_id: str) -> bool:
        return self.store is not None and self.store.has_connection(connection_id)

    async def close_all(self) -> None:
        handles = list(self._handles.values())
        self._handles.clear()
        for handle in handles:
            await self._release(handle)

    async def _release(self, handle: ConnectionHandle) -> None:
        try:
            await get_adapter(handle).close()
            logger.info(f"✓ Closed {handle.id}")
        except Exception as e:
            logger.warning(f"⚠️ Error closing {handle.id}: {e}")
