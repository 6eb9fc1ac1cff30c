"""
Event-emitting request over a pymssql connection.

A request emits 'columnMetadata', then one 'row' per result row (or a
'rowCount' for statements without a result set), then exactly one terminal
event: 'requestCompleted' or 'error'. The blocking cursor is drained on an
executor thread; every event is delivered on the event loop thread, in order.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

COLUMN_METADATA = 'columnMetadata'
ROW = 'row'
ROW_COUNT = 'rowCount'
REQUEST_COMPLETED = 'requestCompleted'
ERROR = 'error'


class SqlServerRequest:
    """
    One statement against a SQL Server connection.

    Register every listener with on() before calling query() or
    execute_many(); events emitted before a listener exists are lost.
    """

    def __init__(self, connection, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.connection = connection
        self.loop = loop or asyncio.get_running_loop()
        self._listeners: Dict[str, List[Callable]] = defaultdict(list)
        self._started = False

    def on(self, event: str, callback: Callable) -> 'SqlServerRequest':
        self._listeners[event].append(callback)
        return self

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> asyncio.Future:
        """Issue a statement and stream its result set through events."""
        return self._start(self._drain_query, sql, params)

    def execute_many(self, sql: str, param_rows: Sequence[Sequence[Any]]) -> asyncio.Future:
        """Execute a statement once per parameter row; emits a single 'rowCount'."""
        return self._start(self._drain_many, sql, param_rows)

    def _start(self, target, *args) -> asyncio.Future:
        if self._started:
            raise RuntimeError('A SqlServerRequest can only be issued once')
        self._started = True
        logger.debug(f"SQL Server request issued: {str(args[0])[:100]}")
        return self.loop.run_in_executor(None, target, *args)

    # Executor thread side

    def _emit(self, event: str, payload: Any = None) -> None:
        self.loop.call_soon_threadsafe(self._dispatch, event, payload)

    def _drain_query(self, sql: str, params: Optional[Sequence[Any]]) -> None:
        cursor = None
        try:
            cursor = self.connection.cursor()
            if params:
                cursor.execute(sql, tuple(params))
            else:
                cursor.execute(sql)

            if cursor.description is None:
                self._emit(ROW_COUNT, cursor.rowcount)
            else:
                self._emit(COLUMN_METADATA, [col[0] for col in cursor.description])
                row = cursor.fetchone()
                while row is not None:
                    self._emit(ROW, row)
                    row = cursor.fetchone()
            self._emit(REQUEST_COMPLETED)
        except Exception as e:  # forwarded as the terminal event
            self._emit(ERROR, e)
        finally:
            if cursor is not None:
                cursor.close()

    def _drain_many(self, sql: str, param_rows: Sequence[Sequence[Any]]) -> None:
        cursor = None
        try:
            cursor = self.connection.cursor()
            cursor.executemany(sql, [tuple(p) for p in param_rows])
            self._emit(ROW_COUNT, cursor.rowcount)
            self._emit(REQUEST_COMPLETED)
        except Exception as e:  # forwarded as the terminal event
            self._emit(ERROR, e)
        finally:
            if cursor is not None:
                cursor.close()

    # Event loop side

    def _dispatch(self, event: str, payload: Any) -> None:
        for callback in self._listeners.get(event, []):
            if payload is None:
                callback()
            else:
                callback(payload)
