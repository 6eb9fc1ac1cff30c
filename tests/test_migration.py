"""
Tests for the MigrationEngine over real SQLite source and target files.
"""

import pytest

from dbgateway.adapters import get_adapter
from dbgateway.migration import MigrationEngine
from dbgateway.models import MigrationResult

from tests.fakes import FakeAsyncpgPool, Script, make_handle


class RecordingTarget:
    """Wraps a target adapter and records every batch handed to insert_batch."""

    def __init__(self, adapter, fail_on_call=None):
        self.adapter = adapter
        self.max_bind_params = adapter.max_bind_params
        self.batches = []
        self.fail_on_call = fail_on_call

    async def insert_batch(self, table_name, rows):
        self.batches.append((table_name, list(rows)))
        if self.fail_on_call == len(self.batches):
            raise RuntimeError('disk full')
        return await self.adapter.insert_batch(table_name, rows)


async def create_target_tables(target):
    await target.execute_query(
        "CREATE TABLE customers (id INTEGER PRIMARY KEY, name VARCHAR(50) NOT NULL, city TEXT)", None
    )
    await target.execute_query(
        "CREATE TABLE orders (id INTEGER PRIMARY KEY, customer_id INTEGER, amount REAL)", None
    )


class TestMigrateTable:

    async def test_copies_every_row(self, sqlite_source, sqlite_target):
        await create_target_tables(sqlite_target)

        result = await MigrationEngine(sqlite_source, sqlite_target).migrate_table('orders')

        copied = await sqlite_target.execute_query("SELECT id, customer_id, amount FROM orders ORDER BY id")
        assert isinstance(result, MigrationResult)
        assert result.rows == 3
        assert copied.rows == [
            {'id': 10, 'customer_id': 1, 'amount': 250.0},
            {'id': 11, 'customer_id': 2, 'amount': 12.5},
            {'id': 12, 'customer_id': 1, 'amount': 99.0},
        ]

    async def test_batches_are_consecutive_slices(self, sqlite_source, sqlite_target):
        await create_target_tables(sqlite_target)
        target = RecordingTarget(sqlite_target)

        result = await MigrationEngine(sqlite_source, target).migrate_table('orders', batch_size=2)

        assert [len(rows) for _, rows in target.batches] == [2, 1]
        assert result.rows == 3

    async def test_target_table_name_can_differ(self, sqlite_source, sqlite_target):
        await sqlite_target.execute_query("CREATE TABLE clients (id INTEGER, name TEXT, city TEXT)", None)

        result = await MigrationEngine(sqlite_source, sqlite_target).migrate_table('customers', 'clients')

        assert result.rows == 2

    async def test_empty_table_returns_zero(self, sqlite_source, sqlite_target):
        await sqlite_source.execute_query("DELETE FROM orders", None)
        target = RecordingTarget(sqlite_target)

        result = await MigrationEngine(sqlite_source, target).migrate_table('orders')

        assert result.rows == 0
        assert target.batches == []

    async def test_failed_batch_aborts_without_undoing_earlier_batches(self, sqlite_source, sqlite_target):
        await create_target_tables(sqlite_target)
        target = RecordingTarget(sqlite_target, fail_on_call=2)

        with pytest.raises(RuntimeError, match='disk full'):
            await MigrationEngine(sqlite_source, target).migrate_table('orders', batch_size=2)

        written = await sqlite_target.execute_query("SELECT COUNT(*) AS n FROM orders")
        assert written.rows[0]['n'] == 2

    async def test_batch_size_must_be_positive(self, sqlite_source, sqlite_target):
        with pytest.raises(ValueError):
            await MigrationEngine(sqlite_source, sqlite_target).migrate_table('orders', batch_size=0)

    async def test_wide_table_batches_fit_postgres_bind_limit(self, sqlite_source):
        names = [f"c{i}" for i in range(40)]
        sqlite_source.pool.execute(f"CREATE TABLE wide ({', '.join(f'{n} INTEGER' for n in names)})")
        sqlite_source.pool.executemany(
            f"INSERT INTO wide VALUES ({', '.join('?' for _ in names)})",
            [[row] * len(names) for row in range(1000)],
        )
        script = Script()
        target = RecordingTarget(get_adapter(make_handle('postgresql', FakeAsyncpgPool(script), schema='public')))

        await MigrationEngine(sqlite_source, target).migrate_table('wide')

        assert [len(rows) for _, rows in target.batches] == [819, 181]
        inserts = [params for sql, params in script.calls if sql.startswith('INSERT INTO')]
        assert len(inserts) == 2
        assert max(len(params) for params in inserts) <= 32767

    async def test_unbounded_target_keeps_requested_batch_size(self, sqlite_source, sqlite_target):
        await create_target_tables(sqlite_target)
        target = RecordingTarget(sqlite_target)

        await MigrationEngine(sqlite_source, target).migrate_table('orders', batch_size=1000)

        assert sqlite_target.max_bind_params is None
        assert [len(rows) for _, rows in target.batches] == [3]


class TestMigrateData:

    async def test_one_failure_does_not_stop_the_others(self, sqlite_source, sqlite_target):
        # only customers exists on the target, so orders fails
        await sqlite_target.execute_query(
            "CREATE TABLE customers (id INTEGER PRIMARY KEY, name VARCHAR(50) NOT NULL, city TEXT)", None
        )

        report = await MigrationEngine(sqlite_source, sqlite_target).migrate_data(['customers', 'orders'])

        assert [entry.table for entry in report] == ['customers', 'orders']
        assert report[0].status == 'success'
        assert report[0].rows == 2
        assert report[1].status == 'error'
        assert report[1].error
        copied = await sqlite_target.execute_query("SELECT COUNT(*) AS n FROM customers")
        assert copied.rows[0]['n'] == 2

    async def test_missing_source_table_is_reported(self, sqlite_source, sqlite_target):
        report = await MigrationEngine(sqlite_source, sqlite_target).migrate_data(['ghost'])

        assert len(report) == 1
        assert report[0].status == 'error'

    async def test_truncate_flag_keeps_existing_rows(self, sqlite_source, sqlite_target):
        await create_target_tables(sqlite_target)
        await sqlite_target.insert_batch('customers', [{'id': 99, 'name': 'Existing', 'city': None}])

        report = await MigrationEngine(sqlite_source, sqlite_target).migrate_data(['customers'], truncate_target=True)

        assert report[0].to_dict() == {
            'table': 'customers',
            'status': 'success',
            'rows': 2,
            'time': report[0].time,
        }
        remaining = await sqlite_target.execute_query("SELECT COUNT(*) AS n FROM customers")
        assert remaining.rows[0]['n'] == 3
