"""
Tests for the SQLite adapter against real database files.
"""

import sqlite3

import pytest

from dbgateway.exceptions import OracleOnlyOperationRejected, VendorOperationFailure
from dbgateway.models import ForeignKeyEdge, TableType


class TestQueryExecution:

    async def test_select_returns_rows_keyed_by_column(self, sqlite_source):
        result = await sqlite_source.execute_query("SELECT id, name FROM customers ORDER BY id")

        assert result.columns == ['id', 'name']
        assert result.rows == [{'id': 1, 'name': 'Ada'}, {'id': 2, 'name': 'Grace'}]
        assert result.row_count == 2
        assert result.execution_time >= 0

    async def test_row_cap_is_applied(self, sqlite_source):
        result = await sqlite_source.execute_query("SELECT * FROM orders ORDER BY id", 2)

        assert len(result.rows) == 2
        assert [row['id'] for row in result.rows] == [10, 11]

    async def test_uncapped_execution_runs_ddl(self, sqlite_target):
        await sqlite_target.execute_query("CREATE TABLE notes (id INTEGER PRIMARY KEY, body TEXT)", max_rows=None)

        tables = await sqlite_target.list_tables()
        assert [t.name for t in tables] == ['notes']

    async def test_failure_is_wrapped(self, sqlite_source):
        with pytest.raises(VendorOperationFailure) as exc_info:
            await sqlite_source.execute_query("SELECT * FROM missing_table")

        assert exc_info.value.vendor == 'sqlite'
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)


class TestIntrospection:

    async def test_list_tables_includes_views(self, sqlite_source):
        tables = await sqlite_source.list_tables()

        assert [(t.name, t.type) for t in tables] == [
            ('big_orders', TableType.VIEW),
            ('customers', TableType.TABLE),
            ('orders', TableType.TABLE),
        ]

    async def test_describe_table(self, sqlite_source):
        columns = await sqlite_source.describe_table('customers')

        assert [c.name for c in columns] == ['id', 'name', 'city']
        assert columns[0].is_primary_key is True
        assert columns[1].data_type == 'VARCHAR(50)'
        assert columns[1].nullable is False
        assert columns[2].nullable is True

    async def test_primary_and_foreign_keys(self, sqlite_source):
        assert await sqlite_source.list_primary_keys('orders') == ['id']
        assert await sqlite_source.list_foreign_keys('orders') == [
            ForeignKeyEdge(column='customer_id', ref_table='customers', ref_column='id')
        ]


class TestInsertBatch:

    async def test_insert_then_select_round_trip(self, sqlite_source):
        rows = [
            {'id': 3, 'name': 'Linus', 'city': 'Helsinki'},
            {'id': 4, 'name': 'Barbara', 'city': None},
        ]

        inserted = await sqlite_source.insert_batch('customers', rows)
        result = await sqlite_source.execute_query("SELECT id, name, city FROM customers WHERE id > 2 ORDER BY id")

        assert inserted == 2
        assert result.rows == rows

    async def test_empty_batch_is_a_no_op(self, sqlite_source):
        assert await sqlite_source.insert_batch('customers', []) == 0

    async def test_failed_batch_is_rolled_back_and_raised(self, sqlite_source):
        rows = [
            {'id': 5, 'name': 'Ken', 'city': None},
            {'id': 1, 'name': 'Duplicate', 'city': None},
        ]

        with pytest.raises(sqlite3.IntegrityError):
            await sqlite_source.insert_batch('customers', rows)

        result = await sqlite_source.execute_query("SELECT COUNT(*) AS n FROM customers")
        assert result.rows[0]['n'] == 2

    async def test_open_caller_transaction_is_left_alone(self, sqlite_source):
        await sqlite_source.execute_query("BEGIN", None)
        await sqlite_source.execute_query("DELETE FROM orders", None)

        with pytest.raises(sqlite3.OperationalError):
            await sqlite_source.insert_batch('customers', [{'id': 7, 'name': 'Linus', 'city': None}])

        assert sqlite_source.pool.in_transaction
        pending = await sqlite_source.execute_query("SELECT COUNT(*) AS n FROM orders")
        assert pending.rows[0]['n'] == 0

        await sqlite_source.execute_query("ROLLBACK", None)
        restored = await sqlite_source.execute_query("SELECT COUNT(*) AS n FROM orders")
        assert restored.rows[0]['n'] == 3


class TestHealthAndVendorRestrictions:

    async def test_health_check(self, sqlite_source):
        health = await sqlite_source.health_check()

        assert health.is_healthy
        assert health.version.startswith('SQLite ')
        assert health.pool_stats.total == 10
        assert health.pool_stats.idle == 9

    async def test_health_check_never_raises(self, sqlite_source):
        sqlite_source.pool.close()

        health = await sqlite_source.health_check()

        assert health.status == 'unhealthy'
        assert health.version == 'error'
        assert health.error

    @pytest.mark.parametrize('call', [
        lambda a: a.list_packages(),
        lambda a: a.list_package_procedures('PKG'),
        lambda a: a.get_source('PROC', 'PROCEDURE'),
        lambda a: a.get_compile_errors('PROC', 'PROCEDURE'),
    ])
    async def test_oracle_only_operations_are_rejected(self, sqlite_source, call):
        with pytest.raises(OracleOnlyOperationRejected):
            await call(sqlite_source)
