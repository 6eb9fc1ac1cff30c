"""
Tests for the PostgreSQL adapter against a recording asyncpg pool fake.
"""

import pytest

from dbgateway.adapters import PostgreSQLAdapter, get_adapter
from dbgateway.exceptions import VendorOperationFailure
from dbgateway.models import TableType

from tests.fakes import FakeAsyncpgPool, Script, make_handle


@pytest.fixture
def script():
    return Script()


@pytest.fixture
def pool(script):
    return FakeAsyncpgPool(script, execute_status='INSERT 0 2')


@pytest.fixture
def adapter(pool):
    return get_adapter(make_handle('postgresql', pool, schema='public', max_pool_size=5))


class TestPostgresQueries:

    def test_factory_picks_postgres_adapter(self, adapter):
        assert isinstance(adapter, PostgreSQLAdapter)

    async def test_row_cap_appends_limit(self, adapter, script):
        script.on('FROM orders', ['id'], [{'id': 1}, {'id': 2}])

        result = await adapter.execute_query('SELECT id FROM orders', 5)

        assert script.statements[-1] == 'SELECT id FROM orders LIMIT 5'
        assert result.columns == ['id']
        assert result.row_count == 2

    async def test_uncapped_leaves_statement_unchanged(self, adapter, script):
        await adapter.execute_query('CREATE TABLE t (id int)', max_rows=None)

        assert script.statements[-1] == 'CREATE TABLE t (id int)'

    async def test_empty_result_keeps_column_names(self, adapter, pool, script):
        script.on('FROM orders', ['id', 'total'], [])

        result = await adapter.execute_query('SELECT id, total FROM orders')

        assert result.columns == ['id', 'total']
        assert result.rows == []
        assert result.row_count == 0
        assert pool.acquired == pool.released == 1

    async def test_statement_without_result_set_has_no_columns(self, adapter):
        result = await adapter.execute_query('CREATE TABLE t (id int)', None)

        assert result.columns == []
        assert result.rows == []

    async def test_driver_error_is_wrapped(self, adapter, pool, script):
        script.on('broken', [], RuntimeError('syntax error at or near "broken"'))

        with pytest.raises(VendorOperationFailure, match='syntax error'):
            await adapter.execute_query('SELECT broken')

        assert pool.acquired == pool.released == 1


class TestPostgresIntrospection:

    async def test_list_tables_maps_views(self, adapter, script):
        script.on('information_schema.tables', ['table_name', 'table_type'], [
            {'table_name': 'orders', 'table_type': 'BASE TABLE'},
            {'table_name': 'order_totals', 'table_type': 'VIEW'},
        ])

        tables = await adapter.list_tables()

        assert [(t.name, t.type, t.schema) for t in tables] == [
            ('orders', TableType.TABLE, 'public'),
            ('order_totals', TableType.VIEW, 'public'),
        ]
        assert script.calls[-1][1] == ['public']

    async def test_describe_marks_primary_keys(self, adapter, script):
        script.on('information_schema.columns', [], [
            {'column_name': 'id', 'data_type': 'integer', 'is_nullable': 'NO',
             'column_default': None, 'character_maximum_length': None},
            {'column_name': 'note', 'data_type': 'character varying', 'is_nullable': 'YES',
             'column_default': None, 'character_maximum_length': 200},
        ])
        script.on('pg_index', [], [{'attname': 'id'}])

        columns = await adapter.describe_table('orders')

        assert [(c.name, c.is_primary_key, c.nullable) for c in columns] == [
            ('id', True, False),
            ('note', False, True),
        ]
        assert columns[1].max_length == 200

    async def test_primary_key_lookup_uses_quoted_regclass(self, adapter, script):
        await adapter.list_primary_keys('Orders')

        assert script.calls[-1][1] == ['"public"."Orders"']


class TestPostgresInsertAndHealth:

    async def test_insert_uses_numbered_placeholders(self, adapter, script):
        rows = [{'id': 1, 'name': 'a'}, {'id': 2, 'name': 'b'}]

        inserted = await adapter.insert_batch('orders', rows)

        sql, values = script.calls[-1]
        assert sql == 'INSERT INTO "orders" ("id", "name") VALUES ($1, $2), ($3, $4)'
        assert values == [1, 'a', 2, 'b']
        assert inserted == 2

    async def test_health_check(self, adapter):
        health = await adapter.health_check()

        assert health.is_healthy
        assert health.version == 'PostgreSQL 16.2'
        assert health.active_connections == 3
        assert health.pool_stats.total == 5
        assert health.pool_stats.idle == 2

    async def test_health_check_degrades(self, adapter, pool):
        pool.version = ConnectionError('connection refused')

        health = await adapter.health_check()

        assert health.status == 'unhealthy'
        assert 'connection refused' in health.error

    async def test_close_closes_pool(self, adapter, pool):
        await adapter.close()

        assert pool.closed
