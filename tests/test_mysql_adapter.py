"""
Tests for the MySQL / MariaDB adapter against a recording aiomysql pool fake.
"""

import aiomysql
import pytest

from dbgateway.adapters import MySQLAdapter, get_adapter
from dbgateway.models import TableType

from tests.fakes import FakeAiomysqlPool, Script, make_handle


@pytest.fixture
def script():
    return Script()


@pytest.fixture
def pool(script):
    return FakeAiomysqlPool(script)


@pytest.fixture
def adapter(pool):
    return get_adapter(make_handle('mysql', pool, database='shop'))


class TestMySQLAdapter:

    @pytest.mark.parametrize('vendor', ['mysql', 'mariadb'])
    def test_both_tags_share_the_adapter(self, vendor, pool):
        assert isinstance(get_adapter(make_handle(vendor, pool)), MySQLAdapter)

    async def test_queries_use_dict_cursor_and_limit(self, adapter, pool, script):
        script.on('FROM orders', ['id'], [{'id': 7}])

        result = await adapter.execute_query('SELECT id FROM orders', 10)

        assert script.statements[-1] == 'SELECT id FROM orders LIMIT 10'
        assert pool.connection.cursor_classes[-1] is aiomysql.DictCursor
        assert result.rows == [{'id': 7}]

    async def test_list_tables_reads_show_full_tables(self, adapter, script):
        script.on('SHOW FULL TABLES', ['Tables_in_shop', 'Table_type'], [
            {'Tables_in_shop': 'orders', 'Table_type': 'BASE TABLE'},
            {'Tables_in_shop': 'recent', 'Table_type': 'VIEW'},
        ])

        tables = await adapter.list_tables()

        assert script.statements[-1] == 'SHOW FULL TABLES FROM `shop`'
        assert [(t.name, t.type) for t in tables] == [('orders', TableType.TABLE), ('recent', TableType.VIEW)]

    async def test_list_tables_requires_database(self, pool):
        adapter = get_adapter(make_handle('mysql', pool))

        with pytest.raises(ValueError, match='Database name required'):
            await adapter.list_tables()

    async def test_describe_and_keys(self, adapter, script):
        script.on('DESCRIBE', ['Field', 'Type', 'Null', 'Key', 'Default'], [
            {'Field': 'id', 'Type': 'int', 'Null': 'NO', 'Key': 'PRI', 'Default': None},
            {'Field': 'sku', 'Type': 'varchar(32)', 'Null': 'YES', 'Key': '', 'Default': None},
        ])
        script.on('SHOW KEYS', ['Column_name', 'Seq_in_index'], [
            {'Column_name': 'sku', 'Seq_in_index': 2},
            {'Column_name': 'id', 'Seq_in_index': 1},
        ])

        columns = await adapter.describe_table('orders')
        keys = await adapter.list_primary_keys('orders')

        assert [(c.name, c.data_type, c.is_primary_key) for c in columns] == [
            ('id', 'int', True),
            ('sku', 'varchar(32)', False),
        ]
        assert keys == ['id', 'sku']
        assert 'DESCRIBE `orders`' in script.statements

    async def test_insert_uses_backticks_and_anonymous_placeholders(self, adapter, script):
        inserted = await adapter.insert_batch('orders', [{'id': 1, 'sku': 'A'}, {'id': 2, 'sku': 'B'}])

        sql, values = script.calls[-1]
        assert sql == 'INSERT INTO `orders` (`id`, `sku`) VALUES (%s, %s), (%s, %s)'
        assert values == [1, 'A', 2, 'B']
        assert inserted == 2

    async def test_health_reports_busy_connections(self, adapter, script):
        script.on('VERSION()', ['version'], [{'version': '10.11.6-MariaDB'}])

        health = await adapter.health_check()

        assert health.version == '10.11.6-MariaDB'
        assert health.active_connections == 1

    async def test_close_waits_for_pool(self, adapter, pool):
        await adapter.close()

        assert pool.closed and pool.wait_closed_called
