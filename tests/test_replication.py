"""
Tests for whole-database replication between SQLite files.
"""

from dbgateway.replication import ReplicationOrchestrator


class PlainCreateTable:
    """DDL generator without IF NOT EXISTS, so existing tables make it fail."""

    def generate_create_table(self, table_name, columns, primary_keys):
        cols = ', '.join(f'"{c.name}" {c.data_type}' for c in columns)
        return f'CREATE TABLE "{table_name}" ({cols})'


class TestReplicateDatabase:

    async def test_views_are_skipped(self, sqlite_source, sqlite_target):
        report = await ReplicationOrchestrator(sqlite_source, sqlite_target).replicate_database()

        text = str(report)
        assert 'big_orders' not in text
        assert report.table_names == ['customers', 'orders']

    async def test_report_lines_per_table(self, sqlite_source, sqlite_target):
        report = await ReplicationOrchestrator(sqlite_source, sqlite_target).replicate_database()

        assert report.lines[0] == 'Processing table: customers...'
        assert report.lines[1] == '  - Created table schema.'
        assert report.lines[2].startswith('  - Migrated 2 rows in ')
        assert report.lines[3] == 'Processing table: orders...'
        assert report.lines[5].startswith('  - Migrated 3 rows in ')
        assert all(entry.succeeded for entry in report.tables)

    async def test_schema_and_data_arrive_on_target(self, sqlite_source, sqlite_target):
        await ReplicationOrchestrator(sqlite_source, sqlite_target).replicate_database()

        assert await sqlite_target.list_primary_keys('customers') == ['id']
        names = await sqlite_target.execute_query('SELECT name FROM customers ORDER BY id')
        assert [row['name'] for row in names.rows] == ['Ada', 'Grace']

    async def test_ddl_failure_is_a_note_and_copy_still_runs(self, sqlite_source, sqlite_target):
        await sqlite_target.execute_query('CREATE TABLE customers (id INTEGER, name TEXT, city TEXT)', None)
        await sqlite_target.execute_query('CREATE TABLE orders (id INTEGER, customer_id INTEGER, amount REAL)', None)

        report = await ReplicationOrchestrator(
            sqlite_source, sqlite_target, schema_ddl=PlainCreateTable()
        ).replicate_database()

        assert report.lines[1].startswith('  - Table creation skipped/failed: ')
        assert 'already exists' in report.lines[1]
        assert report.lines[2].startswith('  - Migrated 2 rows')

    async def test_table_failure_is_recorded_and_loop_continues(self, sqlite_source, sqlite_target):
        orchestrator = ReplicationOrchestrator(sqlite_source, sqlite_target)
        await orchestrator.replicate_database()

        # second run collides with the primary keys copied by the first
        report = await orchestrator.replicate_database()

        errors = [line for line in report.lines if '❌' in line]
        assert len(errors) == 2
        assert errors[0].startswith('  - ❌ Error processing table customers: ')
        assert [entry.status for entry in report.tables] == ['error', 'error']
        assert 'Processing table: orders...' in report.lines
