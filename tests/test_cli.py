"""
Tests for the command line entry point, run against SQLite files.
"""

import json
import logging

import pytest

from dbgateway.cli import main, split_argv, to_jsonable
from dbgateway.config import LOGGING
from dbgateway.models import TableInfo, TableType

from tests.fakes import open_sqlite


@pytest.fixture(autouse=True)
def reset_logging():
    """main() installs stderr handlers bound to the captured stream; drop them afterwards."""
    yield
    for name in LOGGING['loggers']:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def database(tmp_path):
    path = tmp_path / 'shop.db'
    connection = open_sqlite(path)
    connection.executescript(
        """
        CREATE TABLE items (id INTEGER PRIMARY KEY, label TEXT);
        INSERT INTO items (id, label) VALUES (1, 'bolt'), (2, 'nut'), (3, 'washer');
        """
    )
    connection.close()
    return f"sqlite:///{path}"


def run(capsys, tmp_path, *argv):
    code = main(['--data-dir', str(tmp_path / 'data'), *argv])
    return code, capsys.readouterr().out


class TestArgumentSplitting:

    def test_connections_options_and_command(self):
        connection_args, command_args, options = split_argv(
            ['--log-level', 'DEBUG', '--shop', 'sqlite:///shop.db', 'query', 'shop', 'SELECT 1']
        )

        assert connection_args == ['--shop', 'sqlite:///shop.db']
        assert command_args == ['query', 'shop', 'SELECT 1']
        assert options == {'log_level': 'DEBUG'}

    def test_json_conversion(self):
        value = to_jsonable([TableInfo(name='items', type=TableType.VIEW), {'tables': {'B', 'A'}}])

        assert value == [
            {'name': 'items', 'schema': None, 'type': 'VIEW'},
            {'tables': ['A', 'B']},
        ]


class TestCommands:

    def test_query_with_row_cap(self, capsys, tmp_path, database):
        code, out = run(capsys, tmp_path, '--shop', database, 'query', 'shop',
                        'SELECT id, label FROM items ORDER BY id', '--max-rows', '2')

        result = json.loads(out)
        assert code == 0
        assert result['rows'] == [{'id': 1, 'label': 'bolt'}, {'id': 2, 'label': 'nut'}]

    def test_inspect_table(self, capsys, tmp_path, database):
        code, out = run(capsys, tmp_path, '--shop', database, 'inspect', 'shop', 'items')

        result = json.loads(out)
        assert result['primary_keys'] == ['id']
        assert [c['name'] for c in result['columns']] == ['id', 'label']

    def test_unknown_connection_exits_non_zero(self, capsys, tmp_path):
        code, out = run(capsys, tmp_path, 'health', 'missing')

        assert code == 1
        assert out == ''

    def test_driver_error_is_logged_and_exits_non_zero(self, capsys, tmp_path):
        corrupt = tmp_path / 'corrupt.db'
        corrupt.write_bytes(b'this is not a database file' * 64)

        code = main(['--data-dir', str(tmp_path / 'data'), '--bad', str(corrupt), 'inspect', 'bad'])

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ''
        assert '❌ DatabaseError' in captured.err
        assert 'Traceback' not in captured.err

    def test_oracle_only_command_on_sqlite_fails_cleanly(self, capsys, tmp_path, database):
        code, _ = run(capsys, tmp_path, '--shop', database, 'packages', 'shop')

        assert code == 1

    def test_save_then_list_then_remove(self, capsys, tmp_path, database):
        code, out = run(capsys, tmp_path, 'save', 'shop', database)
        assert code == 0
        assert json.loads(out)['saved'] is True

        _, out = run(capsys, tmp_path, 'connections')
        assert json.loads(out)[0]['id'] == 'shop'
        assert json.loads(out)[0]['persisted'] is True

        _, out = run(capsys, tmp_path, 'remove', 'shop')
        assert json.loads(out) == {'id': 'shop', 'removed': True}

    def test_replicate_prints_report(self, capsys, tmp_path, database):
        target = f"sqlite:///{tmp_path / 'copy.db'}"

        code, out = run(capsys, tmp_path, '--src', database, '--dst', target, 'replicate', 'src', 'dst')

        assert code == 0
        assert out.splitlines()[0] == 'Processing table: items...'
        assert 'Migrated 3 rows' in out
