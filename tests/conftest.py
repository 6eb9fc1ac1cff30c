"""
Shared fixtures: SQLite adapters over real temporary files.
"""

import pytest

from dbgateway.adapters import get_adapter

from tests.fakes import make_handle, open_sqlite


@pytest.fixture
def sqlite_source(tmp_path):
    """SQLite adapter over a file holding customers, orders and a view."""
    connection = open_sqlite(tmp_path / 'source.db')
    connection.executescript(
        """
        CREATE TABLE customers (
            id INTEGER PRIMARY KEY,
            name VARCHAR(50) NOT NULL,
            city TEXT
        );
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY,
            customer_id INTEGER REFERENCES customers(id),
            amount REAL
        );
        CREATE VIEW big_orders AS SELECT * FROM orders WHERE amount > 100;
        INSERT INTO customers (id, name, city) VALUES (1, 'Ada', 'London'), (2, 'Grace', 'New York');
        INSERT INTO orders (id, customer_id, amount) VALUES (10, 1, 250.0), (11, 2, 12.5), (12, 1, 99.0);
        """
    )
    adapter = get_adapter(make_handle('sqlite', connection, 'source', database=str(tmp_path / 'source.db')))
    yield adapter
    connection.close()


@pytest.fixture
def sqlite_target(tmp_path):
    """Empty SQLite adapter."""
    connection = open_sqlite(tmp_path / 'target.db')
    adapter = get_adapter(make_handle('sqlite', connection, 'target', database=str(tmp_path / 'target.db')))
    yield adapter
    connection.close()
