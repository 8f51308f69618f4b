"""
Pytest configuration and fixtures for sqlbridge tests.
"""
from unittest import mock

import pytest
from keyring.errors import PasswordDeleteError

from sqlbridge.database.connection import DbConn
from sqlbridge.database.engines.clickhouse import ClickHouseMeta
from sqlbridge.database.models import ConnectionInfo
from sqlbridge.database.registry import create_registry


class FakeCursor:
    """DB-API cursor answering from canned responses keyed by SQL substring."""

    def __init__(self, connection):
        self.connection = connection
        self.description = None
        self.rowcount = -1
        self._rows = []

    def execute(self, sql, params=None):
        self.connection.executed.append((sql, params))
        for fragment, response in self.connection.responses.items():
            if fragment in sql:
                if isinstance(response, Exception):
                    raise response
                columns, rows = response
                self.description = [(name, None, None, None, None, None, None) for name in columns]
                self._rows = list(rows)
                self.rowcount = len(self._rows)
                return
        self.description = None
        self._rows = []
        self.rowcount = -1

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def fetchmany(self, size):
        self.connection.fetch_sizes.append(size)
        rows, self._rows = self._rows[:size], self._rows[size:]
        return rows

    def close(self):
        pass


class FakeConnection:
    """DB-API connection recording every statement it receives."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.executed = []
        self.fetch_sizes = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


@pytest.fixture
def registry():
    """Fresh registry with the built-in engines."""
    return create_registry()


@pytest.fixture
def sqlite_conn(registry):
    """In-memory SQLite connection."""
    info = ConnectionInfo(name="test", db_type="sqlite")
    conn = registry.get_meta("sqlite").connect(info)
    yield conn
    conn.close()


@pytest.fixture
def clickhouse_conn_factory():
    """Build a ClickHouse DbConn over a FakeConnection with the given responses."""
    def factory(responses=None, database=""):
        info = ConnectionInfo(name="ch-test", db_type="clickhouse", host="localhost", database=database)
        return DbConn(info, FakeConnection(responses), ClickHouseMeta())
    return factory


@pytest.fixture
def fake_keyring():
    """Replace the keyring module used by PasswordStore with a dict-backed fake."""
    store = {}

    def set_password(service, key, value):
        store[(service, key)] = value

    def get_password(service, key):
        return store.get((service, key))

    def delete_password(service, key):
        if (service, key) not in store:
            raise PasswordDeleteError("not found")
        del store[(service, key)]

    with mock.patch("sqlbridge.utils.password_store.keyring") as keyring_mock:
        keyring_mock.set_password.side_effect = set_password
        keyring_mock.get_password.side_effect = get_password
        keyring_mock.delete_password.side_effect = delete_password
        keyring_mock.store = store
        yield keyring_mock
