from __future__ import annotations

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from attendance_engine.database.session import MySQLSession, MySQLSettings

SETTINGS = MySQLSettings(host="db", port=3306, user="app", password="secret", database="attendance")


class FakeCursor:
    def __init__(self, error=None, rows=None):
        self.error = error
        self.rows = rows or []
        self.executed = []
        self.closed = False

    def execute(self, sql, params):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = self.rolled_back = self.closed = False

    def cursor(self, **kwargs):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


def session_with(cursor):
    connections = []

    def connect(**kwargs):
        conn = FakeConnection(cursor)
        connections.append((kwargs, conn))
        return conn

    return MySQLSession(SETTINGS, connect=connect), connections


def test_insert_if_absent_commits_new_row():
    cursor = FakeCursor()
    session, connections = session_with(cursor)

    assert session.insert_if_absent("INSERT INTO t VALUES(%s)", ["k"]) is True

    kwargs, conn = connections[0]
    assert conn.committed and conn.closed and cursor.closed
    assert cursor.executed == [("INSERT INTO t VALUES(%s)", ("k",))]
    assert kwargs["database"] == "attendance"
    assert kwargs["connection_timeout"] == 10


def test_duplicate_key_means_row_already_present():
    cursor = FakeCursor(error=IntegrityError(msg="Duplicate entry 'k'", errno=errorcode.ER_DUP_ENTRY))
    session, connections = session_with(cursor)

    assert session.insert_if_absent("INSERT INTO t VALUES(%s)", ["k"]) is False

    _, conn = connections[0]
    assert conn.rolled_back and conn.closed
    assert not conn.committed


def test_other_integrity_errors_propagate():
    cursor = FakeCursor(error=IntegrityError(msg="FK violation", errno=errorcode.ER_NO_REFERENCED_ROW_2))
    session, connections = session_with(cursor)

    with pytest.raises(IntegrityError):
        session.insert_if_absent("INSERT INTO t VALUES(%s)", ["k"])
    assert connections[0][1].rolled_back


def test_fetch_helpers_return_dict_rows():
    session, _ = session_with(FakeCursor(rows=[{"username": "alice"}, {"username": "bob"}]))

    assert session.fetch_one("SELECT 1", []) == {"username": "alice"}
    assert session.fetch_all("SELECT 1", []) == [{"username": "alice"}, {"username": "bob"}]


def test_fetch_one_without_rows_is_none():
    session, _ = session_with(FakeCursor())

    assert session.fetch_one("SELECT 1", []) is None
    assert session.fetch_all("SELECT 1", []) == []


def test_settings_from_mapping_defaults():
    settings = MySQLSettings.from_mapping({"host": "db", "user": "app", "password": "pw", "database": "att"})

    assert (settings.port, settings.connect_timeout) == (3306, 10)
    assert MySQLSettings.from_mapping({"database": "att", "port": "3307"}).port == 3307
