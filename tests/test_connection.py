import psycopg2
import pytest

from lightbnb.core.config import DatabaseSettings
from lightbnb.core.exceptions import DatabaseConnectionError, DatabaseQueryError
from lightbnb.db import connection
from lightbnb.db.connection import PostgresExecutor, to_pyformat


class FakeCursor:
    def __init__(self, rows=None, error=None):
        self.rows = rows
        self.error = error
        self.description = [("id",)] if rows is not None else None
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error:
            raise self.error

    def fetchall(self):
        return self.rows

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False
        self.cursor_factory = None

    def cursor(self, cursor_factory=None):
        self.cursor_factory = cursor_factory
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


@pytest.fixture()
def db_settings(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    return DatabaseSettings(host="db.local", port=5433, name="lightbnb_test", user="tester", password="secret")


@pytest.fixture()
def fake_connect(monkeypatch):
    state = {}

    def install(cursor):
        conn = FakeConnection(cursor)

        def connect(**kwargs):
            state["kwargs"] = kwargs
            return conn

        monkeypatch.setattr(connection.psycopg2, "connect", connect)
        state["conn"] = conn
        return state

    return install


def test_to_pyformat_rewrites_placeholders_in_order():
    sql, args = to_pyformat("SELECT * FROM t WHERE a = $1 AND b < $2 LIMIT $3;", ["x", 2, 3])

    assert sql == "SELECT * FROM t WHERE a = %s AND b < %s LIMIT %s;"
    assert args == ("x", 2, 3)


def test_to_pyformat_follows_occurrence_order():
    sql, args = to_pyformat("SELECT $2, $1, $2", ["a", "b"])

    assert sql == "SELECT %s, %s, %s"
    assert args == ("b", "a", "b")


def test_to_pyformat_escapes_literal_percent():
    sql, args = to_pyformat("SELECT '100%' WHERE x LIKE $1", ["%y%"])

    assert sql == "SELECT '100%%' WHERE x LIKE %s"
    assert args == ("%y%",)


def test_to_pyformat_rejects_missing_param():
    with pytest.raises(DatabaseQueryError):
        to_pyformat("SELECT $1, $2", ["only one"])


def test_executor_returns_rows_and_commits(fake_connect, db_settings):
    cursor = FakeCursor(rows=[{"id": 1}, {"id": 2}])
    state = fake_connect(cursor)

    rows = PostgresExecutor(db_settings).execute("SELECT * FROM users WHERE id = $1;", (1,))

    assert rows == [{"id": 1}, {"id": 2}]
    assert cursor.executed == [("SELECT * FROM users WHERE id = %s;", (1,))]
    assert state["conn"].cursor_factory is connection.RealDictCursor
    assert state["conn"].committed
    assert state["conn"].closed
    assert cursor.closed
    assert state["kwargs"]["host"] == "db.local"
    assert state["kwargs"]["dbname"] == "lightbnb_test"


def test_executor_without_result_set_returns_empty_list(fake_connect, db_settings):
    fake_connect(FakeCursor(rows=None))

    assert PostgresExecutor(db_settings).execute("UPDATE users SET name = $1", ("x",)) == []


def test_executor_wraps_driver_errors(fake_connect, db_settings):
    cursor = FakeCursor(error=psycopg2.ProgrammingError("syntax error"))
    state = fake_connect(cursor)

    with pytest.raises(DatabaseQueryError) as exc_info:
        PostgresExecutor(db_settings).execute("SELEC 1")

    assert "syntax error" in str(exc_info.value)
    assert state["conn"].rolled_back
    assert not state["conn"].committed
    assert state["conn"].closed


def test_connection_failure_is_reported(monkeypatch, db_settings):
    def refuse(**kwargs):
        raise psycopg2.OperationalError("could not connect to server")

    monkeypatch.setattr(connection.psycopg2, "connect", refuse)

    with pytest.raises(DatabaseConnectionError):
        PostgresExecutor(db_settings).execute("SELECT 1")
    assert connection.test_connection(db_settings) is False


def test_connection_check_succeeds(fake_connect, db_settings):
    cursor = FakeCursor(rows=[])
    fake_connect(cursor)

    assert connection.test_connection(db_settings) is True
    assert cursor.executed == [("SELECT 1", None)]


def test_database_url_takes_precedence(fake_connect):
    state = fake_connect(FakeCursor(rows=[]))
    url_settings = DatabaseSettings(database_url="postgresql://u:p@h:5432/lightbnb")

    PostgresExecutor(url_settings).execute("SELECT 1")

    assert state["kwargs"]["dsn"] == "postgresql://u:p@h:5432/lightbnb"
    assert "host" not in state["kwargs"]
