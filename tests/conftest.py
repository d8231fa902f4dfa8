"""Shared fixtures: an SQLite demo schema and a scripted MySQL-style connection."""

import sqlite3

import pytest

from schemacrud.facade import DataAccessFacade

SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE orders (
    order_id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL,
    total REAL,
    updated_at TEXT
);

CREATE TABLE logs (
    message TEXT NOT NULL,
    level TEXT DEFAULT 'INFO'
);
"""


class FakeCursor:
    """DB-API cursor replaying results scripted on its FakeMySQLConnection."""

    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self.rowcount = -1
        self.lastrowid = None
        self._rows = []

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params))
        if "INFORMATION_SCHEMA" in sql:
            self.description = (("TABLE_NAME",), ("COLUMN_NAME",), ("COLUMN_KEY",))
            self._rows = list(self.conn.schema_rows)
        elif sql.lstrip().upper().startswith("SELECT"):
            self.description = tuple((name,) for name in self.conn.result_columns)
            self._rows = list(self.conn.result_rows)
        else:
            self.rowcount = self.conn.rowcount
            self.lastrowid = self.conn.lastrowid

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def close(self):
        self.conn.closed_cursors += 1


class FakeMySQLConnection:
    """Records executed statements; schema mirrors the SQLite demo schema."""

    def __init__(self, schema_rows=None):
        self.schema_rows = schema_rows if schema_rows is not None else [
            ("logs", "message", ""),
            ("logs", "level", ""),
            ("users", "id", "PRI"),
            ("users", "name", ""),
            ("users", "email", "UNI"),
            ("users", "created_at", ""),
            ("users", "updated_at", ""),
        ]
        self.result_columns = []
        self.result_rows = []
        self.rowcount = 1
        self.lastrowid = 42
        self.executed = []
        self.opened_cursors = 0
        self.closed_cursors = 0

    def cursor(self):
        self.opened_cursors += 1
        return FakeCursor(self)


class FakePyMySQLConnection(FakeMySQLConnection):
    """Looks like a PyMySQL connection to dialect detection."""

    __module__ = "pymysql.connections"


class FakeMySQLConnectorConnection(FakeMySQLConnection):
    """Looks like a mysql-connector connection to dialect detection."""

    __module__ = "mysql.connector.connection"


@pytest.fixture
def sqlite_conn():
    """In-memory SQLite database with the demo schema."""
    conn = sqlite3.connect(":memory:")
    conn.executescript(SCHEMA)
    yield conn
    conn.close()


@pytest.fixture
def facade(sqlite_conn):
    return DataAccessFacade(sqlite_conn)


@pytest.fixture
def mysql_conn():
    return FakeMySQLConnection()


@pytest.fixture
def mysql_facade(mysql_conn):
    return DataAccessFacade(mysql_conn, dialect="mysql")


@pytest.fixture
def sqlite_db_path(tmp_path):
    """SQLite database file with the demo schema and one user."""
    path = tmp_path / "app.db"
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(SCHEMA)
        conn.execute("INSERT INTO users (name, email) VALUES ('Ann', 'ann@example.com')")
        conn.commit()
    finally:
        conn.close()
    return path
