"""Tests for the SQLite and MySQL introspection routines."""

import sqlite3

from schemacrud.metadata import MetadataStore, SQLITE_ROW_ID, introspect_mysql, introspect_sqlite

from conftest import FakeMySQLConnection


class TestSQLiteIntrospection:
    """Tests for introspect_sqlite against an in-memory database."""

    def test_registers_every_user_table(self, sqlite_conn):
        store = MetadataStore()
        tables = introspect_sqlite(sqlite_conn, store)

        # AUTOINCREMENT creates sqlite_sequence, which is skipped
        assert sorted(tables) == ["logs", "orders", "users"]
        assert sorted(store.get_tables()) == ["logs", "orders", "users"]

    def test_primary_key_and_columns(self, sqlite_conn):
        store = MetadataStore()
        introspect_sqlite(sqlite_conn, store)

        assert store.get_primary_key("users") == "id"
        assert store.get_columns("users") == ["name", "email", "created_at", "updated_at"]
        assert store.get_primary_key("orders") == "order_id"

    def test_timestamps_start_absent(self, sqlite_conn):
        store = MetadataStore()
        introspect_sqlite(sqlite_conn, store)

        for table in store.get_tables():
            assert store.get_on_insert(table) is None
            assert store.get_on_update(table) is None

    def test_rowid_for_table_without_primary_key(self, sqlite_conn):
        store = MetadataStore()
        introspect_sqlite(sqlite_conn, store)

        assert store.get_primary_key("logs") == SQLITE_ROW_ID == "rowid"
        assert store.get_columns("logs") == ["message", "level"]

    def test_composite_key_keeps_first_member(self):
        conn = sqlite3.connect(":memory:")
        conn.execute(
            "CREATE TABLE memberships (user_id INTEGER, group_id INTEGER, role TEXT, "
            "PRIMARY KEY (user_id, group_id))"
        )
        store = MetadataStore()
        introspect_sqlite(conn, store)
        conn.close()

        assert store.get_primary_key("memberships") == "user_id"
        assert store.get_columns("memberships") == ["group_id", "role"]

    def test_quoted_table_name(self):
        conn = sqlite3.connect(":memory:")
        conn.execute('CREATE TABLE "order items" (id INTEGER PRIMARY KEY, sku TEXT)')
        store = MetadataStore()
        introspect_sqlite(conn, store)
        conn.close()

        assert store.get_columns("order items") == ["sku"]

    def test_empty_database(self):
        conn = sqlite3.connect(":memory:")
        store = MetadataStore()
        assert introspect_sqlite(conn, store) == []
        assert len(store) == 0
        conn.close()


class TestMySQLIntrospection:
    """Tests for introspect_mysql against a scripted connection."""

    def test_registers_tables(self, mysql_conn):
        store = MetadataStore()
        tables = introspect_mysql(mysql_conn, store)

        assert tables == ["logs", "users"]
        assert "INFORMATION_SCHEMA.COLUMNS" in mysql_conn.executed[0][0]

    def test_primary_key_and_columns(self, mysql_conn):
        store = MetadataStore()
        introspect_mysql(mysql_conn, store)

        assert store.get_primary_key("users") == "id"
        # UNI and other keys stay ordinary
        assert store.get_columns("users") == ["name", "email", "created_at", "updated_at"]
        assert store.get_on_insert("users") is None
        assert store.get_on_update("users") is None

    def test_table_without_primary_key(self, mysql_conn):
        store = MetadataStore()
        introspect_mysql(mysql_conn, store)

        assert store.describe("logs").primary_key is None
        assert store.get_columns("logs") == ["message", "level"]

    def test_composite_key_last_wins(self):
        conn = FakeMySQLConnection([
            ("memberships", "user_id", "PRI"),
            ("memberships", "group_id", "PRI"),
            ("memberships", "role", ""),
        ])
        store = MetadataStore()
        introspect_mysql(conn, store)

        assert store.get_primary_key("memberships") == "group_id"
        assert store.get_columns("memberships") == ["role"]

    def test_dict_rows(self):
        conn = FakeMySQLConnection([
            {"TABLE_NAME": "users", "COLUMN_NAME": "id", "COLUMN_KEY": "PRI"},
            {"TABLE_NAME": "users", "COLUMN_NAME": "name", "COLUMN_KEY": ""},
        ])
        store = MetadataStore()
        introspect_mysql(conn, store)

        assert store.get_primary_key("users") == "id"
        assert store.get_columns("users") == ["name"]

    def test_cursor_closed(self, mysql_conn):
        introspect_mysql(mysql_conn, MetadataStore())
        assert mysql_conn.opened_cursors == mysql_conn.closed_cursors == 1
