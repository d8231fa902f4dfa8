"""
SQLite schema introspection.

Reads table names from sqlite_master and column definitions from
PRAGMA table_info. Tables without a declared primary key are addressed
through SQLite's implicit rowid.
"""

from __future__ import annotations

import logging
from typing import Any, List

from schemacrud.metadata.store import MetadataStore
from schemacrud.models import TimestampKind

logger = logging.getLogger(__name__)

SQLITE_ROW_ID = "rowid"

# PRAGMA table_info row layout: cid, name, type, notnull, dflt_value, pk
_NAME = 1
_PK = 5


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def list_tables(connection: Any) -> List[str]:
    """Get all user table names in the database."""
    cursor = connection.cursor()
    try:
        cursor.execute(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\'"
        )
        return [row[0] for row in cursor.fetchall()]
    finally:
        cursor.close()


def introspect_sqlite(connection: Any, store: MetadataStore) -> List[str]:
    """
    Populate the store from an SQLite connection.

    Only the column with pk == 1 becomes the primary key; remaining members of
    a composite key are registered as ordinary columns.

    Args:
        connection: sqlite3-compatible DB-API connection
        store: Empty MetadataStore to fill

    Returns:
        Names of the registered tables
    """
    registered = []
    for table in list_tables(connection):
        cursor = connection.cursor()
        try:
            cursor.execute(f"PRAGMA table_info({_quote(table)})")
            columns = cursor.fetchall()
        finally:
            cursor.close()

        if not columns:
            continue

        primary_key = None
        for column in columns:
            if column[_PK] == 1:
                primary_key = column[_NAME]
                store.register_primary_key(table, column[_NAME])
            else:
                store.register_column(table, column[_NAME])

        store.designate_timestamp(TimestampKind.ON_INSERT, table, None)
        store.designate_timestamp(TimestampKind.ON_UPDATE, table, None)

        if primary_key is None:
            store.register_primary_key(table, SQLITE_ROW_ID)

        registered.append(table)
        logger.debug(
            f"Introspected {table}: pk={store.get_primary_key(table)}, "
            f"{len(store.get_columns(table))} columns"
        )

    logger.info(f"Introspected {len(registered)} tables from SQLite database")
    return registered
