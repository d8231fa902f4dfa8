"""
MySQL schema introspection.

Reads every column of the current database from INFORMATION_SCHEMA.COLUMNS
in a single query.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping

from schemacrud.metadata.store import MetadataStore
from schemacrud.models import TimestampKind

logger = logging.getLogger(__name__)

COLUMNS_QUERY = """
    SELECT
        TABLE_NAME,
        COLUMN_NAME,
        COLUMN_KEY
    FROM INFORMATION_SCHEMA.COLUMNS
    WHERE TABLE_SCHEMA = (
        SELECT DATABASE()
    )
    ORDER BY TABLE_NAME, ORDINAL_POSITION
"""


def introspect_mysql(connection: Any, store: MetadataStore) -> List[str]:
    """
    Populate the store from a MySQL connection.

    Columns whose COLUMN_KEY is 'PRI' become the table's primary key; for a
    composite key the last reported key column wins. Tables without a primary
    key are registered without one.

    Args:
        connection: DB-API connection (PyMySQL, MySQLdb, mysql-connector)
        store: Empty MetadataStore to fill

    Returns:
        Names of the registered tables
    """
    cursor = connection.cursor()
    try:
        cursor.execute(COLUMNS_QUERY)
        rows = cursor.fetchall()
    finally:
        cursor.close()

    tables: List[str] = []
    for row in rows:
        if isinstance(row, Mapping):
            row = (row["TABLE_NAME"], row["COLUMN_NAME"], row["COLUMN_KEY"])
        table_name, column_name, column_key = row
        if table_name not in tables:
            tables.append(table_name)
        if column_key == "PRI":
            store.register_primary_key(table_name, column_name)
        else:
            store.register_column(table_name, column_name)

    for table in tables:
        store.designate_timestamp(TimestampKind.ON_INSERT, table, None)
        store.designate_timestamp(TimestampKind.ON_UPDATE, table, None)

    without_pk = [t for t in tables if store.describe(t).primary_key is None]
    if without_pk:
        logger.warning(f"Tables without a primary key: {', '.join(without_pk)}")

    logger.info(f"Introspected {len(tables)} tables from MySQL database")
    return tables
