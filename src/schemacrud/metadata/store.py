"""
In-memory registry of per-table schema facts.

The store is filled once by an introspection routine and is read by the
facade for every CRUD call. It knows nothing about SQL or connections.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from schemacrud.errors import MissingPrimaryKey, UnknownColumn, UnknownTable
from schemacrud.models import WILDCARD_TABLE, TableMetadata, TimestampKind

logger = logging.getLogger(__name__)


class MetadataStore:
    """
    Registry of table name -> TableMetadata.

    Table names are case-sensitive. A column moved into a timestamp role is
    removed from the table's ordinary columns and is never put back.
    """

    def __init__(self):
        self._tables: Dict[str, TableMetadata] = {}

    def __contains__(self, table: object) -> bool:
        return table in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def _ensure(self, table: str) -> TableMetadata:
        if table not in self._tables:
            self._tables[table] = TableMetadata(name=table)
        return self._tables[table]

    def _get(self, table: str) -> TableMetadata:
        try:
            return self._tables[table]
        except KeyError:
            raise UnknownTable(table) from None

    # ------------------------------------------------------------------
    # Mutators (driven by introspection)
    # ------------------------------------------------------------------

    def register_column(self, table: str, column: str) -> None:
        """Append an ordinary column, creating the table entry if needed.

        Duplicate registration is not checked; introspection reports each
        column once.
        """
        self._ensure(table).columns.append(column)

    def register_primary_key(self, table: str, column: str) -> None:
        """Set or overwrite the table's primary key."""
        self._ensure(table).primary_key = column

    def designate_timestamp(
        self,
        kind: TimestampKind,
        table: str,
        column: Optional[str],
    ) -> None:
        """
        Move a column into a managed timestamp role.

        Args:
            kind: Whether the column is stamped on insert or on update
            table: Table name, or "*" for every table having the column
            column: Ordinary column to reclassify; empty clears the slot

        Raises:
            UnknownTable: table is not registered (never for "*")
            UnknownColumn: column is not an ordinary column of table
        """
        kind = TimestampKind(kind)

        if table == WILDCARD_TABLE:
            for meta in self._tables.values():
                if column and column in meta.columns:
                    self._reclassify(meta, kind, column)
            return

        meta = self._get(table)
        if column:
            if column not in meta.columns:
                raise UnknownColumn(table, column)
            self._reclassify(meta, kind, column)
        else:
            meta.set_timestamp_column(kind, None)

    def _reclassify(self, meta: TableMetadata, kind: TimestampKind, column: str) -> None:
        meta.columns = [c for c in meta.columns if c != column]
        meta.set_timestamp_column(kind, column)
        logger.debug(f"{meta.name}.{column} designated {kind.value}")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def has_table(self, table: str) -> bool:
        return table in self._tables

    def get_tables(self) -> List[str]:
        """Return all registered table names in registration order."""
        return list(self._tables)

    def get_columns(self, table: str) -> List[str]:
        """Return a copy of the table's ordinary columns."""
        return list(self._get(table).columns)

    def get_primary_key(self, table: str) -> str:
        """Return the table's primary key (possibly a synthetic row identifier)."""
        primary_key = self._get(table).primary_key
        if not primary_key:
            raise MissingPrimaryKey(table)
        return primary_key

    def get_on_insert(self, table: str) -> Optional[str]:
        return self._get(table).on_insert

    def get_on_update(self, table: str) -> Optional[str]:
        return self._get(table).on_update

    def get_timestamp(self, kind: TimestampKind, table: str) -> Optional[str]:
        return self._get(table).timestamp_column(TimestampKind(kind))

    def describe(self, table: str) -> TableMetadata:
        """Return a detached copy of the table's metadata."""
        return TableMetadata.from_dict(self._get(table).to_dict())
