"""
Schema metadata module.

Provides the in-memory MetadataStore and the per-dialect introspection
routines that populate it from a live connection.
"""

from schemacrud.metadata.store import MetadataStore
from schemacrud.metadata.mysql import introspect_mysql
from schemacrud.metadata.sqlite import SQLITE_ROW_ID, introspect_sqlite

__all__ = [
    "MetadataStore",
    "introspect_mysql",
    "introspect_sqlite",
    "SQLITE_ROW_ID",
]
