"""
schemacrud - Metadata-driven CRUD for DB-API connections

Introspects a connected database's schema once, caches per-table column,
primary-key and timestamp metadata, and uses it to build parameterized SQL
for generic single-table CRUD.

Features:
- SQLite and MySQL schema introspection
- Silent filtering of fields that are not real columns
- Database-computed created/updated timestamps for designated columns
- Forgiving named parameters (":id" and "id" bind the same)
"""

__version__ = "0.1.0"
__author__ = "schemacrud developers"

from schemacrud.models import (
    Dialect,
    FacadeConfig,
    TableMetadata,
    TimestampKind,
)

from schemacrud.errors import (
    MissingPrimaryKey,
    NoValidParameters,
    SchemaCrudError,
    UnknownColumn,
    UnknownTable,
    UnsupportedDialect,
)

from schemacrud.metadata import MetadataStore
from schemacrud.facade import DataAccessFacade, detect_dialect

__all__ = [
    # Core models
    "Dialect",
    "FacadeConfig",
    "TableMetadata",
    "TimestampKind",
    # Errors
    "SchemaCrudError",
    "UnsupportedDialect",
    "UnknownTable",
    "UnknownColumn",
    "MissingPrimaryKey",
    "NoValidParameters",
    # Data access
    "MetadataStore",
    "DataAccessFacade",
    "detect_dialect",
]
