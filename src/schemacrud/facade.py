"""
Metadata-driven data-access facade.

Wraps a DB-API 2.0 connection: detects its dialect, introspects the schema
once into a MetadataStore, and builds parameterized single-table CRUD
statements from that metadata. Caller-supplied fields that are not real
columns are dropped silently.

Transactions are left to the caller; every failure raised by the driver
propagates unchanged.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from schemacrud import statements
from schemacrud.errors import NoValidParameters, UnsupportedDialect
from schemacrud.metadata import MetadataStore, introspect_mysql, introspect_sqlite
from schemacrud.models import Dialect, FacadeConfig, TimestampKind

logger = logging.getLogger(__name__)


Introspector = Callable[[Any, MetadataStore], List[str]]

INTROSPECTORS: Dict[Dialect, Introspector] = {
    Dialect.MYSQL: introspect_mysql,
    Dialect.SQLITE: introspect_sqlite,
}

TIMESTAMP_FUNCTIONS: Dict[Dialect, str] = {
    Dialect.MYSQL: "NOW()",
    Dialect.SQLITE: "datetime('now')",
}

PARAM_STYLES: Dict[Dialect, str] = {
    Dialect.MYSQL: statements.PYFORMAT,
    Dialect.SQLITE: statements.NAMED,
}

# Root module of the connection class -> dialect
DRIVER_MODULES: Dict[str, Dialect] = {
    "sqlite3": Dialect.SQLITE,
    "pymysql": Dialect.MYSQL,
    "MySQLdb": Dialect.MYSQL,
    "mysql": Dialect.MYSQL,
}

# pyformat drivers that pass literal "%" through unformatted (mysql-connector)
UNESCAPED_PERCENT_DRIVERS = {"mysql"}

IDENTIFIER_QUOTES: Dict[Dialect, str] = {
    Dialect.MYSQL: statements.BACKTICK,
    Dialect.SQLITE: statements.DOUBLE_QUOTE,
}


def driver_module(connection: Any) -> str:
    """Return the root module of the connection's class, e.g. "pymysql"."""
    module = type(connection).__module__ or ""
    return module.split(".")[0]


def detect_dialect(connection: Any) -> str:
    """Identify the database engine from the connection's driver module."""
    root = driver_module(connection)
    dialect = DRIVER_MODULES.get(root)
    return dialect.value if dialect else root


def resolve_dialect(name: Union[str, Dialect]) -> Dialect:
    """Map a dialect identifier to a supported Dialect or raise UnsupportedDialect."""
    try:
        dialect = Dialect(str(getattr(name, "value", name)).lower())
    except ValueError:
        raise UnsupportedDialect(str(name)) from None
    if dialect not in INTROSPECTORS or dialect not in TIMESTAMP_FUNCTIONS:
        raise UnsupportedDialect(dialect.value)
    return dialect


class DataAccessFacade:
    """
    Generic CRUD over an introspected schema.

    Usage:
        conn = sqlite3.connect("app.db")
        db = DataAccessFacade(conn)
        user_id = db.insert_one("users", {"name": "Ann", "bogus": "ignored"})
        row = db.select_one_by_id("users", user_id)
    """

    def __init__(
        self,
        connection: Any,
        dialect: Optional[Union[str, Dialect]] = None,
        config: Optional[FacadeConfig] = None,
    ):
        """
        Initialize the facade and introspect the schema.

        Args:
            connection: DB-API 2.0 connection
            dialect: Explicit dialect; detected from the connection when None
            config: Timestamp configuration applied after introspection

        Raises:
            UnsupportedDialect: No introspection routine or timestamp
                expression exists for the connection's dialect
        """
        self._connection = connection
        if dialect is None and config is not None:
            dialect = config.dialect
        self._dialect = resolve_dialect(dialect or detect_dialect(connection))
        self._quote = IDENTIFIER_QUOTES[self._dialect]
        self._escape_percent = driver_module(connection) not in UNESCAPED_PERCENT_DRIVERS
        self._manage_timestamped_columns = False

        self._metadata = MetadataStore()
        tables = INTROSPECTORS[self._dialect](self._connection, self._metadata)
        logger.info(f"Loaded metadata for {len(tables)} tables ({self._dialect.value})")

        if config is not None:
            self.apply_config(config)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def metadata(self) -> MetadataStore:
        return self._metadata

    @property
    def manage_timestamped_columns(self) -> bool:
        return self._manage_timestamped_columns

    def set_manage_timestamped_columns(self, enabled: bool) -> DataAccessFacade:
        """Stamp designated timestamp columns on insert_one/update_one when enabled."""
        self._manage_timestamped_columns = bool(enabled)
        return self

    def set_on_insert(self, table: str, column: Optional[str]) -> DataAccessFacade:
        self._metadata.designate_timestamp(TimestampKind.ON_INSERT, table, column)
        return self

    def set_on_update(self, table: str, column: Optional[str]) -> DataAccessFacade:
        self._metadata.designate_timestamp(TimestampKind.ON_UPDATE, table, column)
        return self

    def apply_config(self, config: FacadeConfig) -> DataAccessFacade:
        """Apply timestamp management and designations from a FacadeConfig."""
        self.set_manage_timestamped_columns(config.manage_timestamps)
        for kind in (TimestampKind.ON_INSERT, TimestampKind.ON_UPDATE):
            for table, column in config.designations(kind).items():
                self._metadata.designate_timestamp(kind, table, column)
        return self

    def get_timestamp_function(self) -> str:
        """Return the dialect's current-timestamp SQL expression."""
        return TIMESTAMP_FUNCTIONS[self._dialect]

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    @contextmanager
    def _execute(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Iterator[Any]:
        """Execute a statement and yield the cursor, closing it afterwards."""
        sql = statements.compile_markers(
            query,
            PARAM_STYLES[self._dialect],
            escape_percent=self._escape_percent,
        )
        bound = statements.tokenize_params(params)
        logger.debug(f"Executing: {sql} {bound}")

        cursor = self._connection.cursor()
        try:
            cursor.execute(sql, bound)
            yield cursor
        finally:
            cursor.close()

    @staticmethod
    def _row_to_dict(cursor: Any, row: Any) -> Dict[str, Any]:
        if isinstance(row, Mapping):
            return dict(row)
        names = [description[0] for description in cursor.description]
        return dict(zip(names, row))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select(self, query: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Run a query and return every row as a column-name-keyed dict."""
        with self._execute(query, params) as cursor:
            return [self._row_to_dict(cursor, row) for row in cursor.fetchall()]

    def select_one(
        self,
        query: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Run a query and return its first row, or None when nothing matches."""
        with self._execute(query, params) as cursor:
            row = cursor.fetchone()
            if row is None:
                return None
            return self._row_to_dict(cursor, row)

    def select_frame(self, query: str, params: Optional[Mapping[str, Any]] = None):
        """
        Run a query and return the rows as a pandas DataFrame.

        Returns:
            pandas DataFrame with one column per selected column
        """
        import pandas as pd

        with self._execute(query, params) as cursor:
            names = list(dict.fromkeys(d[0] for d in cursor.description or ()))
            rows = [self._row_to_dict(cursor, row) for row in cursor.fetchall()]
        return pd.DataFrame(rows, columns=names or None)

    def select_one_by_id(self, table: str, id: Any) -> Optional[Dict[str, Any]]:
        """Fetch one row by primary key.

        On SQLite the key column is listed explicitly so that an implicit
        rowid key is present in the result.
        """
        primary_key = self._metadata.get_primary_key(table)
        query = statements.build_select_by_id(
            table,
            primary_key,
            list_primary_key=self._dialect is Dialect.SQLITE,
            quote=self._quote,
        )
        return self.select_one(query, {statements.marker_name(primary_key): id})

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_one(self, table: str, data: Mapping[str, Any]) -> Any:
        """
        Insert one row built from the table's known columns.

        Args:
            table: Target table
            data: Column -> value; keys may carry a leading ":" and keys
                that are not ordinary columns are ignored

        Returns:
            The identifier generated by the database (cursor.lastrowid)

        Raises:
            UnknownTable: table was not introspected
            NoValidParameters: no key of data names an ordinary column
        """
        params = statements.filter_columns(data, self._metadata.get_columns(table))
        if not params:
            raise NoValidParameters(table)

        timestamp_columns = []
        if self._manage_timestamped_columns:
            for kind in (TimestampKind.ON_INSERT, TimestampKind.ON_UPDATE):
                column = self._metadata.get_timestamp(kind, table)
                if column:
                    timestamp_columns.append(column)

        query = statements.build_insert(
            table,
            params,
            timestamp_columns,
            self.get_timestamp_function(),
            quote=self._quote,
        )
        with self._execute(query, statements.bind_columns(params)) as cursor:
            return cursor.lastrowid

    def update_one(self, table: str, data: Mapping[str, Any], id: Any) -> int:
        """
        Update one row by primary key.

        When timestamp management is enabled, the on-update column is stamped
        in addition to the caller's columns.

        Returns:
            Number of affected rows
        """
        params = statements.filter_columns(data, self._metadata.get_columns(table))
        if not params:
            raise NoValidParameters(table)

        timestamp_column = None
        if self._manage_timestamped_columns:
            timestamp_column = self._metadata.get_on_update(table)

        primary_key = self._metadata.get_primary_key(table)
        query = statements.build_update(
            table,
            params,
            primary_key,
            timestamp_column,
            self.get_timestamp_function(),
            quote=self._quote,
        )
        bound = statements.bind_columns(params)
        bound[statements.marker_name(primary_key)] = id
        with self._execute(query, bound) as cursor:
            return cursor.rowcount

    def update(self, query: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Run a caller-written UPDATE and return the affected row count."""
        with self._execute(query, params) as cursor:
            return cursor.rowcount

    def delete(self, query: str, params: Optional[Mapping[str, Any]] = None) -> int:
        """Run a caller-written DELETE and return the affected row count."""
        with self._execute(query, params) as cursor:
            return cursor.rowcount

    def delete_one_by_id(self, table: str, id: Any) -> int:
        primary_key = self._metadata.get_primary_key(table)
        query = statements.build_delete_by_id(table, primary_key, quote=self._quote)
        with self._execute(query, {statements.marker_name(primary_key): id}) as cursor:
            return cursor.rowcount
