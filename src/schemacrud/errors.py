"""Exception types for the data-access layer."""


class SchemaCrudError(Exception):
    """Base exception for schemacrud errors."""

    pass


class UnsupportedDialect(SchemaCrudError):
    """The connection's database engine has no introspection routine or timestamp expression."""

    def __init__(self, dialect: str):
        self.dialect = dialect
        super().__init__(f"schemacrud is not yet fully functional for {dialect} databases")


class UnknownTable(SchemaCrudError, LookupError):
    """Metadata was requested or mutated for a table that was never introspected."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' does not exist")


class UnknownColumn(SchemaCrudError, LookupError):
    """A timestamp designation named a column that is not an ordinary column of the table."""

    def __init__(self, table: str, column: str):
        self.table = table
        self.column = column
        super().__init__(f"Table '{table}' does not have column '{column}'")


class MissingPrimaryKey(SchemaCrudError, LookupError):
    """The table has no primary key and its dialect has no synthetic row identifier."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' has no primary key")


class NoValidParameters(SchemaCrudError, ValueError):
    """After filtering against the table's columns, nothing was left to bind.

    Raised by insert_one and update_one. The caller's data only contained keys
    that are not ordinary columns of the target table (primary keys and managed
    timestamp columns are never bindable through these operations).
    """

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"No valid parameters supplied for table '{table}'")
