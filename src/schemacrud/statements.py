"""
SQL statement builders for generic single-table CRUD.

SQL text is always written with named ``:name`` markers. Bound parameter
mappings are keyed by bare names, which is what DB-API drivers expect, and
compile_markers() rewrites the markers for drivers using the pyformat style.

Identifiers that are not plain words (spaces, punctuation, a leading digit)
are quoted with the dialect's quote character and bound through a derived
marker name, since a marker must itself be a plain word.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

MARKER = ":"

NAMED = "named"
PYFORMAT = "pyformat"

DOUBLE_QUOTE = '"'
BACKTICK = "`"

# ":name" not preceded by another ":" or a word character (skips "::" casts)
_MARKER_RE = re.compile(r"(?<![:\w]):([A-Za-z_]\w*)")
_PLAIN_IDENTIFIER_RE = re.compile(r"^[A-Za-z_]\w*$", re.ASCII)


def tokenize_params(params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Strip leading markers from every key so ":id" and "id" bind the same."""
    if not params:
        return {}
    return {key.lstrip(MARKER): value for key, value in params.items()}


def compile_markers(query: str, paramstyle: str = NAMED, escape_percent: bool = True) -> str:
    """
    Rewrite ``:name`` markers for the driver's paramstyle.

    Args:
        query: SQL text using ``:name`` markers
        paramstyle: "named" (sqlite3) or "pyformat" (MySQL drivers)
        escape_percent: Double literal "%" for pyformat drivers that run the
            SQL through "%" formatting (PyMySQL, MySQLdb). mysql-connector
            substitutes markers itself and sends "%%" to the server as-is.

    Returns:
        SQL text the driver accepts together with a name-keyed mapping
    """
    if paramstyle == NAMED:
        return query
    if paramstyle == PYFORMAT:
        if escape_percent:
            query = query.replace("%", "%%")
        return _MARKER_RE.sub(r"%(\1)s", query)
    raise ValueError(f"Unsupported paramstyle: {paramstyle}")


def quote_identifier(name: str, quote: str = DOUBLE_QUOTE) -> str:
    """Return a plain identifier unchanged, otherwise quote it for the dialect."""
    if _PLAIN_IDENTIFIER_RE.match(name):
        return name
    return f"{quote}{name.replace(quote, quote * 2)}{quote}"


def marker_name(column: str) -> str:
    """Return the bind name used for a column's ``:name`` marker."""
    if _PLAIN_IDENTIFIER_RE.match(column):
        return column
    return "c_" + column.encode("utf-8").hex()


def bind_columns(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Key column values by their marker names."""
    return {marker_name(column): value for column, value in params.items()}


def filter_columns(data: Mapping[str, Any], columns: Iterable[str]) -> Dict[str, Any]:
    """Keep only keys that name one of the given columns, in caller order."""
    allowed = set(columns)
    filtered = {}
    for key, value in data.items():
        column = key.lstrip(MARKER)
        if column in allowed:
            filtered[column] = value
    return filtered


def _match_key(primary_key: str, quote: str) -> str:
    return f"{quote_identifier(primary_key, quote)} = {MARKER}{marker_name(primary_key)}"


def build_select_by_id(
    table: str,
    primary_key: str,
    list_primary_key: bool = False,
    quote: str = DOUBLE_QUOTE,
) -> str:
    """SELECT a row by primary key.

    list_primary_key puts the key column ahead of ``*`` so it is returned
    even when it is an implicit row identifier that ``*`` omits.
    """
    selection = f"{quote_identifier(primary_key, quote)}, *" if list_primary_key else "*"
    return (
        f"SELECT {selection} FROM {quote_identifier(table, quote)} "
        f"WHERE {_match_key(primary_key, quote)}"
    )


def build_insert(
    table: str,
    params: Mapping[str, Any],
    timestamp_columns: Iterable[str] = (),
    timestamp_function: Optional[str] = None,
    quote: str = DOUBLE_QUOTE,
) -> str:
    """
    INSERT the given columns, stamping each timestamp column with the
    dialect's current-timestamp expression rather than a bound value.
    """
    columns: List[str] = [quote_identifier(column, quote) for column in params]
    values: List[str] = [f"{MARKER}{marker_name(column)}" for column in params]
    for column in timestamp_columns:
        columns.append(quote_identifier(column, quote))
        values.append(timestamp_function)
    return (
        f"INSERT INTO {quote_identifier(table, quote)} "
        f"({', '.join(columns)}) VALUES ({', '.join(values)})"
    )


def build_update(
    table: str,
    params: Mapping[str, Any],
    primary_key: str,
    timestamp_column: Optional[str] = None,
    timestamp_function: Optional[str] = None,
    quote: str = DOUBLE_QUOTE,
) -> str:
    """UPDATE the given columns of one row, appending the on-update stamp if any."""
    assignments = [
        f"{quote_identifier(column, quote)} = {MARKER}{marker_name(column)}"
        for column in params
    ]
    if timestamp_column:
        assignments.append(f"{quote_identifier(timestamp_column, quote)} = {timestamp_function}")
    return (
        f"UPDATE {quote_identifier(table, quote)} SET {', '.join(assignments)} "
        f"WHERE {_match_key(primary_key, quote)}"
    )


def build_delete_by_id(table: str, primary_key: str, quote: str = DOUBLE_QUOTE) -> str:
    return f"DELETE FROM {quote_identifier(table, quote)} WHERE {_match_key(primary_key, quote)}"
