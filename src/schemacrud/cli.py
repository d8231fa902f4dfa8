"""
Command-line interface for schemacrud.

Provides describe, get, insert, update, delete and query commands against an
SQLite database file.
"""

from __future__ import annotations

import logging
import re
import sqlite3
import sys
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from schemacrud import __version__
from schemacrud.errors import SchemaCrudError
from schemacrud.facade import DataAccessFacade
from schemacrud.models import FacadeConfig

console = Console()

# Only plain decimal literals become numbers; "007", "nan", "1e3", "1_000" stay text
_INT_RE = re.compile(r"-?(0|[1-9]\d*)", re.ASCII)
_FLOAT_RE = re.compile(r"-?(0|[1-9]\d*)\.\d+", re.ASCII)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _parse_value(raw: str) -> Any:
    if _INT_RE.fullmatch(raw):
        return int(raw)
    if _FLOAT_RE.fullmatch(raw):
        return float(raw)
    return raw


def _parse_pairs(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Parse key=value options into a dict."""
    data = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected key=value, got '{pair}'")
        key, value = pair.split("=", 1)
        data[key.strip()] = _parse_value(value)
    return data


@contextmanager
def _open_facade(db: Path, config_path: Optional[Path]) -> Iterator[DataAccessFacade]:
    """Open the database and yield an introspected facade, exiting on schemacrud errors."""
    config = FacadeConfig.from_yaml(config_path) if config_path else None
    with closing(sqlite3.connect(str(db))) as conn:
        try:
            yield DataAccessFacade(conn, config=config)
            conn.commit()
        except (SchemaCrudError, sqlite3.Error) as e:
            conn.rollback()
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)


def _print_rows(rows, title: str) -> None:
    if not rows:
        console.print("[yellow]No rows[/yellow]")
        return

    table = Table(title=title)
    for name in rows[0]:
        table.add_column(str(name), style="cyan")
    for row in rows:
        table.add_row(*["" if v is None else str(v) for v in row.values()])
    console.print(table)


db_option = click.option(
    "--db",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Path to the SQLite database file",
)
config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with timestamp configuration",
)


@click.group()
@click.version_option(version=__version__, prog_name="schemacrud")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """
    schemacrud - Metadata-driven CRUD for relational databases

    Introspects the schema once and runs generic single-table operations,
    ignoring fields that are not real columns.
    """
    setup_logging(verbose)


@cli.command()
@db_option
@config_option
def describe(db: Path, config_path: Optional[Path]) -> None:
    """Show the introspected metadata of every table."""
    with _open_facade(db, config_path) as facade:
        store = facade.metadata

        table = Table(title=f"Schema ({facade.dialect.value})")
        table.add_column("Table", style="cyan")
        table.add_column("Primary Key", style="green")
        table.add_column("Columns", style="white")
        table.add_column("On Insert", style="yellow")
        table.add_column("On Update", style="yellow")

        for name in store.get_tables():
            meta = store.describe(name)
            table.add_row(
                name,
                meta.primary_key or "-",
                ", ".join(meta.columns),
                meta.on_insert or "-",
                meta.on_update or "-",
            )

        console.print(table)


@cli.command()
@db_option
@config_option
@click.argument("table")
@click.argument("row_id")
def get(db: Path, config_path: Optional[Path], table: str, row_id: str) -> None:
    """Fetch one row of TABLE by primary key."""
    with _open_facade(db, config_path) as facade:
        row = facade.select_one_by_id(table, _parse_value(row_id))
        _print_rows([row] if row else [], title=table)


@cli.command()
@db_option
@config_option
@click.argument("table")
@click.option("-s", "--set", "pairs", multiple=True, help="column=value (repeatable)")
def insert(db: Path, config_path: Optional[Path], table: str, pairs: Tuple[str, ...]) -> None:
    """
    Insert one row into TABLE.

    Examples:

        schemacrud insert --db app.db users -s name=Ann -s email=ann@example.com
    """
    data = _parse_pairs(pairs)
    with _open_facade(db, config_path) as facade:
        new_id = facade.insert_one(table, data)
        console.print(f"[green]Inserted {table} id {new_id}[/green]")


@cli.command()
@db_option
@config_option
@click.argument("table")
@click.argument("row_id")
@click.option("-s", "--set", "pairs", multiple=True, help="column=value (repeatable)")
def update(
    db: Path,
    config_path: Optional[Path],
    table: str,
    row_id: str,
    pairs: Tuple[str, ...],
) -> None:
    """Update one row of TABLE by primary key."""
    data = _parse_pairs(pairs)
    with _open_facade(db, config_path) as facade:
        count = facade.update_one(table, data, _parse_value(row_id))
        console.print(f"[green]Updated {count} row(s)[/green]")


@cli.command()
@db_option
@config_option
@click.argument("table")
@click.argument("row_id")
def delete(db: Path, config_path: Optional[Path], table: str, row_id: str) -> None:
    """Delete one row of TABLE by primary key."""
    with _open_facade(db, config_path) as facade:
        count = facade.delete_one_by_id(table, _parse_value(row_id))
        console.print(f"[green]Deleted {count} row(s)[/green]")


@cli.command()
@db_option
@config_option
@click.argument("sql")
@click.option("-p", "--param", "pairs", multiple=True, help="name=value bind parameter (repeatable)")
def query(db: Path, config_path: Optional[Path], sql: str, pairs: Tuple[str, ...]) -> None:
    """
    Run a SELECT and print the result.

    Examples:

        schemacrud query --db app.db "SELECT * FROM users WHERE name = :name" -p name=Ann
    """
    params = _parse_pairs(pairs)
    with _open_facade(db, config_path) as facade:
        frame = facade.select_frame(sql, params)
        _print_rows(frame.to_dict(orient="records"), title="Result")
        console.print(f"{len(frame):,} row(s)")


if __name__ == "__main__":
    cli()
