"""
CLI entry point for sqlshape.

This module provides the Typer-based command-line interface for sqlshape.

Commands:
    ddl     Print the CREATE TABLE statement derived from a model
    init    Create a model's table in a database file
    tables  List the tables of a database file
    show    Print the rows of a table

Models are referenced as ``MODULE:MODEL``, e.g. ``myapp.models:User``; the
module must be importable from the current environment.
"""

import importlib
import json
import sqlite3
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sqlshape import __version__
from sqlshape.config import DatabaseConfig, load_config
from sqlshape.errors import SqlshapeError
from sqlshape.log import configure_logging
from sqlshape.repository import BaseRepository
from sqlshape.schema import model_to_table
from sqlshape.sql import create_table_sql
from sqlshape.store import connect, fetch_rows, list_tables, table_columns

app = typer.Typer(
    name="sqlshape",
    help="Derive SQLite tables from Pydantic models and inspect them.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="Path to a YAML database configuration.",
        exists=True,
        readable=True,
        resolve_path=True,
    ),
]

DbOption = Annotated[
    Optional[Path],
    typer.Option(
        "--db",
        help="Path to the SQLite database. Overrides the configuration.",
        resolve_path=True,
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]sqlshape[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    sqlshape - SQLite tables derived from Pydantic models.
    """
    pass


# =============================================================================
# Helpers
# =============================================================================


def _fail(error: Exception) -> None:
    """Print a library or driver error and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(code=1)


def _load_model(ref: str) -> type[BaseModel]:
    """Import ``MODULE:MODEL`` and check that it is a Pydantic model."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        console.print(f"[red]Error:[/red] expected MODULE:MODEL, got {escape(ref)}")
        raise typer.Exit(code=2)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        console.print(f"[red]Error:[/red] cannot import {escape(module_name)}: {escape(str(e))}")
        raise typer.Exit(code=2) from e

    model = getattr(module, attr, None)
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        console.print(f"[red]Error:[/red] {escape(ref)} is not a Pydantic model")
        raise typer.Exit(code=2)
    return model


def _resolve_config(db: Path | None, config: Path | None) -> DatabaseConfig:
    """Merge the optional config file with --db and set up logging."""
    try:
        cfg = load_config(config)
    except SqlshapeError as e:
        _fail(e)
    if db is not None:
        cfg = cfg.model_copy(update={"path": db})
    configure_logging(level=cfg.log_level, json=cfg.json_logs)
    return cfg


# =============================================================================
# Commands
# =============================================================================


@app.command()
def ddl(
    model_ref: Annotated[
        str,
        typer.Argument(help="Model to translate, as MODULE:MODEL."),
    ],
    table: Annotated[
        str,
        typer.Option("--table", "-t", help="Table name."),
    ],
) -> None:
    """
    Print the CREATE TABLE statement for a model.

    Example:
        $ sqlshape ddl myapp.models:User --table users
    """
    model = _load_model(model_ref)
    try:
        sql = create_table_sql(table, model_to_table(model))
    except SqlshapeError as e:
        _fail(e)
    typer.echo(sql)


@app.command()
def init(
    model_ref: Annotated[
        str,
        typer.Argument(help="Model to create a table for, as MODULE:MODEL."),
    ],
    table: Annotated[
        str,
        typer.Option("--table", "-t", help="Table name."),
    ],
    db: DbOption = None,
    config: ConfigOption = None,
) -> None:
    """
    Create the table for a model (no-op if it already exists).

    Example:
        $ sqlshape init myapp.models:User --table users --db app.db
    """
    model = _load_model(model_ref)
    cfg = _resolve_config(db, config)

    try:
        conn = connect(cfg)
        try:
            BaseRepository(conn, table, model, model)
        finally:
            conn.close()
    except (SqlshapeError, sqlite3.Error) as e:
        _fail(e)

    console.print(f"[green]Table {escape(table)} ready in {escape(str(cfg.path))}[/green]")


@app.command()
def tables(
    db: DbOption = None,
    config: ConfigOption = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
) -> None:
    """
    List the tables of a database and their columns.

    Example:
        $ sqlshape tables --db app.db
    """
    cfg = _resolve_config(db, config)

    if not cfg.path.exists():
        console.print(f"[yellow]No database found at {escape(str(cfg.path))}[/yellow]")
        raise typer.Exit(code=0)

    try:
        conn = connect(cfg)
        try:
            described = {name: table_columns(conn, name) for name in list_tables(conn)}
        finally:
            conn.close()
    except (SqlshapeError, sqlite3.Error) as e:
        _fail(e)

    if json_output:
        print(json.dumps(described, indent=2, default=str))
        return

    if not described:
        console.print("[dim]No tables found.[/dim]")
        raise typer.Exit(code=0)

    output = Table(show_header=True, header_style="bold")
    output.add_column("Table", style="cyan")
    output.add_column("Columns")

    for name, columns in described.items():
        output.add_row(
            name,
            ", ".join(f"{c['name']} {c['type']}" for c in columns),
        )

    console.print(output)


@app.command()
def show(
    table: Annotated[
        str,
        typer.Argument(help="Table to print."),
    ],
    db: DbOption = None,
    config: ConfigOption = None,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of rows to show.",
        ),
    ] = 20,
) -> None:
    """
    Print the rows of a table.

    Example:
        $ sqlshape show users --db app.db -n 50
    """
    cfg = _resolve_config(db, config)

    if not cfg.path.exists():
        console.print(f"[yellow]No database found at {escape(str(cfg.path))}[/yellow]")
        raise typer.Exit(code=0)

    try:
        conn = connect(cfg)
        try:
            rows = fetch_rows(conn, table, limit=limit)
        finally:
            conn.close()
    except (SqlshapeError, sqlite3.Error) as e:
        _fail(e)

    if not rows:
        console.print("[dim]No rows found.[/dim]")
        raise typer.Exit(code=0)

    output = Table(show_header=True, header_style="bold", title=table)
    for name in rows[0]:
        output.add_column(name)
    for row in rows:
        output.add_row(*("NULL" if v is None else escape(str(v)) for v in row.values()))

    console.print(output)


if __name__ == "__main__":
    app()
