"""CLI for epigon: inspect a fixture tree through the unioned cache."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from epigon.config import AppSettings, StorageConfig
from epigon.exceptions import StorageError
from epigon.logging_config import setup_logging
from epigon.storage import UnionedCache, create_store

log = logging.getLogger(__name__)

app = typer.Typer(name="epigon", help="Fixture-backed mock REST resource tree")
console = Console()


def _open_store(fixtures: Optional[Path], verbose: bool) -> UnionedCache:
    """Build settings and the store, overriding env defaults with CLI flags."""
    settings = AppSettings()
    if verbose:
        settings.observability.log_level = "DEBUG"
    setup_logging(settings.observability)

    if fixtures is not None:
        settings.storage = StorageConfig(fixture_dir=fixtures, fixture_suffix=settings.storage.fixture_suffix)
    return create_store(settings)


def _fail(exc: StorageError) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    raise typer.Exit(code=1)


_FIXTURES = typer.Option(None, "--fixtures", "-f", help="Fixture directory (default: $EPIGON_STORAGE_FIXTURE_DIR)")
_VERBOSE = typer.Option(False, "--verbose", "-v")


@app.command("ls")
def list_collection(
    prefix: str = typer.Argument(..., help="Collection location, e.g. root/"),
    fixtures: Optional[Path] = _FIXTURES,
    verbose: bool = _VERBOSE,
) -> None:
    """List the immediate children of a collection."""
    store = _open_store(fixtures, verbose)
    if not prefix.endswith("/"):
        prefix += "/"
    try:
        subkeys = store.list(prefix)
    except StorageError as exc:
        _fail(exc)

    table = Table(title=prefix)
    table.add_column("Location", style="cyan")
    table.add_column("Bytes", justify="right")
    for subkey in subkeys:
        try:
            size = str(len(store.read(subkey)))
        except StorageError:
            log.debug("Unreadable child %s", subkey)
            size = "-"
        table.add_row(subkey, size)
    console.print(table)


@app.command("cat")
def read_object(
    location: str = typer.Argument(..., help="Object location, e.g. root/child1"),
    fixtures: Optional[Path] = _FIXTURES,
    verbose: bool = _VERBOSE,
) -> None:
    """Print the bytes stored at an object location."""
    store = _open_store(fixtures, verbose)
    try:
        data = store.read(location)
    except StorageError as exc:
        _fail(exc)
    typer.echo(data.decode("utf-8"))


@app.command("dump")
def read_collection(
    prefix: str = typer.Argument(..., help="Collection location, e.g. root/"),
    fixtures: Optional[Path] = _FIXTURES,
    verbose: bool = _VERBOSE,
) -> None:
    """Print a collection rendered as a JSON array."""
    store = _open_store(fixtures, verbose)
    if not prefix.endswith("/"):
        prefix += "/"
    try:
        data = store.read_list(prefix)
    except StorageError as exc:
        _fail(exc)
    typer.echo(data.decode("utf-8"))


if __name__ == "__main__":
    app()
