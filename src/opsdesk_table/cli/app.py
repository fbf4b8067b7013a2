"""CLI entrypoint for :mod:`opsdesk_table`.

- `preview` - search/sort a record file or API collection and print the table.
- `check`   - validate a table manifest.
- `version` - print the package version.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from opsdesk_table import __version__
from opsdesk_table.cli.common import LOG_FORMAT_OPTION, LOG_LEVEL_OPTION, LogFormat, resolve_logging
from opsdesk_table.cli.preview import format_table, infer_columns
from opsdesk_table.common.logging import start_logging
from opsdesk_table.exceptions import SchemaError, TableEngineError
from opsdesk_table.io.records import fetch_records, load_records
from opsdesk_table.schemas.manifest import load_manifest
from opsdesk_table.settings import Settings
from opsdesk_table.table import TableController

app = typer.Typer(
    help=(
        "Preview console list tables from the command line.\n\n"
        "```bash\n"
        "opsdesk-table preview products.json --manifest products.table.json --search al --sort name\n"
        "```\n"
    ),
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the package version and exit.",
    ),
) -> None:
    """opsdesk-table: column-driven search/sort tables."""


@app.command("version")
def version_command() -> None:
    """Print the package version."""
    typer.echo(__version__)


@app.command("preview")
def preview_command(
    source: str = typer.Argument(..., help="Record file (.json, .csv, .xlsx) or http(s) URL returning a JSON array."),
    manifest: Optional[Path] = typer.Option(
        None,
        "--manifest",
        exists=True,
        dir_okay=False,
        help="Table manifest declaring columns (default: columns from the first record).",
    ),
    search: Optional[str] = typer.Option(None, "--search", help="Free-text search term."),
    sort: Optional[str] = typer.Option(None, "--sort", help="Column key to sort by."),
    descending: bool = typer.Option(False, "--desc", help="Sort descending (requires --sort)."),
    log_format: Optional[LogFormat] = LOG_FORMAT_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Print the searched and sorted table for SOURCE."""

    settings = Settings()
    effective_format, effective_level = resolve_logging(
        log_format=log_format,
        log_level=log_level,
        settings=settings,
    )
    if descending and not sort:
        raise typer.BadParameter("--desc requires --sort", param_hint="desc")

    with start_logging(log_format=effective_format, log_level=effective_level) as log_ctx:
        try:
            if source.startswith(("http://", "https://")):
                records = fetch_records(source, timeout=settings.http_timeout)
            else:
                records = load_records(Path(source))

            if manifest is not None:
                table_manifest = load_manifest(manifest)
                table = TableController(
                    table_manifest.to_schema(),
                    identity_field=table_manifest.identity_field,
                    search_keys=table_manifest.search_fields,
                    include_rendered_in_search=table_manifest.include_rendered_in_search,
                    settings=settings,
                    events=log_ctx.events,
                )
            else:
                table = TableController(infer_columns(records), settings=settings, events=log_ctx.events)
        except TableEngineError as exc:
            typer.secho(str(exc), err=True, fg=typer.colors.RED)
            raise typer.Exit(code=1)

        derived = table.render(records)
        if search:
            derived = table.input_search(search) or derived
        if sort:
            column = table.columns.get(sort)
            if column is None:
                raise typer.BadParameter(
                    f"Unknown column '{sort}' (columns: {', '.join(table.columns.keys())})",
                    param_hint="sort",
                )
            if not column.sortable:
                raise typer.BadParameter(f"Column '{sort}' is not sortable", param_hint="sort")
            derived = table.click_header(sort) or derived
            if descending:
                derived = table.click_header(sort) or derived

    typer.echo(format_table(derived))


@app.command("check")
def check_command(
    manifest: Path = typer.Argument(..., help="Path to a table manifest JSON file."),
) -> None:
    """Validate a table manifest."""

    try:
        table_manifest = load_manifest(manifest)
        schema = table_manifest.to_schema()
    except SchemaError as exc:
        typer.echo(f"Manifest INVALID: {exc}")
        raise typer.Exit(code=1)

    typer.echo("Manifest OK")
    typer.echo(f"- columns: {len(schema)}")
    typer.echo(f"- sortable: {sum(1 for col in schema if col.sortable)}")
    typer.echo(f"- identity_field: {table_manifest.identity_field or '(position)'}")


def main() -> None:
    """Entrypoint used by console scripts and `python -m opsdesk_table`."""
    app()


__all__ = ["app", "main"]
