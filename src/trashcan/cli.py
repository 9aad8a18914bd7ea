# src/trashcan/cli.py
"""Trashcan Cleaner Command Line Interface.

Entry point for the trashcan CLI tool. A cron entry such as

    0 3 * * * trashcan clean --settings /etc/trashcan/trashcan.yaml

runs one retention pass per tick. A run whose selection phase fails exits
with status 1 so the scheduler records a failed run; per-node failures are
reported but do not change the exit status.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from pydantic import ValidationError
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import ArgumentError

from trashcan import __version__
from trashcan.core.config import CleanerSettings, StoreSettings, TrashcanSettings, load_settings

if TYPE_CHECKING:
    from trashcan.cleaner import TrashcanCleaner
    from trashcan.core.store import ArchiveDB

__all__ = [
    "app",
]

DEFAULT_SETTINGS_FILE = Path("trashcan.yaml")

app = typer.Typer(
    name="trashcan",
    help="Trashcan Cleaner: purge archived nodes past their retention period.",
    no_args_is_help=True,
)


@dataclass(frozen=True)
class _LogOptions:
    verbose: bool
    json_logs: bool


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"trashcan version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,  # We handle existence check ourselves for better error message
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging (overrides logging.level).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """Trashcan Cleaner: purge archived nodes past their retention period."""
    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )
    ctx.obj = _LogOptions(verbose=verbose, json_logs=json_logs)


def _resolve_settings(
    settings_path: Path | None,
    *,
    database: str | None = None,
    batch_count: int | None = None,
    keep_period: str | None = None,
) -> TrashcanSettings:
    """Load settings and apply CLI overrides.

    Precedence: CLI option > settings file / TRASHCAN_* env > defaults.
    Without --settings, ./trashcan.yaml is used when present.

    Raises:
        typer.Exit: On a missing settings file or invalid values
    """
    if settings_path is None and DEFAULT_SETTINGS_FILE.exists():
        settings_path = DEFAULT_SETTINGS_FILE

    try:
        config = load_settings(settings_path)

        cleaner_overrides: dict[str, object] = {}
        if batch_count is not None:
            cleaner_overrides["delete_batch_count"] = batch_count
        if keep_period is not None:
            cleaner_overrides["keep_period"] = keep_period

        updates: dict[str, object] = {}
        if cleaner_overrides:
            # Re-validate through the model so overrides get the same checks as YAML values
            updates["cleaner"] = CleanerSettings(**{**config.cleaner.model_dump(), **cleaner_overrides})
        if database is not None:
            updates["store"] = StoreSettings(**{**config.store.model_dump(), "url": database})
        if updates:
            config = config.model_copy(update=updates)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    return config


def _configure_logging(ctx: typer.Context, config: TrashcanSettings) -> None:
    from trashcan.core.logging import configure_logging

    options: _LogOptions = ctx.obj if isinstance(ctx.obj, _LogOptions) else _LogOptions(False, False)
    level = "DEBUG" if options.verbose else config.logging.level
    configure_logging(json_output=options.json_logs or config.logging.json_output, level=level)


def _validate_existing_sqlite_db_url(db_url: str) -> None:
    """Fail fast when a file-backed SQLite URL points at a missing file.

    Prevents silently creating an empty database on a typoed path.

    Raises:
        typer.Exit: If the URL is malformed or the SQLite file does not exist
    """
    try:
        url = make_url(db_url)
    except ArgumentError:
        typer.echo(f"Error: Invalid database URL: {db_url}", err=True)
        raise typer.Exit(1) from None

    if not url.drivername.startswith("sqlite"):
        return
    database = url.database
    if database is None or database == "" or database == ":memory:":
        return
    db_path = Path(database).expanduser().resolve()
    if not db_path.exists():
        typer.echo(f"Error: Database file not found: {db_path}", err=True)
        raise typer.Exit(1)


def _open_cleaner(config: TrashcanSettings) -> tuple[ArchiveDB, TrashcanCleaner]:
    from trashcan.cleaner import TrashcanCleaner
    from trashcan.core.store import ArchiveDB

    _validate_existing_sqlite_db_url(config.store.url)
    try:
        db = ArchiveDB(config.store.url, echo=config.store.echo)
    except Exception as e:
        typer.echo(f"Error connecting to database: {e}", err=True)
        raise typer.Exit(1) from None
    return db, TrashcanCleaner.from_settings(config, db)


def _format_keep_period(keep_period: timedelta) -> str:
    if keep_period <= timedelta(0):
        return "any age"
    return f"older than {keep_period}"


@app.command()
def clean(
    ctx: typer.Context,
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file (default: ./trashcan.yaml if present).",
    ),
    database: str | None = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLAlchemy URL of the node store (overrides store.url).",
    ),
    batch_count: int | None = typer.Option(
        None,
        "--batch-count",
        "-b",
        help="Maximum nodes to delete in this run (overrides cleaner.delete_batch_count).",
    ),
    keep_period: str | None = typer.Option(
        None,
        "--keep-period",
        "-k",
        help="ISO-8601 retention period such as P28D (overrides cleaner.keep_period).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be deleted without deleting.",
    ),
) -> None:
    """Permanently delete archived nodes past their retention period.

    Examples:

        # See what would be deleted
        trashcan clean --dry-run --database sqlite:///./trashcan.db

        # Delete at most 100 nodes archived more than 7 days ago
        trashcan clean --batch-count 100 --keep-period P7D
    """
    config = _resolve_settings(settings, database=database, batch_count=batch_count, keep_period=keep_period)
    _configure_logging(ctx, config)

    db, cleaner = _open_cleaner(config)
    try:
        description = _format_keep_period(cleaner.keep_period)
        if dry_run:
            try:
                batch = cleaner.preview()
            except Exception as e:
                typer.echo(f"Error selecting nodes: {e}", err=True)
                raise typer.Exit(1) from None
            if not batch:
                typer.echo(f"No archived nodes {description} found.")
                return
            typer.echo(f"Would delete {len(batch)} archived node(s) {description}:")
            for node in batch[:10]:  # Show first 10
                typer.echo(f"  {node}")
            if len(batch) > 10:
                typer.echo(f"  ... and {len(batch) - 10} more")
            return

        try:
            result = cleaner.clean()
        except Exception as e:
            typer.echo(f"Error: Clean run failed: {e}", err=True)
            raise typer.Exit(1) from None

        typer.echo(f"Clean completed in {result.duration_seconds:.2f}s:")
        typer.echo(f"  Selected: {result.selected_count}")
        typer.echo(f"  Deleted: {result.deleted_count}")
        if result.failures:
            typer.echo(f"  Failed: {result.failed_count}")
            for failure in result.failures[:5]:
                typer.echo(f"    {failure['node_ref']} ({failure['type']}: {failure['exception']})")
    finally:
        db.close()


@app.command()
def count(
    ctx: typer.Context,
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file (default: ./trashcan.yaml if present).",
    ),
    database: str | None = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLAlchemy URL of the node store (overrides store.url).",
    ),
) -> None:
    """Print the number of nodes currently in the trashcan."""
    config = _resolve_settings(settings, database=database)
    _configure_logging(ctx, config)

    db, cleaner = _open_cleaner(config)
    try:
        try:
            pending = cleaner.count_pending()
        except Exception as e:
            typer.echo(f"Error counting trashcan nodes: {e}", err=True)
            raise typer.Exit(1) from None
        typer.echo(str(pending))
    finally:
        db.close()


if __name__ == "__main__":
    app()
