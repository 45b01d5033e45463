"""
Main CLI entry point.
"""

import asyncio
from pathlib import Path

import typer

from contentsync import __version__
from contentsync.config.loader import (
    DEFAULT_MAX_FILE_READ,
    DEFAULT_MAX_UPLOADS,
    SyncSettings,
    build_connection_config,
    load_credentials,
)
from contentsync.connections.s3 import S3Connection
from contentsync.core.orchestrator import run_sync
from contentsync.exceptions import ConfigurationError, ContentSyncError
from contentsync.utils.display import Display
from contentsync.utils.logging import get_logger, setup_logging

logger = get_logger("contentsync.cli")


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"contentsync version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="contentsync",
    help="Upload files to an S3 bucket by content, skipping anything already stored.",
    add_completion=False,
)


@app.command()
def sync(
    search_glob: str | None = typer.Option(None, "--search-glob", help="Glob to match files to upload (required)"),
    bucket: str | None = typer.Option(None, "--bucket", help="S3 bucket name to upload files to (required)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done"),
    max_uploads: int = typer.Option(
        DEFAULT_MAX_UPLOADS, "--max-uploads", help="Maximum number of active uploads allowed at a time."
    ),
    max_file_read: int = typer.Option(
        DEFAULT_MAX_FILE_READ, "--max-file-read", help="Maximum number of files to read at a time."
    ),
    credentials: Path | None = typer.Option(
        None, "--credentials", "-c", help="Credentials file (JSON/YAML). Default: ./aws.json if present"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """
    Sync files matching --search-glob into --bucket, keyed by content digest.
    """
    setup_logging(level="DEBUG" if verbose else "INFO", log_file=log_file)

    try:
        settings = SyncSettings.from_options(
            search_glob=search_glob,
            bucket=bucket,
            dry_run=dry_run,
            max_uploads=max_uploads,
            max_file_read=max_file_read,
            credentials_path=credentials,
        )
        creds = load_credentials(settings.credentials_path)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    # pool holds every upload plus one listing request
    connection = S3Connection(
        "remote",
        build_connection_config(settings, creds, max_pool_connections=settings.max_uploads + 1),
    )

    try:
        with connection:
            asyncio.run(run_sync(settings, connection, display=Display()))
    except ContentSyncError as e:
        logger.error(f"Sync failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        typer.echo("Interrupted", err=True)
        raise typer.Exit(130) from None
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
