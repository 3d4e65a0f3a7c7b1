"""CLI entry point for the Students service."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import click
import uvicorn

from students.api.app import create_app
from students.config import ConfigError, Settings
from students.logging import get_logger, setup_logging
from students.store import Database

logger = get_logger("cli")


def load_settings(database_url: str | None = None) -> Settings:
    """Load settings from the environment, exiting on invalid values.

    Args:
        database_url: Overrides STUDENTS_DATABASE_URL when given.

    Returns:
        Parsed settings.
    """
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    if database_url is not None:
        settings = replace(settings, database_url=database_url)
    return settings


@click.group()
@click.version_option(package_name="students-service")
def main() -> None:
    """Students service - REST API for student records."""
    pass


@main.command()
@click.option("--host", default=None, help="Interface to bind (default: STUDENTS_HOST or 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Port to bind (default: STUDENTS_PORT or 8080)")
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy database URL (default: STUDENTS_DATABASE_URL)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: STUDENTS_LOG_LEVEL or INFO)",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for students.log (default: STUDENTS_LOG_DIR or ./logs)",
)
def serve(
    host: str | None,
    port: int | None,
    database_url: str | None,
    log_level: str | None,
    log_dir: Path | None,
) -> None:
    """Run the HTTP API."""
    setup_logging(log_dir=log_dir, level=log_level)
    settings = load_settings(database_url)
    if host is not None:
        settings = replace(settings, host=host)
    if port is not None:
        settings = replace(settings, port=port)

    logger.info("Serving on %s:%d", settings.host, settings.port)
    # Keep the handlers installed by setup_logging
    uvicorn.run(
        create_app(settings), host=settings.host, port=settings.port, log_config=None
    )


@main.command("init-db")
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy database URL (default: STUDENTS_DATABASE_URL)",
)
def init_db(database_url: str | None) -> None:
    """Create the students table and exit."""
    settings = load_settings(database_url)
    db = Database(settings.database_url)
    try:
        db.create_tables()
    finally:
        db.close()
    click.echo(f"Tables ready at {db.url.render_as_string(hide_password=True)}")


if __name__ == "__main__":
    main()
