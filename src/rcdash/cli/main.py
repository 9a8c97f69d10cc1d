"""Main CLI entry point."""

import logging
import os

import click
from rcdash.database.factories import create_database

# Import and register all commands at module level
from rcdash.cli.commands import (
    application,
    upload,
    unmapped,
    no_rc,
    dictionary,
    reset_db,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: int) -> None:
    """Configure root logging from -v flags or RCDASH_LOG_LEVEL."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.getLevelName(os.environ.get("RCDASH_LOG_LEVEL", "WARNING").upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides RCDASH_DB_PATH environment variable)",
    envvar="RCDASH_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL (overrides RCDASH_DATABASE_URL and --db-path)",
    envvar="RCDASH_DATABASE_URL",
)
@click.option("-v", "--verbose", count=True, help="Increase log output (-v info, -vv debug)")
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, verbose: int):
    """rcdash - Response code dictionary and success-rate uploads.

    Upload response code dictionaries and daily success-rate reports per
    application, then work through unmapped codes and rows without a
    response code.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
application.register_commands(cli)
upload.register_commands(cli)
unmapped.register_commands(cli)
no_rc.register_commands(cli)
dictionary.register_commands(cli)
reset_db.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
