"""Database reset command."""

import click
from rcdash.database.base import DEFAULT_APPLICATIONS


@click.command("reset-db")
@click.option("--yes", is_flag=True, help="Reset without asking for confirmation")
@click.option("--no-seed", is_flag=True, help="Do not create the default applications")
@click.pass_context
def reset_db(ctx, yes: bool, no_seed: bool):
    """Drop all data and recreate the database.

    The default applications are created again unless --no-seed is given.
    """
    if not yes and not click.confirm("This deletes all applications, dictionaries and uploads. Continue?"):
        click.echo("Reset cancelled.")
        return

    db = ctx.obj["db"]
    db.reset_schema(seed=not no_seed)
    click.echo("Database reset.")
    if not no_seed:
        click.echo(f"Created applications: {', '.join(DEFAULT_APPLICATIONS)}")


def register_commands(cli):
    """Register reset-db command with main CLI."""
    cli.add_command(reset_db)
