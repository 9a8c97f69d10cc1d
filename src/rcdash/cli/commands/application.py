"""Application management commands."""

import click
from rcdash.cli.error_handling import handle_domain_error
from rcdash.domain.application import ApplicationService
from rcdash.domain.errors import DomainError
from rcdash.utils.application_resolver import resolve_application


@click.group()
def application_group():
    """Manage applications."""
    pass


@application_group.command("add")
@click.argument("name", metavar="APPLICATION_NAME")
@click.pass_context
def add_application(ctx, name: str):
    """Create a new application.

    Examples:
        rcdash app add "Bale"
        rcdash app add "EDC Merchant"
    """
    service = ApplicationService(ctx.obj["db"])
    try:
        application_id = service.create_application(name)
        click.echo(f"Created application '{name.strip()}' (ID: {application_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@application_group.command("list")
@click.pass_context
def list_applications(ctx):
    """List all applications."""
    service = ApplicationService(ctx.obj["db"])

    applications = service.list_applications()
    if not applications:
        click.echo("No applications found.")
        return

    click.echo("\nApplications:")
    click.echo("-" * 40)
    for app in applications:
        click.echo(f"ID: {app.id:3d} | {app.name}")


@application_group.command("delete")
@click.argument("application", metavar="APPLICATION")
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_application(ctx, application: str, yes: bool) -> None:
    """Delete an application and all of its data.

    APPLICATION can be an application name or ID. Its dictionary, success-rate
    records and unmapped codes are deleted with it.

    Examples:
        rcdash app delete "QRIS"
        rcdash app delete 3 --yes
    """
    service = ApplicationService(ctx.obj["db"])
    try:
        application_id = resolve_application(service, application)
    except DomainError as e:
        handle_domain_error(ctx, e)

    app = service.get_application(application_id)
    if not yes and not click.confirm(
        f"Delete application '{app.name}' (ID: {application_id}) and all of its data?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_application(application_id)
        click.echo(f"Deleted application '{app.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register application commands with main CLI."""
    cli.add_command(application_group, name="app")
