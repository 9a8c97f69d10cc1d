"""Response code dictionary commands."""

import click
from rcdash.cli.error_handling import handle_domain_error
from rcdash.domain.application import ApplicationService
from rcdash.domain.errors import DomainError
from rcdash.domain.reconciliation import ReconciliationService
from rcdash.utils.application_resolver import resolve_application


@click.group()
def dictionary_group():
    """View and edit the response code dictionary."""
    pass


@dictionary_group.command("list")
@click.option("--app", "application", help="Application name or ID")
@click.option("--class", "error_class", help="Only entries with this error class (S, N, Sukses)")
@click.option("--type", "transaction_type", help="Only entries with this transaction type")
@click.option("--search", help="Match response code or description")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--limit", type=int, help="Entries per page (all if omitted)")
@click.pass_context
def list_dictionary(
    ctx,
    application: str | None,
    error_class: str | None,
    transaction_type: str | None,
    search: str | None,
    page: int,
    limit: int | None,
):
    """List dictionary entries.

    Examples:
        rcdash dictionary list --app "Bale"
        rcdash dictionary list --class N --search timeout
    """
    db = ctx.obj["db"]
    try:
        application_id = None
        if application is not None:
            application_id = resolve_application(ApplicationService(db), application)
        result = ReconciliationService(db).list_dictionary_entries(
            application_id=application_id,
            error_class=error_class,
            transaction_type=transaction_type,
            search=search,
            page=page,
            limit=limit,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No dictionary entries found.")
        return

    names = {app.id: app.name for app in ApplicationService(db).list_applications()}
    click.echo(f"\nDictionary entries ({result.total} total):")
    click.echo("-" * 80)
    for entry in result.items:
        click.echo(
            f"ID: {entry.id:4d} | {names.get(entry.application_id, '?'):15s} | "
            f"{entry.transaction_type or '-':20s} | RC {entry.response_code:6s} | "
            f"{entry.error_class:6s} | {entry.description or ''}"
        )


@dictionary_group.command("set-class")
@click.argument("entry_id", type=int)
@click.argument("error_class", metavar="CLASS")
@click.pass_context
def set_class(ctx, entry_id: int, error_class: str):
    """Change the error class of a dictionary entry.

    Records with this code that are still unclassified take the new class.

    Examples:
        rcdash dictionary set-class 12 N
    """
    service = ReconciliationService(ctx.obj["db"])
    try:
        classified = service.update_dictionary_error_class(entry_id, error_class)
    except DomainError as e:
        handle_domain_error(ctx, e)
    else:
        click.echo(
            f"Updated entry {entry_id}, {classified} record{'s' if classified != 1 else ''} classified"
        )


@dictionary_group.command("set-description")
@click.argument("entry_id", type=int)
@click.argument("description")
@click.pass_context
def set_description(ctx, entry_id: int, description: str):
    """Change the description of a dictionary entry.

    The description is also written to the success-rate records with the
    same response code. Pass "" to clear it.

    Examples:
        rcdash dictionary set-description 12 "Insufficient funds"
    """
    service = ReconciliationService(ctx.obj["db"])
    try:
        updated = service.update_dictionary_description(entry_id, description)
    except DomainError as e:
        handle_domain_error(ctx, e)
    else:
        click.echo(f"Updated entry {entry_id}, {updated} record{'s' if updated != 1 else ''} updated")


def register_commands(cli):
    """Register dictionary commands with main CLI."""
    cli.add_command(dictionary_group, name="dictionary")
