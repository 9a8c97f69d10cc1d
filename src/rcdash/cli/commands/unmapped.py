"""Unmapped response code commands."""

import click
from rcdash.cli.error_handling import handle_domain_error
from rcdash.domain.application import ApplicationService
from rcdash.domain.errors import DomainError
from rcdash.domain.reconciliation import ReconciliationService
from rcdash.utils.application_resolver import resolve_application


@click.group()
def unmapped_group():
    """Review and resolve response codes missing from the dictionary."""
    pass


@unmapped_group.command("list")
@click.option("--app", "application", help="Application name or ID")
@click.pass_context
def list_unmapped(ctx, application: str | None):
    """List unmapped response codes, newest first."""
    db = ctx.obj["db"]
    application_id = None
    if application is not None:
        try:
            application_id = resolve_application(ApplicationService(db), application)
        except DomainError as e:
            handle_domain_error(ctx, e)

    codes = ReconciliationService(db).list_unmapped_codes(application_id)
    if not codes:
        click.echo("No unmapped response codes.")
        return

    names = {app.id: app.name for app in ApplicationService(db).list_applications()}
    click.echo("\nUnmapped response codes:")
    click.echo("-" * 80)
    for code in codes:
        click.echo(
            f"ID: {code.id:4d} | {names.get(code.application_id, '?'):15s} | "
            f"{code.transaction_type or '-':20s} | RC {code.response_code:6s} | "
            f"{code.description or ''}"
        )


@unmapped_group.command("resolve")
@click.argument("mappings", nargs=-1, required=True, metavar="ID=CLASS...")
@click.pass_context
def resolve_unmapped(ctx, mappings: tuple[str, ...]):
    """Add unmapped codes to the dictionary.

    Each mapping is an unmapped code ID and an error class (S, N or Sukses).
    All mappings are applied together or not at all.

    Examples:
        rcdash unmapped resolve 4=N
        rcdash unmapped resolve 4=N 7=S 9=Sukses
    """
    pairs = []
    for mapping in mappings:
        unmapped_id, sep, error_class = mapping.partition("=")
        if not sep or not unmapped_id.strip().isdigit():
            click.echo(f"Error: Invalid mapping '{mapping}'. Expected ID=CLASS", err=True)
            ctx.exit(1)
        pairs.append((int(unmapped_id), error_class.strip()))

    service = ReconciliationService(ctx.obj["db"])
    try:
        if len(pairs) == 1:
            classified = service.resolve_unmapped_code(*pairs[0])
        else:
            classified = service.resolve_unmapped_codes(pairs)
    except DomainError as e:
        handle_domain_error(ctx, e)
    else:
        click.echo(
            f"Resolved {len(pairs)} unmapped code{'s' if len(pairs) != 1 else ''}, "
            f"{classified} record{'s' if classified != 1 else ''} classified"
        )


def register_commands(cli):
    """Register unmapped code commands with main CLI."""
    cli.add_command(unmapped_group, name="unmapped")
