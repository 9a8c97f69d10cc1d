"""Commands for success-rate records without a response code."""

import click
from rcdash.cli.error_handling import handle_domain_error
from rcdash.domain.application import ApplicationService
from rcdash.domain.errors import DomainError
from rcdash.domain.reconciliation import DEFAULT_PAGE_SIZE, ReconciliationService
from rcdash.utils.application_resolver import resolve_application


@click.group()
def no_rc_group():
    """Review and fix records uploaded without a response code."""
    pass


@no_rc_group.command("list")
@click.option("--app", "application", help="Application name or ID")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--limit", type=int, default=DEFAULT_PAGE_SIZE, show_default=True, help="Records per page")
@click.pass_context
def list_no_rc(ctx, application: str | None, page: int, limit: int):
    """List failed records that have no response code."""
    db = ctx.obj["db"]
    try:
        application_id = None
        if application is not None:
            application_id = resolve_application(ApplicationService(db), application)
        result = ReconciliationService(db).list_facts_without_response_code(
            application_id, page=page, limit=limit
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No records without a response code.")
        return

    click.echo(f"\nRecords without a response code (page {result.page} of {result.pages}, {result.total} total):")
    click.echo("-" * 80)
    for fact in result.items:
        click.echo(
            f"ID: {fact.id:5d} | {fact.date.isoformat()} | {fact.transaction_type:20s} | "
            f"{fact.status or '-':10s} | count {fact.total_count if fact.total_count is not None else '-'}"
        )


@no_rc_group.command("assign")
@click.argument("fact_id", type=int)
@click.argument("response_code")
@click.option("--description", help="Response code description")
@click.pass_context
def assign_response_code(ctx, fact_id: int, response_code: str, description: str | None):
    """Give a record a response code and classify it.

    If the code is not in the dictionary it is added to the unmapped list.

    Examples:
        rcdash no-rc assign 42 05 --description "Do not honor"
    """
    service = ReconciliationService(ctx.obj["db"])
    try:
        error_class = service.assign_response_code(fact_id, response_code, description)
    except DomainError as e:
        handle_domain_error(ctx, e)
    else:
        if error_class is None:
            click.echo(f"Assigned RC {response_code.strip()} to record {fact_id} (unmapped, awaiting dictionary entry)")
        else:
            click.echo(f"Assigned RC {response_code.strip()} to record {fact_id} (class {error_class})")


def register_commands(cli):
    """Register no-RC commands with main CLI."""
    cli.add_command(no_rc_group, name="no-rc")
