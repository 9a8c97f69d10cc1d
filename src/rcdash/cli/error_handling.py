"""CLI error handling helpers."""

import json

import click

from rcdash.domain.errors import DomainError, RowValidationError, UploadError
from rcdash.domain.responses import to_response


def handle_domain_error(
    ctx: click.Context, error: DomainError | ValueError, as_json: bool = False
) -> None:
    """Render a domain error and exit with failure.

    Upload errors also list their structured detail (missing columns, failing
    rows) so the operator can fix the file.
    """
    if as_json:
        click.echo(json.dumps(to_response(error), indent=2, default=str))
        ctx.exit(1)

    click.echo(f"Error: {error}", err=True)
    if isinstance(error, RowValidationError):
        for row_error in error.row_errors:
            click.echo(f"  Row {row_error.row_number}: {row_error.reason}", err=True)
    elif isinstance(error, UploadError):
        data = error.to_data() or {}
        for column in data.get("missingColumns", []):
            click.echo(f"  Missing: {column}", err=True)
    ctx.exit(1)
