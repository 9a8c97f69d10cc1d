"""Upload commands for dictionaries and success-rate reports."""

import json
from pathlib import Path

import click
from rcdash.cli.error_handling import handle_domain_error
from rcdash.domain.application import ApplicationService
from rcdash.domain.dictionary_upload import DictionaryUploadService
from rcdash.domain.errors import DomainError
from rcdash.domain.policy import get_policy
from rcdash.domain.responses import to_response
from rcdash.domain.success_rate_upload import SuccessRateUploadService
from rcdash.domain.upload import UploadReport
from rcdash.utils.application_resolver import resolve_application


@click.group()
def upload_group():
    """Upload dictionary and success-rate files."""
    pass


def _app_option(func):
    return click.option(
        "--app",
        "--app-id",
        "application",
        required=True,
        help="Application name or ID",
    )(func)


def _common_options(func):
    func = click.option("--json", "as_json", is_flag=True, help="Print the JSON response")(func)
    func = click.option(
        "--empty-row-limit",
        type=int,
        envvar="RCDASH_EMPTY_ROW_LIMIT",
        help="Consecutive empty spreadsheet rows before scanning stops (default 10)",
    )(func)
    return _app_option(func)


def _echo_report(report: UploadReport, as_json: bool, success_rate: bool) -> None:
    if as_json:
        click.echo(json.dumps(to_response(report), indent=2))
        return

    click.echo(f"\nUpload complete for {report.application_name}:")
    click.echo(f"  Entries: {report.entries_processed}")
    if success_rate:
        click.echo(f"  Classified: {report.classified}")
        click.echo(f"  Unclassified: {report.unclassified}")
        click.echo(f"  New unmapped codes: {report.unmapped_codes}")
    if report.skipped_rows:
        click.echo(f"  Skipped rows: {report.skipped_rows}")


@upload_group.command("dictionary")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@_common_options
@click.pass_context
def upload_dictionary(ctx, file: str, application: str, empty_row_limit: int | None, as_json: bool):
    """Upload a response code dictionary.

    FILE is an .xlsx, .xls or .csv file with the columns Jenis Transaksi, RC,
    S/N and optionally RC Description. Existing entries are updated.

    Examples:
        rcdash upload dictionary dictionary.xlsx --app "Bale"
    """
    db = ctx.obj["db"]
    try:
        application_id = resolve_application(ApplicationService(db), application)
        report = DictionaryUploadService(db).upload(
            Path(file).name,
            Path(file).read_bytes(),
            application_id,
            empty_row_limit=empty_row_limit,
        )
    except DomainError as e:
        handle_domain_error(ctx, e, as_json=as_json)
    else:
        _echo_report(report, as_json, success_rate=False)


@upload_group.command("success-rate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@_common_options
@click.option(
    "--lenient",
    is_flag=True,
    help="Skip invalid rows instead of rejecting the whole upload",
)
@click.pass_context
def upload_success_rate(
    ctx, file: str, application: str, empty_row_limit: int | None, as_json: bool, lenient: bool
):
    """Upload a success-rate report.

    FILE is an .xlsx, .xls or .csv file with the columns Tanggal Transaksi,
    Jenis Transaksi, RC, total transaksi, Total Nominal, Total Biaya Admin,
    Status Transaksi and optionally RC Description.

    By default a single invalid row rejects the whole file and nothing is
    saved. Use --lenient to skip invalid rows instead.

    Examples:
        rcdash upload success-rate january.xlsx --app "Bale"
        rcdash upload success-rate january.csv --app 1 --json
    """
    db = ctx.obj["db"]
    policy = get_policy("lenient" if lenient else "strict")
    try:
        application_id = resolve_application(ApplicationService(db), application)
        report = SuccessRateUploadService(db).upload(
            Path(file).name,
            Path(file).read_bytes(),
            application_id,
            policy=policy,
            empty_row_limit=empty_row_limit,
        )
    except DomainError as e:
        handle_domain_error(ctx, e, as_json=as_json)
    else:
        _echo_report(report, as_json, success_rate=True)


def register_commands(cli):
    """Register upload commands with main CLI."""
    cli.add_command(upload_group, name="upload")
