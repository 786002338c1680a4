"""Statement import commands."""

import csv
from pathlib import Path

import click
from budgetledger.domain.account import AccountService
from budgetledger.domain.entities import ImportBatch, ReviewAction, ReviewDecision
from budgetledger.domain.errors import DomainError
from budgetledger.domain.importer import INVALID, ImportService
from budgetledger.cli.account_resolution import resolve_account_or_exit
from budgetledger.cli.error_handling import handle_domain_error

REQUIRED_COLUMNS = {"date", "amount", "description"}


def read_records(csv_file: str) -> list[dict[str, str]]:
    """Read a normalized statement CSV with date, amount, description and optional hash columns."""
    with open(Path(csv_file), "r", encoding="utf-8-sig", newline="") as f:
        # Try to detect delimiter
        sample = f.read(1024)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
        except csv.Error:
            delimiter = ","

        reader = csv.DictReader(f, delimiter=delimiter)
        if reader.fieldnames is None:
            raise ValueError("CSV file has no columns")
        columns = {name.strip().lower() for name in reader.fieldnames}
        missing = REQUIRED_COLUMNS - columns
        if missing:
            raise ValueError(f"CSV file missing required columns: {', '.join(sorted(missing))}")

        return [
            {key.strip().lower(): value for key, value in row.items() if key is not None}
            for row in reader
        ]


def parse_action(ctx, param, values: tuple[str, ...]) -> dict[int, ReviewDecision]:
    """Parse ``ROW=create|skip|merge[:ENTRY_ID]`` options into review decisions."""
    decisions: dict[int, ReviewDecision] = {}
    for value in values:
        row_text, sep, action_text = value.partition("=")
        action_name, _, entry_text = action_text.partition(":")
        try:
            row = int(row_text)
            action = ReviewAction(action_name.strip().lower())
            entry_id = int(entry_text) if entry_text else None
        except ValueError:
            raise click.BadParameter(f"'{value}' is not ROW=create|skip|merge[:ENTRY_ID]") from None
        if not sep or (entry_id is not None and action != ReviewAction.MERGE):
            raise click.BadParameter(f"'{value}' is not ROW=create|skip|merge[:ENTRY_ID]")
        decisions[row] = ReviewDecision(action=action, matched_entry_id=entry_id)
    return decisions


def _echo_batch(batch: ImportBatch) -> None:
    click.echo(f"Import {batch.id} ({batch.status.value})")
    click.echo(f"  File: {batch.filename or '-'} [{batch.file_type}]")
    click.echo(f"  Account ID: {batch.account_id}")
    click.echo(f"  Rows: {batch.total_rows}")
    click.echo("-" * 90)
    click.echo(f"{'Row':<5} {'Verdict':<10} {'Date':<12} {'Amount':>12} {'Entry':<7} {'Description':<40}")
    click.echo("-" * 90)
    for item in batch.records:
        if item["verdict"] == INVALID:
            click.echo(f"{item['row']:<5} {INVALID:<10} {item['error']}")
            continue
        entry = str(item["matched_entry_id"]) if item.get("matched_entry_id") else ""
        click.echo(
            f"{item['row']:<5} {item['verdict']:<10} {item['date']:<12} {item['amount']:>12} "
            f"{entry:<7} {item['description'][:40]:<40}"
        )


@click.group()
def import_group():
    """Import bank statements."""
    pass


@import_group.command("analyze")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--date-tolerance",
    type=click.IntRange(min=0),
    envvar="BUDGETLEDGER_DATE_TOLERANCE",
    help="Only match manual transactions within this many days",
)
@click.option("--decimal-separator", type=click.Choice([".", ","]), default=".", show_default=True)
@click.option("--dayfirst", is_flag=True, help="Read ambiguous dates as day/month/year")
@click.option("--invert-amounts", is_flag=True, help="Flip the sign of every amount")
@click.pass_context
def analyze_import(
    ctx,
    csv_file: str,
    account: str,
    date_tolerance: int | None,
    decimal_separator: str,
    dayfirst: bool,
    invert_amounts: bool,
):
    """Analyze a statement CSV against an account.

    The CSV needs date, amount and description columns, and may carry a
    hash column with the bank's own transaction identifier. Every row is
    classified as new, duplicate or match; nothing is written to the ledger
    until 'import commit'.

    Examples:
        budgetledger import analyze statement.csv --account Checking
        budgetledger import analyze export.csv --account 2 --decimal-separator , --dayfirst
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = ImportService(db, date_tolerance_days=date_tolerance)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    account_obj = account_service.get_account(account_id)

    try:
        records = read_records(csv_file)
    except (ValueError, csv.Error) as e:
        handle_domain_error(ctx, ValueError(str(e)))

    config = {
        "decimal_separator": decimal_separator,
        "dayfirst": dayfirst,
        "invert_amounts": invert_amounts,
        "date_tolerance": date_tolerance,
    }
    try:
        analysis = service.analyze_import(
            owner_id=account_obj.owner_id,
            account_id=account_id,
            records=records,
            filename=Path(csv_file).name,
            file_type="csv",
            config=config,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    summary = analysis.summary
    _echo_batch(analysis.batch)
    click.echo("-" * 90)
    click.echo(
        f"Total: {summary['total']} | New: {summary['new']} | Duplicate: {summary['duplicate']} | "
        f"Match: {summary['match']} | Invalid: {summary['invalid']}"
    )
    click.echo(f"\nReview, then run: budgetledger import commit {analysis.batch.id} --action ROW=ACTION ...")


@import_group.command("show")
@click.argument("batch_id", type=int)
@click.pass_context
def show_import(ctx, batch_id: int):
    """Show an import batch with its rows and processing log."""
    service = ImportService(ctx.obj["db"])

    batch = service.get_batch(batch_id)
    if batch is None:
        click.echo(f"Error: Import {batch_id} not found", err=True)
        ctx.exit(1)

    _echo_batch(batch)
    if batch.completed_at is not None:
        click.echo("-" * 90)
        click.echo(
            f"Imported: {batch.imported_count} (merged: {batch.merged_count}) | "
            f"Duplicate: {batch.duplicate_count} | Skipped: {batch.skipped_count} | "
            f"Errors: {batch.error_count}"
        )
    if batch.processing_log:
        click.echo("\nLog:")
        for message in batch.processing_log:
            click.echo(f"  {message}")


@import_group.command("list")
@click.option("--account", help="Account name or ID")
@click.pass_context
def list_imports(ctx, account: str | None):
    """List import batches, newest first."""
    db = ctx.obj["db"]
    service = ImportService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account) if account else None

    batches = service.list_batches(account_id=account_id)
    if not batches:
        click.echo("No imports found.")
        return
    for batch in batches:
        click.echo(
            f"ID: {batch.id:3d} | {batch.status.value:<10} | {batch.filename or '-':<24} | "
            f"Rows: {batch.total_rows} | Created: {batch.created_at:%Y-%m-%d %H:%M}"
        )


@import_group.command("commit")
@click.argument("batch_id", type=int)
@click.option(
    "--action",
    "decisions",
    multiple=True,
    callback=parse_action,
    help="Review decision ROW=create|skip|merge[:ENTRY_ID]; repeat per row. Rows without one are skipped.",
)
@click.pass_context
def commit_import(ctx, batch_id: int, decisions: dict[int, ReviewDecision]):
    """Commit an analyzed import using review decisions.

    'merge' without ENTRY_ID uses the transaction suggested during analysis.

    Examples:
        budgetledger import commit 1 --action 1=create --action 2=merge --action 3=skip
        budgetledger import commit 1 --action 2=merge:17
    """
    service = ImportService(ctx.obj["db"])

    try:
        result = service.commit_import(batch_id, decisions)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported_count} transactions ({result.merged_count} merged)")
    click.echo(f"  Duplicates: {result.duplicate_count}")
    click.echo(f"  Skipped: {result.skipped_count}")
    if result.errors:
        click.echo(f"  Errors: {result.error_count}")
        for error in result.errors:
            click.echo(f"    Row {error['row']}: {error['error']}", err=True)


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_group, name="import")
