"""Reconciliation commands."""

import click
from budgetledger.domain.errors import DomainError
from budgetledger.domain.reconciliation import ReconciliationService
from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.utils.date_parser import parse_date


@click.group()
def reconcile_group():
    """Reconcile transactions against bank statements."""
    pass


@reconcile_group.command("toggle")
@click.argument("transaction_id", type=int)
@click.pass_context
def toggle_reconcile(ctx, transaction_id: int):
    """Mark a transaction reconciled, or un-reconcile it.

    Examples:
        budgetledger reconcile toggle 12
    """
    service = ReconciliationService(ctx.obj["db"])

    try:
        entry = service.toggle(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if entry.is_reconciled:
        click.echo(f"Reconciled transaction {transaction_id}")
    else:
        click.echo(f"Un-reconciled transaction {transaction_id} (status: {entry.status.value})")


@reconcile_group.command("batch")
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.option("--date", "statement_date", required=True, help="Statement date (YYYY-MM-DD)")
@click.pass_context
def batch_reconcile(ctx, transaction_ids: tuple[int, ...], statement_date: str):
    """Reconcile several transactions against one statement date.

    Unknown transaction IDs are ignored.

    Examples:
        budgetledger reconcile batch 3 4 7 --date 2026-01-20
    """
    service = ReconciliationService(ctx.obj["db"])

    try:
        reconcile_date = parse_date(statement_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    updated = service.batch_reconcile(list(transaction_ids), reconcile_date)
    click.echo(f"Reconciled {updated} of {len(transaction_ids)} transaction(s) as of {reconcile_date}")


def register_commands(cli):
    """Register reconcile commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
