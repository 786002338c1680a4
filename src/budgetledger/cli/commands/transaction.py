"""Transaction management commands."""

import click
from budgetledger.domain.transaction import TransactionService, UNSET
from budgetledger.domain.account import AccountService
from budgetledger.domain.entities import EntryStatus, EntryType
from budgetledger.domain.errors import DomainError
from budgetledger.cli.account_resolution import resolve_account_or_exit
from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.utils.date_parser import parse_date
from budgetledger.utils.amount_parser import parse_amount

TYPE_CHOICE = click.Choice([t.value for t in EntryType])
STATUS_CHOICE = click.Choice([EntryStatus.PENDING.value, EntryStatus.CLEARED.value, EntryStatus.VOID.value])


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--type", "entry_type", type=TYPE_CHOICE, default=EntryType.EXPENSE.value, show_default=True)
@click.option("--description", default="", help="Transaction description")
@click.option("--status", type=STATUS_CHOICE, default=EntryStatus.PENDING.value, show_default=True)
@click.option("--to-account", help="Destination account name or ID (transfers only)")
@click.option("--category-id", type=int, help="Category ID")
@click.option("--payee-id", type=int, help="Payee ID")
@click.option("--notes", help="Notes")
@click.option("--check-number", help="Check number")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    date: str,
    amount: str,
    entry_type: str,
    description: str,
    status: str,
    to_account: str | None,
    category_id: int | None,
    payee_id: int | None,
    notes: str | None,
    check_number: str | None,
):
    """Add a transaction manually.

    Expense amounts are stored negative and income amounts positive. A
    transfer with --to-account gets a linked counter-transaction on the
    destination account.

    Examples:
        budgetledger transaction add --account 1 --date 2026-01-14 --amount 50.00 --description "Grocery store"
        budgetledger transaction add --account Checking --date today --amount -200 --type transfer --to-account Savings
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    account_obj = account_service.get_account(account_id)
    to_account_id = None
    if to_account:
        to_account_id = resolve_account_or_exit(ctx, account_service, to_account, owner_id=account_obj.owner_id)

    try:
        txn_date = parse_date(date)
        txn_amount = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)

    try:
        transaction_id = transaction_service.create_transaction(
            owner_id=account_obj.owner_id,
            account_id=account_id,
            date=txn_date,
            amount=txn_amount,
            type=entry_type,
            description=description,
            status=status,
            category_id=category_id,
            payee_id=payee_id,
            notes=notes,
            check_number=check_number,
            to_account_id=to_account_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn = transaction_service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Account: {account_obj.name}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {txn.amount:,.2f}")
    if txn.linked_entry_id is not None:
        click.echo(f"  Linked transaction: {txn.linked_entry_id}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--amount", help="Transaction amount")
@click.option("--description", help="Transaction description")
@click.option("--type", "entry_type", type=TYPE_CHOICE, help="Transaction type")
@click.option("--status", type=STATUS_CHOICE, help="Transaction status")
@click.option("--to-account", help="Destination account name or ID, or empty string to unlink")
@click.option("--category-id", type=int, help="Category ID")
@click.option("--payee-id", type=int, help="Payee ID")
@click.option("--notes", help="Notes")
@click.option("--check-number", help="Check number")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    account: str | None,
    date: str | None,
    amount: str | None,
    description: str | None,
    entry_type: str | None,
    status: str | None,
    to_account: str | None,
    category_id: int | None,
    payee_id: int | None,
    notes: str | None,
    check_number: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. On a linked transfer the
    description, date and amount are mirrored onto the other transaction.
    Use --to-account "" to remove the linked counter-transaction.

    Examples:
        budgetledger transaction update 1 --amount 75.00
        budgetledger transaction update 3 --to-account Savings
        budgetledger transaction update 3 --to-account ""
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    existing = transaction_service.get_transaction(transaction_id)
    if existing is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account, owner_id=existing.owner_id)

    to_account_id = UNSET
    if to_account is not None:
        to_account_id = None
        if to_account != "":
            to_account_id = resolve_account_or_exit(ctx, account_service, to_account, owner_id=existing.owner_id)

    try:
        txn_date = parse_date(date) if date is not None else None
        txn_amount = parse_amount(amount) if amount is not None else None
    except ValueError as e:
        handle_domain_error(ctx, e)

    try:
        transaction_service.update_transaction(
            transaction_id,
            account_id=account_id,
            date=txn_date,
            amount=txn_amount,
            description=description,
            type=entry_type,
            status=status,
            category_id=category_id,
            payee_id=payee_id,
            notes=notes,
            check_number=check_number,
            to_account_id=to_account_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--status", type=click.Choice([s.value for s in EntryStatus]), help="Only this status")
@click.option("--reconciled/--unreconciled", default=None, help="Only reconciled or unreconciled transactions")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    status: str | None,
    reconciled: bool | None,
):
    """View transactions with optional filters."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None

    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        handle_domain_error(ctx, e)

    transactions = service.list_transactions(
        account_id=account_id,
        start_date=start,
        end_date=end,
        status=status,
        is_reconciled=reconciled,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12} {'Account':<16} {'Type':<9} {'Status':<11} {'Description':<30}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        marker = f" <-> {txn.linked_entry_id}" if txn.linked_entry_id is not None else ""
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {txn.amount:>12,.2f} "
            f"{accounts.get(txn.account_id, 'Unknown'):<16} {txn.type.value:<9} "
            f"{txn.status.value:<11} {(txn.description or '')[:30]:<30}{marker}"
        )


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction.

    Deleting one side of a linked transfer deletes both.

    Examples:
        budgetledger transaction delete 1
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    prompt = f"Are you sure you want to delete transaction {transaction_id}?"
    if txn.linked_entry_id is not None:
        prompt = (
            f"Transaction {transaction_id} is a linked transfer; transaction "
            f"{txn.linked_entry_id} will be deleted too. Continue?"
        )
    if not yes and not click.confirm(prompt):
        click.echo("Deletion cancelled.")
        return

    try:
        deleted = transaction_service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction(s) {', '.join(str(i) for i in deleted)}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
