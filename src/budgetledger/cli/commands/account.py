"""Account management commands."""

import click
from budgetledger.domain.account import AccountService
from budgetledger.domain.errors import DomainError
from budgetledger.cli.account_resolution import resolve_owner_or_exit
from budgetledger.cli.error_handling import handle_domain_error


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--owner", required=True, help="Owner name or ID")
@click.option("--bank", help="Bank name (defaults to account name if not provided)")
@click.pass_context
def create_account(ctx, name: str, owner: str, bank: str | None):
    """Create a new account.

    If --bank is not provided, the bank name will be set to the account name.

    Examples:
        budgetledger account create "Checking" --owner alice
        budgetledger account create "Savings" --owner 1 --bank "Wells Fargo"
    """
    service = AccountService(ctx.obj["db"])
    owner_id = resolve_owner_or_exit(ctx, service, owner)

    # If bank not provided, use account name as bank name
    bank_name = bank if bank is not None else name

    try:
        account_id = service.create_account(owner_id=owner_id, name=name, bank_name=bank_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")
    if bank is None:
        click.echo(f"Bank name set to '{bank_name}'")


@account_group.command("list")
@click.option("--owner", help="Only list accounts of this owner (name or ID)")
@click.pass_context
def list_accounts(ctx, owner: str | None):
    """List accounts."""
    service = AccountService(ctx.obj["db"])
    owner_id = resolve_owner_or_exit(ctx, service, owner) if owner else None

    accounts = service.list_accounts(owner_id=owner_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | Bank: {acc.bank_name}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
