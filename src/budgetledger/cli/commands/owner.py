"""Owner management commands."""

import click
from budgetledger.domain.account import AccountService
from budgetledger.domain.errors import DomainError
from budgetledger.cli.error_handling import handle_domain_error


@click.group()
def owner_group():
    """Manage ledger owners."""
    pass


@owner_group.command("create")
@click.argument("name", metavar="OWNER_NAME")
@click.pass_context
def create_owner(ctx, name: str):
    """Create a new ledger owner.

    Examples:
        budgetledger owner create "alice"
    """
    service = AccountService(ctx.obj["db"])

    try:
        owner_id = service.create_owner(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created owner '{name}' (ID: {owner_id})")


def register_commands(cli):
    """Register owner commands with main CLI."""
    cli.add_command(owner_group, name="owner")
