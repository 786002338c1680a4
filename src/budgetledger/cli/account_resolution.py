"""CLI helpers for owner and account resolution."""

from __future__ import annotations

import click
from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.domain.account import AccountService
from budgetledger.utils.account_resolver import resolve_account


def resolve_owner_or_exit(ctx: click.Context, account_service: AccountService, owner: str | int) -> int:
    """Resolve owner name or ID, or exit with a CLI error."""
    try:
        owner_id = int(owner)
    except (ValueError, TypeError):
        found = account_service.get_owner_by_name(str(owner))
    else:
        found = account_service.get_owner(owner_id)

    if found is None:
        click.echo(f"Error: Owner '{owner}' not found", err=True)
        ctx.exit(1)
    return found.id


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int, owner_id: int | None = None
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account, owner_id=owner_id)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
