"""Utility for resolving account names to IDs."""

from typing import Optional
from budgetledger.domain.account import AccountService
from budgetledger.domain.errors import NotFoundError, ValidationError


def resolve_account(account_service: AccountService, account: str | int, owner_id: Optional[int] = None) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)
        owner_id: Restrict name lookups to one owner's accounts

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    matches = [acc for acc in account_service.list_accounts(owner_id=owner_id) if acc.name == account]
    if not matches:
        raise NotFoundError(f"Account '{account}' not found")
    if len(matches) > 1:
        raise ValidationError(f"Account name '{account}' is ambiguous; use the account ID")
    return matches[0].id
